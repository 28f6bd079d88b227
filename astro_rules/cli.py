"""Command line entry point for scoring chart files."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import chart_parser, output
from .analysis import build_reports
from .analysis.aspects import ASPECT_DEFINITIONS, MAJOR_ASPECTS
from .analysis.compatibility import score_compatibility
from .analysis.summary import chart_summary
from .config import load_settings
from .errors import AstroRulesError
from .models import ChartInput


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="astro-rules",
        description="Essential dignities, aspects and synastry for charts stored as JSON.",
    )
    parser.add_argument("chart", help="Chart JSON file.")
    parser.add_argument("--partner", help="Second chart JSON file; adds a synastry report.")
    parser.add_argument(
        "--major-only",
        action="store_true",
        default=None,
        help="Only the five major aspects (default: ASTRO_RULES_INCLUDE_MINOR, on).",
    )
    parser.add_argument("--text", action="store_true", help="Plain prompt lines instead of tables.")
    parser.add_argument("--html", help="Also export the report to this HTML file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point.

    Usage:
        astro-rules [--partner other.json] [--major-only] [--text] [--html out.html] chart.json
    """
    args = _build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    include_minor = settings.include_minor_aspects if args.major_only is None else not args.major_only
    definitions = ASPECT_DEFINITIONS if include_minor else MAJOR_ASPECTS

    chart = _load_or_exit(args.chart)
    partner = _load_or_exit(args.partner) if args.partner else None

    reports, aspects = build_reports(chart, definitions)
    synastry = None
    if partner is not None:
        synastry = score_compatibility(chart, partner, definitions, settings.key_aspect_limit)

    if args.text:
        output.print_text_report(reports, aspects, chart_summary(chart, aspects))
        if synastry is not None:
            print()
            for line in output.build_synastry_lines(synastry):
                print(line)
    else:
        output.print_rich_report(chart, reports, aspects)
        if partner is not None and synastry is not None:
            print()
            output.print_synastry_report(chart, partner, synastry)

    if args.html:
        html_path = Path(args.html)
        if not html_path.is_absolute() and html_path.parent == Path("."):
            html_path = settings.output_dir / html_path
        html_path.parent.mkdir(parents=True, exist_ok=True)
        output.export_rich_html(html_path, chart, reports, aspects, partner, synastry)
        print(f"HTML report written to {html_path}")


def _load_or_exit(path_str: str) -> ChartInput:
    try:
        return chart_parser.load_chart(path_str)
    except FileNotFoundError:
        print(f"Error: file not found -> {path_str}")
        sys.exit(1)
    except AstroRulesError as exc:
        print(f"Error reading {path_str}: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
