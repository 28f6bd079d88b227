"""Output helpers for presenting dignity, aspect and synastry results."""

from __future__ import annotations

import math
from pathlib import Path

import swisseph as swe
from rich import box
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from .almuten import find_almuten, mutual_receptions
from .analysis.aspects import ASPECTS_BY_NAME, count_aspects_by_type, tenseness
from .analysis.dignity import EXALTATION_DEGREES
from .analysis.summary import chart_summary, element_distribution, modality_distribution, retrograde_planets
from .models import (
    ChartInput,
    ChartSummary,
    CompatibilityResult,
    DetectedAspect,
    DignityScore,
    PlanetPosition,
    PlanetReport,
    SynastryAspect,
)
from .zodiac import PLANET_SYMBOLS, SIGN_SYMBOLS, degree_in_sign, sign_from_longitude

NATURE_STYLES = {
    "harmonious": "green",
    "challenging": "red",
    "neutral": "yellow",
}


def _format_number(value: float) -> str:
    """Two decimals at most, trailing zeros dropped."""

    return f"{round(value, 2):g}"


def _format_dms(longitude: float) -> str:
    """Degree and minutes within sign, e.g. 15°07'."""

    deg, minutes, _sec, _secfr, _sign = swe.split_deg(longitude, swe.SPLIT_DEG_ZODIACAL)
    return f"{deg:02d}°{minutes:02d}'"


def _planet_label(name: str) -> str:
    symbol = PLANET_SYMBOLS.get(name)
    return f"{symbol} {name}" if symbol else name


def _sign_label(sign: str) -> str:
    return f"{SIGN_SYMBOLS.get(sign, '')} {sign}".strip()


# Prompt-builder lines


def format_position_line(position: PlanetPosition) -> str:
    line = f"{position.planet}: {position.sign} {math.floor(position.degree_in_sign)}°"
    if position.retrograde:
        line += " (R)"
    return line


def format_aspect_line(aspect: DetectedAspect | SynastryAspect) -> str:
    return f"{aspect.planet1} {aspect.type} {aspect.planet2} (orb: {_format_number(aspect.exact_orb)}°)"


def format_dignity_line(score: DignityScore) -> str:
    if not score.applicable:
        return f"{score.planet}: no traditional dignity"
    labels = score.dignities + score.debilities
    return f"{score.planet}: {score.total:+d} ({', '.join(labels)})"


def format_summary_lines(summary: ChartSummary) -> list[str]:
    lines = []
    for label, sign in (("Sun", summary.sun_sign), ("Moon", summary.moon_sign), ("Rising", summary.rising_sign)):
        if sign is not None:
            lines.append(f"{label} sign: {sign}")
    lines.append(f"Dominant element: {summary.dominant_element}")
    lines.append(f"Dominant modality: {summary.dominant_modality}")
    lines.append(f"Retrograde planets: {summary.retrograde_count}")
    lines.append(f"Aspect count: {summary.aspect_count}")
    return lines


def build_prompt_lines(
    reports: list[PlanetReport],
    aspects: list[DetectedAspect],
    summary: ChartSummary | None = None,
) -> list[str]:
    """Flattened text for the interpretation prompt: summary, positions, dignities, aspects."""

    lines: list[str] = []
    if summary is not None:
        lines.append("Summary:")
        lines.extend(format_summary_lines(summary))
        lines.append("")
    lines.append("Planets:")
    lines.extend(format_position_line(rep.position) for rep in reports)
    lines.append("")
    lines.append("Essential dignities:")
    lines.extend(format_dignity_line(rep.dignity) for rep in reports if rep.dignity.applicable)
    lines.append("")
    lines.append("Aspects:")
    lines.extend(format_aspect_line(a) for a in aspects)
    return lines


def build_synastry_lines(result: CompatibilityResult) -> list[str]:
    lines = [f"Overall compatibility: {result.overall}/100"]
    if result.signs is not None:
        lines.append(
            f"Sun signs: {result.signs.sign_a} / {result.signs.sign_b} "
            f"(baseline {_format_number(result.signs.baseline)})"
        )
    for name, value in result.categories.as_dict().items():
        lines.append(f"{name.capitalize()}: {value}/100")
    summary = result.aspect_summary
    lines.append(
        f"Aspects: {summary.harmonious} harmonious, {summary.challenging} challenging, {summary.neutral} neutral"
    )
    lines.append("")
    lines.append("Key aspects:")
    lines.extend(format_aspect_line(a) for a in result.key_aspects)
    return lines


def print_text_report(
    reports: list[PlanetReport],
    aspects: list[DetectedAspect],
    summary: ChartSummary | None = None,
) -> None:
    for line in build_prompt_lines(reports, aspects, summary):
        print(line)


# Rich rendering


def _dignity_cell(score: DignityScore) -> str:
    if not score.applicable:
        return "[dim]n/a[/]"
    parts: list[str] = []
    for name in score.dignities:
        if name == "exaltation":
            parts.append(f"[bold green]exalted[/] ({EXALTATION_DEGREES[score.planet]}° {score.sign})")
        else:
            parts.append(f"[green]{name}[/]")
    for name in score.debilities:
        parts.append(f"[bold red]{name}[/]" if name != "peregrine" else "[dim]peregrine[/]")
    return ", ".join(parts)


def _render_chart(console: Console, chart: ChartInput, reports: list[PlanetReport], aspects: list[DetectedAspect]) -> None:
    sect = "day" if chart.is_day_chart else "night"
    console.print(f"[bold]Chart:[/] {chart.name}  [dim]({sect} chart)[/]")

    planet_table = Table(title="Essential Dignities", box=box.ROUNDED, expand=False, padding=(0, 1))
    planet_table.add_column("Planet", style="bold")
    planet_table.add_column("Position")
    planet_table.add_column("Lords (dom/exalt/trip/term/face)")
    planet_table.add_column("Dignity")
    planet_table.add_column("Score", justify="right")

    for rep in reports:
        pos = rep.position
        retro = " [red]R[/]" if pos.retrograde else ""
        lords = rep.lords
        lord_text = " / ".join(
            lord or "-" for lord in (lords.domicile, lords.exaltation, lords.triplicity, lords.term, lords.face)
        )
        total = f"{rep.dignity.total:+d}" if rep.dignity.applicable else "-"
        planet_table.add_row(
            _planet_label(pos.planet),
            f"{_sign_label(pos.sign)} {_format_dms(pos.longitude)}{retro}",
            lord_text,
            _dignity_cell(rep.dignity),
            total,
        )
    console.print(planet_table)

    aspect_table = Table(title="Aspects", box=box.SIMPLE_HEAVY, expand=False, padding=(0, 1))
    aspect_table.add_column("Aspect")
    aspect_table.add_column("Orb", justify="right")
    aspect_table.add_column("Allowed", justify="right")
    aspect_table.add_column("Strength", justify="right")
    aspect_table.add_column("Phase")
    for a in aspects:
        symbol = ASPECTS_BY_NAME[a.type].symbol
        aspect_table.add_row(
            f"{a.planet1} {symbol} {a.planet2} [dim]({a.type})[/]",
            f"{a.exact_orb:.2f}°",
            f"{a.effective_orb:.2f}°",
            f"{a.strength:.2f}",
            "applying" if a.applying else "[dim]separating[/]",
        )
    console.print(aspect_table)

    counts = {name: n for name, n in count_aspects_by_type(aspects).items() if n}
    if counts:
        console.print("Aspect counts: " + ", ".join(f"{name} {n}" for name, n in counts.items()))
    console.print(f"Tenseness: {tenseness(aspects):.2f}")

    summary = chart_summary(chart, aspects)
    elements = element_distribution(chart.positions)
    modalities = modality_distribution(chart.positions)
    console.print(
        "Elements: " + ", ".join(f"{name} {n}" for name, n in elements.items())
        + f"  [dim](dominant {summary.dominant_element})[/]"
    )
    console.print(
        "Modalities: " + ", ".join(f"{name} {n}" for name, n in modalities.items())
        + f"  [dim](dominant {summary.dominant_modality})[/]"
    )
    if summary.retrograde_count:
        retro = ", ".join(retrograde_planets(chart.positions))
        console.print(f"Retrograde: {retro}")

    receptions = mutual_receptions(chart.positions)
    if receptions:
        console.print("Mutual reception: " + "; ".join(f"{a} <-> {b}" for a, b in receptions))

    if chart.ascendant is not None:
        asc = chart.ascendant
        almuten = find_almuten(sign_from_longitude(asc), degree_in_sign(asc), chart.is_day_chart)
        console.print(f"Almuten of the Ascendant: [bold]{almuten}[/]")


def _render_synastry(
    console: Console, chart_a: ChartInput, chart_b: ChartInput, result: CompatibilityResult
) -> None:
    console.print(f"[bold]Synastry:[/] {chart_a.name} x {chart_b.name}")
    if result.signs is not None:
        s = result.signs
        console.print(
            f"Sun signs {_sign_label(s.sign_a)} / {_sign_label(s.sign_b)}: matrix {s.matrix}, "
            f"element {s.element}, modality {s.modality}, polarity {s.polarity} "
            f"-> baseline {_format_number(s.baseline)}"
        )

    score_table = Table(title="Compatibility", box=box.ROUNDED, expand=False, padding=(0, 1))
    score_table.add_column("Category")
    score_table.add_column("Score", justify="right")
    for name, value in result.categories.as_dict().items():
        score_table.add_row(name.capitalize(), str(value))
    score_table.add_row("[bold]Overall[/]", f"[bold]{result.overall}[/]")
    console.print(score_table)

    summary = result.aspect_summary
    console.print(
        f"[green]{summary.harmonious} harmonious[/], [red]{summary.challenging} challenging[/], "
        f"[yellow]{summary.neutral} neutral[/]"
    )

    key_table = Table(title="Key Aspects", box=box.SIMPLE_HEAVY, expand=False, padding=(0, 1))
    key_table.add_column(chart_a.name)
    key_table.add_column("Aspect")
    key_table.add_column(chart_b.name)
    key_table.add_column("Orb", justify="right")
    key_table.add_column("Strength", justify="right")
    key_table.add_column("Categories")
    for item in result.key_aspects:
        style = NATURE_STYLES[item.nature]
        key_table.add_row(
            item.planet1,
            f"[{style}]{item.type}[/]",
            item.planet2,
            f"{item.exact_orb:.2f}°",
            f"{item.strength:.2f}",
            ", ".join(item.categories) or "[dim]-[/]",
        )
    console.print(key_table)

    if result.strongest_connection is not None:
        console.print("Strongest connection: " + format_aspect_line(result.strongest_connection))
    if result.main_challenge is not None:
        console.print("Main challenge: " + format_aspect_line(result.main_challenge))


def print_rich_report(
    chart: ChartInput,
    reports: list[PlanetReport],
    aspects: list[DetectedAspect],
    console: Console | None = None,
) -> None:
    """Render the dignity and aspect tables for one chart."""

    _render_chart(console or Console(), chart, reports, aspects)


def print_synastry_report(
    chart_a: ChartInput,
    chart_b: ChartInput,
    result: CompatibilityResult,
    console: Console | None = None,
) -> None:
    _render_synastry(console or Console(), chart_a, chart_b, result)


def export_rich_html(
    path: str | Path,
    chart: ChartInput,
    reports: list[PlanetReport],
    aspects: list[DetectedAspect],
    partner: ChartInput | None = None,
    synastry: CompatibilityResult | None = None,
) -> None:
    """Export the rich report (and synastry, if given) to an HTML file."""

    console = Console(record=True, theme=Theme({}), width=120)
    _render_chart(console, chart, reports, aspects)
    if partner is not None and synastry is not None:
        console.print()
        _render_synastry(console, chart, partner, synastry)
    Path(path).write_text(console.export_html(inline_styles=True), encoding="utf-8")
