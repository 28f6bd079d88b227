import json

import pytest

from astro_rules import output
from astro_rules.analysis import build_reports
from astro_rules.analysis.aspects import detect
from astro_rules.analysis.dignity import score_dignity
from astro_rules.analysis.summary import chart_summary
from astro_rules.cli import main
from astro_rules.models import ChartInput, PlanetPosition


def _chart() -> ChartInput:
    positions = (
        PlanetPosition.from_longitude("Sun", 135.5, speed=0.98),
        PlanetPosition.from_longitude("Moon", 197.0, speed=13.2),
        PlanetPosition.from_longitude("Mars", 25.0, speed=-0.1),
        PlanetPosition.from_longitude("Pluto", 255.5, speed=0.01),
    )
    return ChartInput(name="sample", positions=positions, is_day_chart=True, ascendant=100.0)


def _chart_json(tmp_path, name, planets):
    path = tmp_path / f"{name}.json"
    path.write_text(json.dumps({"name": name, "is_day_chart": True, "planets": planets}), encoding="utf-8")
    return path


def test_position_line_marks_retrograde():
    assert output.format_position_line(PlanetPosition.from_longitude("Sun", 135.5)) == "Sun: Leo 15°"
    assert output.format_position_line(PlanetPosition.from_longitude("Mars", 25.0, speed=-0.1)) == "Mars: Aries 25° (R)"


def test_aspect_line_shows_orb():
    aspect = detect(PlanetPosition.from_longitude("Sun", 10.0), PlanetPosition.from_longitude("Moon", 71.25))
    assert output.format_aspect_line(aspect) == "Sun Sextile Moon (orb: 1.25°)"
    exact = detect(PlanetPosition.from_longitude("Sun", 10.0), PlanetPosition.from_longitude("Moon", 70.0))
    assert output.format_aspect_line(exact) == "Sun Sextile Moon (orb: 0°)"


def test_dignity_line():
    assert output.format_dignity_line(score_dignity("Mars", "Aries", 25, True)) == "Mars: +7 (domicile, term)"
    assert output.format_dignity_line(score_dignity("Saturn", "Gemini", 15, False)) == "Saturn: -5 (peregrine)"
    assert output.format_dignity_line(score_dignity("Pluto", "Gemini", 15, False)) == "Pluto: no traditional dignity"


def test_prompt_lines_skip_modern_dignities():
    reports, aspects = build_reports(_chart())
    lines = output.build_prompt_lines(reports, aspects)

    assert lines[0] == "Planets:"
    assert "Mars: Aries 25° (R)" in lines
    assert "Pluto: Sagittarius 15°" in lines
    dignity_block = lines[lines.index("Essential dignities:") + 1 : lines.index("Aspects:")]
    assert not any(line.startswith("Pluto") for line in dignity_block)
    assert "Mars: +7 (domicile, term)" in dignity_block


def test_prompt_lines_open_with_summary():
    chart = _chart()
    reports, aspects = build_reports(chart)
    lines = output.build_prompt_lines(reports, aspects, chart_summary(chart, aspects))

    assert lines[0] == "Summary:"
    summary_block = lines[1 : lines.index("Planets:")]
    assert summary_block[:3] == ["Sun sign: Leo", "Moon sign: Libra", "Rising sign: Cancer"]
    assert "Dominant element: Fire" in summary_block
    assert "Dominant modality: Cardinal" in summary_block
    assert "Retrograde planets: 1" in summary_block
    assert f"Aspect count: {len(aspects)}" in summary_block


def test_reports_follow_chart_order():
    reports, aspects = build_reports(_chart())
    assert [r.position.planet for r in reports] == ["Sun", "Moon", "Mars", "Pluto"]
    sun = reports[0]
    assert sun.lords.domicile == "Sun"
    assert all(a.involves("Sun") for a in sun.aspects)
    assert not reports[3].dignity.applicable


def test_html_export(tmp_path):
    chart = _chart()
    reports, aspects = build_reports(chart)
    path = tmp_path / "report.html"

    output.export_rich_html(path, chart, reports, aspects)

    html = path.read_text(encoding="utf-8")
    assert "Essential Dignities" in html
    assert "Almuten of the Ascendant" in html


def test_cli_text_report(tmp_path, capsys):
    chart = _chart_json(
        tmp_path,
        "alpha",
        [{"planet": "Sun", "longitude": 135.5}, {"planet": "Mars", "longitude": 25.0, "speed": -0.1}],
    )
    partner = _chart_json(tmp_path, "beta", [{"planet": "Sun", "longitude": 15.5}, {"planet": "Venus", "longitude": 145.0}])

    main([str(chart), "--partner", str(partner), "--text"])

    out = capsys.readouterr().out
    assert "Mars: +7 (domicile, term)" in out
    assert "Overall compatibility:" in out
    assert "Sun signs: Leo / Aries" in out
    assert "Dominant element: Fire" in out


def test_cli_rich_report_with_html(tmp_path, capsys):
    chart = _chart_json(tmp_path, "alpha", [{"planet": "Sun", "longitude": 135.5}, {"planet": "Moon", "longitude": 15.5}])
    html_path = tmp_path / "out" / "alpha.html"

    main([str(chart), "--major-only", "--html", str(html_path)])

    out = capsys.readouterr().out
    assert "Essential Dignities" in out
    assert html_path.exists()


def test_cli_missing_file_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "missing.json"), "--text"])
    assert excinfo.value.code == 1
    assert "file not found" in capsys.readouterr().out


def test_cli_bad_chart_exits(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"planets": []}), encoding="utf-8")
    with pytest.raises(SystemExit):
        main([str(path), "--text"])
    assert "non-empty" in capsys.readouterr().out


def test_cli_rejects_bad_setting(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("ASTRO_RULES_KEY_ASPECTS", "none")
    chart = _chart_json(tmp_path, "alpha", [{"planet": "Sun", "longitude": 135.5}])
    with pytest.raises(SystemExit):
        main([str(chart), "--text"])
    assert "ASTRO_RULES_KEY_ASPECTS" in capsys.readouterr().out


def test_cli_undecodable_chart_exits(tmp_path, capsys):
    path = tmp_path / "garbled.json"
    path.write_bytes(b"\xff\xfe\x00{")
    with pytest.raises(SystemExit) as excinfo:
        main([str(path), "--text"])
    assert excinfo.value.code == 1
    assert "not UTF-8" in capsys.readouterr().out
