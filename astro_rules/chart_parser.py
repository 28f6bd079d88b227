"""Parsing utilities for JSON chart files produced by an ephemeris service."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from .analysis.sect import chart_sect, is_day_chart
from .errors import ChartFileError
from .models import ChartInput, PlanetPosition
from .zodiac import normalize_longitude


def load_chart(path: str | Path) -> ChartInput:
    """Parse a chart file into a normalized ChartInput."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"chart file not found: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ChartFileError(f"{file_path}: not UTF-8 text") from exc
    except OSError as exc:
        raise ChartFileError(f"{file_path}: cannot read file ({exc.strerror or exc})") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ChartFileError(f"{file_path}: not valid JSON ({exc.msg} at line {exc.lineno})") from exc

    return chart_from_dict(data, default_name=file_path.stem)


def chart_from_dict(data: Any, default_name: str = "chart") -> ChartInput:
    """
    Build a ChartInput from decoded JSON.

    Expected shape:
        {"name": str?, "is_day_chart": bool?, "ascendant": float?, "sun_house": int?,
         "planets": [{"planet": str, "longitude": float, "speed": float?, "retrograde": bool?}, ...]}

    Sect comes from ``is_day_chart`` when present, else from ``ascendant`` and
    the Sun's longitude, else from ``sun_house``.
    """
    if not isinstance(data, dict):
        raise ChartFileError("chart must be a JSON object")

    raw_planets = data.get("planets")
    if not isinstance(raw_planets, list) or not raw_planets:
        raise ChartFileError("chart needs a non-empty 'planets' list")

    positions = tuple(_parse_position(entry, idx) for idx, entry in enumerate(raw_planets))
    names = [p.planet for p in positions]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ChartFileError(f"planets listed more than once: {', '.join(duplicates)}")

    ascendant = data.get("ascendant")
    if ascendant is not None:
        ascendant = normalize_longitude(_number(ascendant, "ascendant"))

    return ChartInput(
        name=str(data.get("name") or default_name),
        positions=positions,
        is_day_chart=_resolve_sect(data, positions, ascendant),
        ascendant=ascendant,
    )


def _parse_position(entry: Any, idx: int) -> PlanetPosition:
    if not isinstance(entry, dict):
        raise ChartFileError(f"planets[{idx}] must be an object")
    planet = entry.get("planet")
    if not isinstance(planet, str) or not planet:
        raise ChartFileError(f"planets[{idx}] is missing a 'planet' name")
    if "longitude" not in entry:
        raise ChartFileError(f"planets[{idx}] ({planet}) is missing 'longitude'")

    longitude = _number(entry["longitude"], f"{planet}.longitude")
    speed = entry.get("speed")
    if speed is not None:
        speed = _number(speed, f"{planet}.speed")
    retrograde = entry.get("retrograde")
    if retrograde is not None and not isinstance(retrograde, bool):
        raise ChartFileError(f"{planet}.retrograde must be true or false")

    return PlanetPosition.from_longitude(planet, longitude, speed=speed, retrograde=retrograde)


def _resolve_sect(data: dict, positions: tuple[PlanetPosition, ...], ascendant: float | None) -> bool:
    flag = data.get("is_day_chart")
    if flag is not None:
        if not isinstance(flag, bool):
            raise ChartFileError("'is_day_chart' must be true or false")
        return flag

    sun = next((p for p in positions if p.planet == "Sun"), None)
    if ascendant is not None and sun is not None:
        return is_day_chart(ascendant, sun.longitude)

    sun_house = data.get("sun_house")
    if sun_house is not None:
        if isinstance(sun_house, bool) or not isinstance(sun_house, int) or not 1 <= sun_house <= 12:
            raise ChartFileError("'sun_house' must be an integer between 1 and 12")
        return chart_sect(sun_house) == "day"

    raise ChartFileError(
        "cannot tell day from night: give 'is_day_chart', or 'ascendant' with a Sun position, or 'sun_house'"
    )


def _number(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ChartFileError(f"{label} must be a number, got {value!r}")
    # json accepts NaN and Infinity
    if not math.isfinite(value):
        raise ChartFileError(f"{label} must be a finite number, got {value!r}")
    return float(value)
