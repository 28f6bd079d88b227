"""Element and modality balance, retrogrades and a one-glance chart summary."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

from ..models import ChartInput, ChartSummary, DetectedAspect, PlanetPosition
from ..zodiac import ELEMENTS, MODALITIES, SIGN_ELEMENTS, SIGN_MODALITIES, sign_from_longitude, sign_index


def planets_in_sign(positions: Iterable[PlanetPosition], sign: str) -> List[str]:
    sign_index(sign)
    return [p.planet for p in positions if p.sign == sign]


def retrograde_planets(positions: Iterable[PlanetPosition]) -> List[str]:
    return [p.planet for p in positions if p.retrograde]


def element_distribution(positions: Iterable[PlanetPosition]) -> Dict[str, int]:
    """Planet count per element; every element is present."""

    counts = {element: 0 for element in ELEMENTS}
    for p in positions:
        counts[SIGN_ELEMENTS[p.sign]] += 1
    return counts


def modality_distribution(positions: Iterable[PlanetPosition]) -> Dict[str, int]:
    counts = {modality: 0 for modality in MODALITIES}
    for p in positions:
        counts[SIGN_MODALITIES[p.sign]] += 1
    return counts


def _dominant(counts: Mapping[str, int]) -> str:
    # max() keeps the first of equal counts, so scan backwards: ties go to the later key
    return max(reversed(list(counts)), key=lambda name: counts[name])


def chart_summary(chart: ChartInput, aspects: Sequence[DetectedAspect]) -> ChartSummary:
    """
    Summarize a chart: Sun, Moon and rising signs, dominant element and
    modality, how many planets are retrograde and how many aspects were found.

    Signs are None when the Sun, the Moon or the ascendant is not in the chart.
    """
    sun = chart.position_of("Sun")
    moon = chart.position_of("Moon")
    return ChartSummary(
        sun_sign=sun.sign if sun is not None else None,
        moon_sign=moon.sign if moon is not None else None,
        rising_sign=sign_from_longitude(chart.ascendant) if chart.ascendant is not None else None,
        dominant_element=_dominant(element_distribution(chart.positions)),
        dominant_modality=_dominant(modality_distribution(chart.positions)),
        retrograde_count=len(retrograde_planets(chart.positions)),
        aspect_count=len(aspects),
    )
