from __future__ import annotations

import logging
from collections import Counter
from itertools import combinations
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence

import swisseph as swe

from ..models import AspectDefinition, DetectedAspect, PlanetPosition

logger = logging.getLogger(__name__)

MAJOR_ASPECTS: tuple[AspectDefinition, ...] = (
    AspectDefinition("Conjunction", 0.0, 10.0, "neutral", True, "☌"),
    AspectDefinition("Sextile", 60.0, 6.0, "harmonious", True, "⚹"),
    AspectDefinition("Square", 90.0, 8.0, "challenging", True, "□"),
    AspectDefinition("Trine", 120.0, 8.0, "harmonious", True, "△"),
    AspectDefinition("Opposition", 180.0, 10.0, "challenging", True, "☍"),
)

MINOR_ASPECTS: tuple[AspectDefinition, ...] = (
    AspectDefinition("Semi-Sextile", 30.0, 2.0, "mildly_harmonious", False, "⚺"),
    AspectDefinition("Semi-Square", 45.0, 2.0, "mildly_challenging", False, "∠"),
    AspectDefinition("Sesquiquadrate", 135.0, 2.5, "challenging", False, "⚼"),
    AspectDefinition("Quincunx", 150.0, 3.0, "challenging", False, "⚻"),
    AspectDefinition("Quintile", 72.0, 1.0, "creative", False, "Q"),
    AspectDefinition("Bi-Quintile", 144.0, 1.0, "creative", False, "bQ"),
)

ASPECT_DEFINITIONS: tuple[AspectDefinition, ...] = MAJOR_ASPECTS + MINOR_ASPECTS
ASPECTS_BY_NAME: Mapping[str, AspectDefinition] = MappingProxyType(
    {definition.name: definition for definition in ASPECT_DEFINITIONS}
)

# Luminaries widest, minor bodies tightest
ORB_MODIFIERS: Mapping[str, float] = MappingProxyType(
    {
        "Sun": 1.2,
        "Moon": 1.2,
        "Mercury": 1.0,
        "Venus": 1.0,
        "Mars": 1.0,
        "Jupiter": 0.9,
        "Saturn": 0.9,
        "Uranus": 0.75,
        "Neptune": 0.75,
        "Pluto": 0.75,
        "Chiron": 0.6,
        "NorthNode": 0.6,
        "SouthNode": 0.6,
    }
)
DEFAULT_ORB_MODIFIER = 1.0

TENSE_ASPECTS = frozenset({"Opposition", "Square", "Semi-Square", "Sesquiquadrate", "Quincunx"})

# Projection step (days) used to decide whether an aspect is still forming.
APPLYING_STEP_DAYS = 0.1


def orb_modifier(planet: str) -> float:
    return ORB_MODIFIERS.get(planet, DEFAULT_ORB_MODIFIER)


def effective_orb(definition: AspectDefinition, planet_a: str, planet_b: str) -> float:
    """Base orb scaled by the average of both planets' modifiers."""

    return definition.base_orb * (orb_modifier(planet_a) + orb_modifier(planet_b)) / 2


def angular_separation(lon_a: float, lon_b: float) -> float:
    """Shortest arc between two longitudes, 0-180°."""

    diff = abs(lon_a - lon_b)
    return min(diff, 360.0 - diff)


def detect(
    pos_a: PlanetPosition | None,
    pos_b: PlanetPosition | None,
    definitions: Sequence[AspectDefinition] = ASPECT_DEFINITIONS,
) -> DetectedAspect | None:
    """
    Return the best-matching aspect between two positions of one chart.

    Missing positions and a planet paired with itself yield None.
    """
    if pos_a is None or pos_b is None:
        return None
    if pos_a.planet == pos_b.planet:
        return None
    return match_positions(pos_a, pos_b, definitions)


def match_positions(
    pos_a: PlanetPosition,
    pos_b: PlanetPosition,
    definitions: Sequence[AspectDefinition] = ASPECT_DEFINITIONS,
) -> DetectedAspect | None:
    """
    Match the separation of two positions against aspect definitions.

    Unlike :func:`detect` this accepts the same planet name on both sides,
    which is what a cross-chart comparison needs.

    Every definition whose angle lies within the effective orb qualifies;
    the tightest one wins and definition order breaks exact ties.
    """
    separation = angular_separation(pos_a.longitude, pos_b.longitude)

    best: tuple[AspectDefinition, float, float] | None = None
    for definition in definitions:
        diff = abs(separation - definition.angle)
        orb = effective_orb(definition, pos_a.planet, pos_b.planet)
        if diff > orb:
            continue
        if best is None or diff < best[1]:
            best = (definition, diff, orb)

    if best is None:
        return None

    definition, diff, orb = best
    strength = min(1.0, max(0.0, 1.0 - diff / orb))
    applying = is_applying(pos_a, pos_b, definition.angle)
    logger.debug(
        "%s %s %s sep=%.3f orb=%.3f/%.3f", pos_a.planet, definition.name, pos_b.planet, separation, diff, orb
    )
    return DetectedAspect(
        planet1=pos_a.planet,
        planet2=pos_b.planet,
        type=definition.name,
        angle=definition.angle,
        separation=separation,
        exact_orb=diff,
        effective_orb=orb,
        strength=strength,
        applying=applying,
    )


def is_applying(pos_a: PlanetPosition, pos_b: PlanetPosition, aspect_angle: float) -> bool:
    """
    Determine whether the aspect is moving toward exactness.

    Both bodies are projected forward by their daily speeds; the aspect is
    applying when the projected distance from the exact angle is smaller
    than the current one. Without speed data the aspect counts as applying.
    """
    if pos_a.speed is None or pos_b.speed is None:
        return True

    orb_now = abs(angular_separation(pos_a.longitude, pos_b.longitude) - aspect_angle)
    future_a = swe.degnorm(pos_a.longitude + pos_a.speed * APPLYING_STEP_DAYS)
    future_b = swe.degnorm(pos_b.longitude + pos_b.speed * APPLYING_STEP_DAYS)
    orb_next = abs(angular_separation(future_a, future_b) - aspect_angle)
    return orb_next < orb_now


def chart_aspects(
    positions: Sequence[PlanetPosition],
    definitions: Sequence[AspectDefinition] = ASPECT_DEFINITIONS,
) -> List[DetectedAspect]:
    """All aspects between distinct pairs of one chart, strongest first."""

    found: List[DetectedAspect] = []
    for first, second in combinations(positions, 2):
        aspect = detect(first, second, definitions)
        if aspect is not None:
            found.append(aspect)
    found.sort(key=lambda a: a.strength, reverse=True)
    return found


def aspects_for_planet(planet: str, aspects: Sequence[DetectedAspect]) -> List[DetectedAspect]:
    return [a for a in aspects if a.involves(planet)]


def aspects_by_type(aspect_type: str, aspects: Sequence[DetectedAspect]) -> List[DetectedAspect]:
    return [a for a in aspects if a.type == aspect_type]


def applying_aspects(aspects: Sequence[DetectedAspect]) -> List[DetectedAspect]:
    return [a for a in aspects if a.applying]


def count_aspects_by_type(aspects: Sequence[DetectedAspect]) -> Dict[str, int]:
    """Counts per aspect name; every known aspect is present, zero if unseen."""

    counts = Counter(a.type for a in aspects)
    return {definition.name: counts.get(definition.name, 0) for definition in ASPECT_DEFINITIONS}


def strongest_aspect(aspects: Sequence[DetectedAspect]) -> DetectedAspect | None:
    if not aspects:
        return None
    return max(aspects, key=lambda a: a.strength)


def tenseness(aspects: Sequence[DetectedAspect]) -> float:
    """Share of total aspect strength carried by tense aspects (0-1)."""

    total = sum(a.strength for a in aspects)
    if total <= 0:
        return 0.0
    tense = sum(a.strength for a in aspects if a.type in TENSE_ASPECTS)
    return tense / total
