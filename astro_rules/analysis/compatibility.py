"""Synastry: sign compatibility plus cross-chart aspects rolled into category scores."""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Tuple

from ..models import (
    AspectDefinition,
    AspectSummary,
    CategoryScores,
    ChartInput,
    CompatibilityResult,
    SignCompatibility,
    SynastryAspect,
)
from ..zodiac import sign_qualities
from .aspects import ASPECT_DEFINITIONS, match_positions

logger = logging.getLogger(__name__)

# Sign compatibility matrix (0-100 score)
COMPATIBILITY_MATRIX: Mapping[str, Mapping[str, int]] = MappingProxyType(
    {
        "Aries": {"Aries": 50, "Taurus": 38, "Gemini": 83, "Cancer": 42, "Leo": 97, "Virgo": 63, "Libra": 85, "Scorpio": 50, "Sagittarius": 93, "Capricorn": 47, "Aquarius": 78, "Pisces": 67},
        "Taurus": {"Aries": 38, "Taurus": 65, "Gemini": 33, "Cancer": 97, "Leo": 65, "Virgo": 90, "Libra": 65, "Scorpio": 88, "Sagittarius": 30, "Capricorn": 98, "Aquarius": 58, "Pisces": 85},
        "Gemini": {"Aries": 83, "Taurus": 33, "Gemini": 60, "Cancer": 65, "Leo": 88, "Virgo": 68, "Libra": 93, "Scorpio": 28, "Sagittarius": 60, "Capricorn": 68, "Aquarius": 85, "Pisces": 53},
        "Cancer": {"Aries": 42, "Taurus": 97, "Gemini": 65, "Cancer": 75, "Leo": 35, "Virgo": 90, "Libra": 43, "Scorpio": 94, "Sagittarius": 53, "Capricorn": 83, "Aquarius": 27, "Pisces": 98},
        "Leo": {"Aries": 97, "Taurus": 65, "Gemini": 88, "Cancer": 35, "Leo": 68, "Virgo": 35, "Libra": 97, "Scorpio": 53, "Sagittarius": 93, "Capricorn": 35, "Aquarius": 68, "Pisces": 38},
        "Virgo": {"Aries": 63, "Taurus": 90, "Gemini": 68, "Cancer": 90, "Leo": 35, "Virgo": 65, "Libra": 75, "Scorpio": 88, "Sagittarius": 48, "Capricorn": 95, "Aquarius": 30, "Pisces": 88},
        "Libra": {"Aries": 85, "Taurus": 65, "Gemini": 93, "Cancer": 43, "Leo": 97, "Virgo": 75, "Libra": 55, "Scorpio": 35, "Sagittarius": 80, "Capricorn": 55, "Aquarius": 90, "Pisces": 88},
        "Scorpio": {"Aries": 50, "Taurus": 88, "Gemini": 28, "Cancer": 94, "Leo": 53, "Virgo": 88, "Libra": 35, "Scorpio": 60, "Sagittarius": 28, "Capricorn": 95, "Aquarius": 73, "Pisces": 97},
        "Sagittarius": {"Aries": 93, "Taurus": 30, "Gemini": 60, "Cancer": 53, "Leo": 93, "Virgo": 48, "Libra": 80, "Scorpio": 28, "Sagittarius": 45, "Capricorn": 68, "Aquarius": 90, "Pisces": 60},
        "Capricorn": {"Aries": 47, "Taurus": 98, "Gemini": 68, "Cancer": 83, "Leo": 35, "Virgo": 95, "Libra": 55, "Scorpio": 95, "Sagittarius": 68, "Capricorn": 60, "Aquarius": 60, "Pisces": 88},
        "Aquarius": {"Aries": 78, "Taurus": 58, "Gemini": 85, "Cancer": 27, "Leo": 68, "Virgo": 30, "Libra": 90, "Scorpio": 73, "Sagittarius": 90, "Capricorn": 60, "Aquarius": 45, "Pisces": 45},
        "Pisces": {"Aries": 67, "Taurus": 85, "Gemini": 53, "Cancer": 98, "Leo": 38, "Virgo": 88, "Libra": 88, "Scorpio": 97, "Sagittarius": 60, "Capricorn": 88, "Aquarius": 45, "Pisces": 60},
    }
)
DEFAULT_SIGN_SCORE = 50


def _pair(first: str, second: str) -> FrozenSet[str]:
    return frozenset((first, second))


# Quality tables are keyed by unordered pairs.
ELEMENT_COMPATIBILITY: Mapping[FrozenSet[str], int] = MappingProxyType(
    {
        _pair("Fire", "Fire"): 70,
        _pair("Fire", "Air"): 85,
        _pair("Fire", "Earth"): 50,
        _pair("Fire", "Water"): 40,
        _pair("Earth", "Earth"): 80,
        _pair("Earth", "Air"): 50,
        _pair("Earth", "Water"): 85,
        _pair("Air", "Air"): 70,
        _pair("Air", "Water"): 45,
        _pair("Water", "Water"): 70,
    }
)

MODALITY_COMPATIBILITY: Mapping[FrozenSet[str], int] = MappingProxyType(
    {
        _pair("Cardinal", "Cardinal"): 50,
        _pair("Cardinal", "Fixed"): 60,
        _pair("Cardinal", "Mutable"): 75,
        _pair("Fixed", "Fixed"): 45,
        _pair("Fixed", "Mutable"): 70,
        _pair("Mutable", "Mutable"): 55,
    }
)

POLARITY_COMPATIBILITY: Mapping[FrozenSet[str], int] = MappingProxyType(
    {
        _pair("Positive", "Positive"): 65,
        _pair("Positive", "Negative"): 75,
        _pair("Negative", "Negative"): 65,
    }
)

MATRIX_WEIGHT = 2

HARMONIOUS_TYPES = frozenset({"Conjunction", "Sextile", "Trine"})
CHALLENGING_TYPES = frozenset({"Square", "Opposition", "Quincunx"})

CATEGORIES = ("emotional", "romantic", "physical", "communication", "growth", "stability")
CATEGORY_BASE = 50.0
CATEGORY_STEP = 10.0

CATEGORY_PAIRS: Mapping[FrozenSet[str], Tuple[str, ...]] = MappingProxyType(
    {
        _pair("Moon", "Moon"): ("emotional",),
        _pair("Moon", "Venus"): ("emotional",),
        _pair("Sun", "Moon"): ("emotional",),
        _pair("Moon", "Pluto"): ("emotional",),
        _pair("Venus", "Mars"): ("romantic", "physical"),
        _pair("Sun", "Venus"): ("romantic",),
        _pair("Venus", "Venus"): ("romantic",),
        _pair("Venus", "Pluto"): ("romantic", "physical"),
        _pair("Mars", "Mars"): ("physical",),
        _pair("Sun", "Mars"): ("physical",),
        _pair("Mars", "Pluto"): ("physical",),
        _pair("Mercury", "Mercury"): ("communication",),
        _pair("Mercury", "Venus"): ("communication",),
        _pair("Sun", "Mercury"): ("communication",),
        _pair("Moon", "Mercury"): ("communication",),
        _pair("Mercury", "Jupiter"): ("communication", "growth"),
        _pair("Sun", "Jupiter"): ("growth",),
        _pair("Saturn", "Jupiter"): ("growth",),
        _pair("Moon", "Jupiter"): ("growth",),
        _pair("Venus", "Jupiter"): ("growth",),
        _pair("Jupiter", "Jupiter"): ("growth",),
        _pair("Saturn", "Saturn"): ("stability",),
        _pair("Saturn", "Sun"): ("stability",),
        _pair("Moon", "Saturn"): ("stability",),
        _pair("Venus", "Saturn"): ("stability",),
    }
)

# Weights for picking the aspects worth interpreting first; unlisted pairs weigh 1
KEY_SYNASTRY_PAIRS: Mapping[FrozenSet[str], int] = MappingProxyType(
    {
        _pair("Sun", "Moon"): 10,
        _pair("Moon", "Moon"): 9,
        _pair("Venus", "Mars"): 9,
        _pair("Sun", "Venus"): 8,
        _pair("Moon", "Venus"): 8,
        _pair("Sun", "Sun"): 7,
        _pair("Sun", "Mars"): 6,
        _pair("Mercury", "Mercury"): 6,
        _pair("Sun", "Jupiter"): 5,
        _pair("Moon", "Jupiter"): 5,
        _pair("Venus", "Jupiter"): 5,
        _pair("Sun", "Saturn"): 4,
        _pair("Moon", "Saturn"): 4,
        _pair("Venus", "Saturn"): 4,
        _pair("Sun", "Pluto"): 3,
        _pair("Moon", "Pluto"): 3,
        _pair("Venus", "Pluto"): 3,
        _pair("Sun", "NorthNode"): 3,
        _pair("Moon", "NorthNode"): 3,
    }
)
DEFAULT_PAIR_WEIGHT = 1
TIGHT_ORB = 2.0
TIGHT_ORB_BOOST = 1.5


def aspect_nature(aspect_type: str) -> str:
    if aspect_type in HARMONIOUS_TYPES:
        return "harmonious"
    if aspect_type in CHALLENGING_TYPES:
        return "challenging"
    return "neutral"


def aspect_categories(planet_a: str, planet_b: str) -> Tuple[str, ...]:
    return CATEGORY_PAIRS.get(_pair(planet_a, planet_b), ())


def sign_compatibility(sign_a: str, sign_b: str) -> SignCompatibility:
    """
    Baseline 0-100 compatibility of two signs: the matrix score counts
    twice, element, modality and polarity once each.
    """
    element_a, modality_a, polarity_a = sign_qualities(sign_a)
    element_b, modality_b, polarity_b = sign_qualities(sign_b)

    matrix = COMPATIBILITY_MATRIX[sign_a][sign_b]
    element = ELEMENT_COMPATIBILITY[_pair(element_a, element_b)]
    modality = MODALITY_COMPATIBILITY[_pair(modality_a, modality_b)]
    polarity = POLARITY_COMPATIBILITY[_pair(polarity_a, polarity_b)]

    baseline = (matrix * MATRIX_WEIGHT + element + modality + polarity) / (MATRIX_WEIGHT + 3)
    return SignCompatibility(
        sign_a=sign_a,
        sign_b=sign_b,
        matrix=matrix,
        element=element,
        modality=modality,
        polarity=polarity,
        baseline=baseline,
    )


def synastry_aspects(
    chart_a: ChartInput,
    chart_b: ChartInput,
    definitions: Sequence[AspectDefinition] = ASPECT_DEFINITIONS,
) -> List[SynastryAspect]:
    """Every aspect from a planet of chart A to a planet of chart B, strongest first."""

    found: List[SynastryAspect] = []
    for pos_a in chart_a.positions:
        for pos_b in chart_b.positions:
            aspect = match_positions(pos_a, pos_b, definitions)
            if aspect is None:
                continue
            found.append(
                SynastryAspect(
                    aspect=aspect,
                    nature=aspect_nature(aspect.type),
                    categories=aspect_categories(pos_a.planet, pos_b.planet),
                )
            )
    found.sort(key=lambda s: s.strength, reverse=True)
    return found


def summarize_aspects(aspects: Iterable[SynastryAspect]) -> AspectSummary:
    counts = {"harmonious": 0, "challenging": 0, "neutral": 0}
    for item in aspects:
        counts[item.nature] += 1
    return AspectSummary(**counts)


def category_scores(aspects: Iterable[SynastryAspect]) -> Dict[str, float]:
    """Unrounded 0-100 score per category."""

    raw = {category: CATEGORY_BASE for category in CATEGORIES}
    for item in aspects:
        if item.nature == "harmonious":
            delta = item.strength * CATEGORY_STEP
        elif item.nature == "challenging":
            delta = -item.strength * CATEGORY_STEP
        else:
            continue
        for category in item.categories:
            raw[category] += delta
    return {category: _clamp(value) for category, value in raw.items()}


def key_aspects(aspects: Sequence[SynastryAspect], limit: int = 10) -> List[SynastryAspect]:
    """The aspects most worth interpreting: key planet pairs and tight orbs first."""

    def priority(item: SynastryAspect) -> float:
        value = item.strength * KEY_SYNASTRY_PAIRS.get(_pair(item.planet1, item.planet2), DEFAULT_PAIR_WEIGHT)
        if item.exact_orb < TIGHT_ORB:
            value *= TIGHT_ORB_BOOST
        return value

    return sorted(aspects, key=priority, reverse=True)[:limit]


def score_compatibility(
    chart_a: ChartInput,
    chart_b: ChartInput,
    definitions: Sequence[AspectDefinition] = ASPECT_DEFINITIONS,
    key_aspect_limit: int = 10,
) -> CompatibilityResult:
    sun_a = chart_a.position_of("Sun")
    sun_b = chart_b.position_of("Sun")
    if sun_a is None or sun_b is None:
        logger.warning(
            "Sun missing from %s; using neutral sign baseline",
            chart_a.name if sun_a is None else chart_b.name,
        )
        signs = None
        baseline = float(DEFAULT_SIGN_SCORE)
    else:
        signs = sign_compatibility(sun_a.sign, sun_b.sign)
        baseline = signs.baseline

    aspects = synastry_aspects(chart_a, chart_b, definitions)
    raw_categories = category_scores(aspects)
    category_mean = sum(raw_categories.values()) / len(raw_categories)
    overall = round_score(_clamp(0.5 * category_mean + 0.5 * baseline))

    logger.debug(
        "synastry %s x %s: baseline=%.2f categories=%.2f aspects=%d",
        chart_a.name,
        chart_b.name,
        baseline,
        category_mean,
        len(aspects),
    )
    return CompatibilityResult(
        overall=overall,
        categories=CategoryScores(**{k: round_score(v) for k, v in raw_categories.items()}),
        aspect_summary=summarize_aspects(aspects),
        signs=signs,
        aspects=tuple(aspects),
        key_aspects=tuple(key_aspects(aspects, key_aspect_limit)),
        strongest_connection=next((a for a in aspects if a.nature == "harmonious"), None),
        main_challenge=next((a for a in aspects if a.nature == "challenging"), None),
    )


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_score(value: float) -> int:
    """Round to the nearest integer with halves going up (62.5 -> 63)."""

    return math.floor(value + 0.5)
