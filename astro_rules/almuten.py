from __future__ import annotations

from itertools import combinations
from typing import Iterable, List, Tuple

from .analysis.dignity import DOMICILES, score_dignity
from .models import PlanetPosition
from .zodiac import TRADITIONAL_PLANETS

# Tie-break order when several planets share the top score.
ALMUTEN_PRIORITY = TRADITIONAL_PLANETS


def almuten_scores(sign: str, degree: float, is_day_chart: bool) -> List[Tuple[str, int]]:
    """
    Return (planet, total) for every traditional planet at a point,
    highest total first and ties in ALMUTEN_PRIORITY order.
    """
    totals = [
        (planet, score_dignity(planet, sign, degree, is_day_chart).total)
        for planet in ALMUTEN_PRIORITY
    ]
    # sorted() is stable, so equal totals keep priority order
    return sorted(totals, key=lambda item: -item[1])


def find_almuten(sign: str, degree: float, is_day_chart: bool) -> str:
    """Planet with the greatest essential dignity total at a zodiacal point."""

    return almuten_scores(sign, degree, is_day_chart)[0][0]


def check_mutual_reception(planet_a: str, sign_a: str, planet_b: str, sign_b: str) -> bool:
    """True when each planet sits in a sign the other rules (domicile only)."""

    a_rules_b = sign_b in DOMICILES.get(planet_a, ())
    b_rules_a = sign_a in DOMICILES.get(planet_b, ())
    return a_rules_b and b_rules_a


def mutual_receptions(positions: Iterable[PlanetPosition]) -> List[Tuple[str, str]]:
    """All pairs of traditional planets in mutual reception by domicile."""

    traditional = [p for p in positions if p.planet in TRADITIONAL_PLANETS]
    pairs: List[Tuple[str, str]] = []
    for first, second in combinations(traditional, 2):
        if check_mutual_reception(first.planet, first.sign, second.planet, second.sign):
            pairs.append((first.planet, second.planet))
    return pairs
