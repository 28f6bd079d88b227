from __future__ import annotations

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from ..errors import InvalidDegreeError
from ..models import DignityLords, DignityScore, PlanetPosition
from ..zodiac import SIGN_ELEMENTS, SIGNS, TRADITIONAL_PLANETS, opposite_sign, sign_index

logger = logging.getLogger(__name__)

DOMICILES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "Sun": ("Leo",),
        "Moon": ("Cancer",),
        "Mercury": ("Gemini", "Virgo"),
        "Venus": ("Taurus", "Libra"),
        "Mars": ("Aries", "Scorpio"),
        "Jupiter": ("Sagittarius", "Pisces"),
        "Saturn": ("Capricorn", "Aquarius"),
    }
)

# Informational only, not used for scoring
MODERN_RULERS: Mapping[str, str] = MappingProxyType(
    {
        "Uranus": "Aquarius",
        "Neptune": "Pisces",
        "Pluto": "Scorpio",
    }
)

EXALTATIONS: Mapping[str, str] = MappingProxyType(
    {
        "Sun": "Aries",
        "Moon": "Taurus",
        "Mercury": "Virgo",
        "Venus": "Pisces",
        "Mars": "Capricorn",
        "Jupiter": "Cancer",
        "Saturn": "Libra",
    }
)

EXALTATION_DEGREES: Mapping[str, int] = MappingProxyType(
    {
        "Sun": 19,
        "Moon": 3,
        "Mercury": 15,
        "Venus": 27,
        "Mars": 28,
        "Jupiter": 15,
        "Saturn": 21,
    }
)

# Detriment and fall are the signs opposite domicile and exaltation.
DETRIMENTS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {planet: tuple(opposite_sign(s) for s in signs) for planet, signs in DOMICILES.items()}
)
FALLS: Mapping[str, str] = MappingProxyType(
    {planet: opposite_sign(sign) for planet, sign in EXALTATIONS.items()}
)

# Dorothean triplicity rulers: (day, night, participating)
TRIPLICITIES: Mapping[str, Tuple[str, str, str]] = MappingProxyType(
    {
        "Fire": ("Sun", "Jupiter", "Saturn"),
        "Earth": ("Venus", "Moon", "Mars"),
        "Air": ("Saturn", "Mercury", "Jupiter"),
        "Water": ("Venus", "Mars", "Moon"),
    }
)

# Egyptian terms (end degree within sign, planet)
TERMS: Mapping[str, Tuple[Tuple[float, str], ...]] = MappingProxyType(
    {
        "Aries": ((6, "Jupiter"), (12, "Venus"), (20, "Mercury"), (25, "Mars"), (30, "Saturn")),
        "Taurus": ((8, "Venus"), (14, "Mercury"), (22, "Jupiter"), (27, "Saturn"), (30, "Mars")),
        "Gemini": ((6, "Mercury"), (12, "Jupiter"), (17, "Venus"), (24, "Mars"), (30, "Saturn")),
        "Cancer": ((7, "Mars"), (13, "Venus"), (19, "Mercury"), (26, "Jupiter"), (30, "Saturn")),
        "Leo": ((6, "Jupiter"), (11, "Venus"), (18, "Saturn"), (24, "Mercury"), (30, "Mars")),
        "Virgo": ((7, "Mercury"), (17, "Venus"), (21, "Jupiter"), (28, "Mars"), (30, "Saturn")),
        "Libra": ((6, "Saturn"), (14, "Mercury"), (21, "Jupiter"), (28, "Venus"), (30, "Mars")),
        "Scorpio": ((7, "Mars"), (11, "Venus"), (19, "Mercury"), (24, "Jupiter"), (30, "Saturn")),
        "Sagittarius": ((12, "Jupiter"), (17, "Venus"), (21, "Mercury"), (26, "Saturn"), (30, "Mars")),
        "Capricorn": ((7, "Mercury"), (14, "Jupiter"), (22, "Venus"), (26, "Saturn"), (30, "Mars")),
        "Aquarius": ((7, "Mercury"), (13, "Venus"), (20, "Jupiter"), (25, "Mars"), (30, "Saturn")),
        "Pisces": ((12, "Venus"), (16, "Jupiter"), (19, "Mercury"), (28, "Mars"), (30, "Saturn")),
    }
)

CHALDEAN_SEQUENCE = ("Saturn", "Jupiter", "Mars", "Sun", "Venus", "Mercury", "Moon")


def _chaldean_faces() -> Dict[str, Tuple[str, str, str]]:
    # Mars rules the first decan of Aries; the Chaldean order runs on from there.
    start_offset = 2
    faces: Dict[str, Tuple[str, str, str]] = {}
    for idx, sign in enumerate(SIGNS):
        first = start_offset + idx * 3
        faces[sign] = tuple(  # type: ignore[assignment]
            CHALDEAN_SEQUENCE[(first + decan) % len(CHALDEAN_SEQUENCE)] for decan in range(3)
        )
    return faces


FACES: Mapping[str, Tuple[str, str, str]] = MappingProxyType(_chaldean_faces())

DIGNITY_POINTS: Mapping[str, int] = MappingProxyType(
    {
        "domicile": 5,
        "exaltation": 4,
        "triplicity": 3,
        "term": 2,
        "face": 1,
        "detriment": -5,
        "fall": -4,
        "peregrine": -5,
    }
)


def validate_degree(degree: float) -> None:
    if not 0.0 <= degree < 30.0:
        raise InvalidDegreeError(degree)


def domicile_ruler(sign: str) -> str:
    return next(planet for planet, signs in DOMICILES.items() if sign in signs)


def exaltation_ruler(sign: str) -> str | None:
    return next((planet for planet, exalt in EXALTATIONS.items() if exalt == sign), None)


def triplicity_ruler(sign: str, is_day_chart: bool) -> str:
    day, night, _participating = TRIPLICITIES[SIGN_ELEMENTS[sign]]
    return day if is_day_chart else night


def term_ruler(sign: str, degree: float) -> str:
    bands = TERMS[sign]
    for end_degree, lord in bands:
        if degree <= end_degree:
            return lord
    return bands[-1][1]


def face_ruler(sign: str, degree: float) -> str:
    faces = FACES[sign]
    if degree <= 10:
        return faces[0]
    if degree <= 20:
        return faces[1]
    return faces[2]


def dignity_lords(sign: str, degree: float, is_day_chart: bool) -> DignityLords:
    """Return the planets holding each essential dignity at a point."""

    sign_index(sign)
    validate_degree(degree)
    return DignityLords(
        domicile=domicile_ruler(sign),
        exaltation=exaltation_ruler(sign),
        triplicity=triplicity_ruler(sign, is_day_chart),
        term=term_ruler(sign, degree),
        face=face_ruler(sign, degree),
    )


def score_dignity(planet: str, sign: str, degree: float, is_day_chart: bool) -> DignityScore:
    """
    Score the essential dignity of ``planet`` at ``degree`` of ``sign``.

    Every check is independent and additive:
    domicile +5, exaltation +4, triplicity +3, term +2, face +1,
    detriment -5, fall -4, and peregrine -5 when nothing else matched.

    Bodies without traditional tables get ``DignityScore.not_applicable``
    instead of a peregrine score.
    """

    sign_index(sign)
    validate_degree(degree)
    if planet not in TRADITIONAL_PLANETS:
        return DignityScore.not_applicable(planet, sign, degree)
    return _score_traditional(planet, sign, float(degree), bool(is_day_chart))


@lru_cache(maxsize=8192)
def _score_traditional(planet: str, sign: str, degree: float, is_day_chart: bool) -> DignityScore:
    flags = {
        "domicile": sign in DOMICILES[planet],
        "exaltation": EXALTATIONS[planet] == sign,
        "triplicity": triplicity_ruler(sign, is_day_chart) == planet,
        "term": term_ruler(sign, degree) == planet,
        "face": face_ruler(sign, degree) == planet,
        "detriment": sign in DETRIMENTS[planet],
        "fall": FALLS[planet] == sign,
    }
    has_dignity = any(flags[k] for k in ("domicile", "exaltation", "triplicity", "term", "face"))
    flags["peregrine"] = not has_dignity and not flags["detriment"] and not flags["fall"]

    total = sum(DIGNITY_POINTS[key] for key, matched in flags.items() if matched)
    logger.debug("dignity %s %s %.2f day=%s -> %d", planet, sign, degree, is_day_chart, total)
    return DignityScore(planet=planet, sign=sign, degree=degree, total=total, **flags)


def dignities_for_position(position: PlanetPosition, is_day_chart: bool) -> DignityScore:
    return score_dignity(position.planet, position.sign, position.degree_in_sign, is_day_chart)
