"""Signs, planets and the sign qualities shared by every analysis module."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

import swisseph as swe

from .errors import UnknownSignError

SIGNS: tuple[str, ...] = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)

PLANETS: tuple[str, ...] = (
    "Sun",
    "Moon",
    "Mercury",
    "Venus",
    "Mars",
    "Jupiter",
    "Saturn",
    "Uranus",
    "Neptune",
    "Pluto",
    "NorthNode",
    "SouthNode",
    "Chiron",
)

# Only these carry traditional dignity tables.
TRADITIONAL_PLANETS: tuple[str, ...] = PLANETS[:7]

ELEMENTS = ("Fire", "Earth", "Air", "Water")
MODALITIES = ("Cardinal", "Fixed", "Mutable")

# Elements cycle Fire/Earth/Air/Water and modalities Cardinal/Fixed/Mutable
# from Aries onwards; polarity alternates starting Positive.
SIGN_ELEMENTS: Mapping[str, str] = MappingProxyType(
    {sign: ELEMENTS[idx % 4] for idx, sign in enumerate(SIGNS)}
)
SIGN_MODALITIES: Mapping[str, str] = MappingProxyType(
    {sign: MODALITIES[idx % 3] for idx, sign in enumerate(SIGNS)}
)
SIGN_POLARITIES: Mapping[str, str] = MappingProxyType(
    {sign: "Positive" if idx % 2 == 0 else "Negative" for idx, sign in enumerate(SIGNS)}
)

PLANET_SYMBOLS = {
    "Sun": "☉",
    "Moon": "☽",
    "Mercury": "☿",
    "Venus": "♀",
    "Mars": "♂",
    "Jupiter": "♃",
    "Saturn": "♄",
    "Uranus": "♅",
    "Neptune": "♆",
    "Pluto": "♇",
    "NorthNode": "☊",
    "SouthNode": "☋",
    "Chiron": "⚷",
}

SIGN_SYMBOLS = {
    "Aries": "♈",
    "Taurus": "♉",
    "Gemini": "♊",
    "Cancer": "♋",
    "Leo": "♌",
    "Virgo": "♍",
    "Libra": "♎",
    "Scorpio": "♏",
    "Sagittarius": "♐",
    "Capricorn": "♑",
    "Aquarius": "♒",
    "Pisces": "♓",
}


def sign_index_from_longitude(longitude: float) -> int:
    return int(longitude // 30) % 12


def degree_in_sign(longitude: float) -> float:
    return longitude % 30.0


def sign_from_longitude(longitude: float) -> str:
    return SIGNS[sign_index_from_longitude(longitude)]


def longitude_from_sign(sign: str, degree: float) -> float:
    """Inverse of the sign/degree decomposition."""

    return sign_index(sign) * 30.0 + degree


def normalize_longitude(longitude: float) -> float:
    """Wrap any ecliptic longitude into [0, 360)."""

    return swe.degnorm(longitude)


def sign_index(sign: str) -> int:
    try:
        return SIGNS.index(sign)
    except ValueError:
        raise UnknownSignError(f"Unknown zodiac sign: {sign!r}") from None


def opposite_sign(sign: str) -> str:
    return SIGNS[(sign_index(sign) + 6) % 12]


def sign_qualities(sign: str) -> tuple[str, str, str]:
    """Return (element, modality, polarity) for a sign."""

    sign_index(sign)
    return SIGN_ELEMENTS[sign], SIGN_MODALITIES[sign], SIGN_POLARITIES[sign]
