from __future__ import annotations

import swisseph as swe


def chart_sect(sun_house: int) -> str:
    """Return 'day' if Sun is in houses 7 - 12 (above horizon), else 'night'."""
    return "day" if 7 <= sun_house <= 12 else "night"


def is_day_chart(ascendant: float, sun_longitude: float) -> bool:
    """
    Sun above the horizon: it lies in the half of the zodiac that runs from
    the Descendant forward to the Ascendant (houses 7 - 12 by quadrant).
    """
    arc_from_descendant = swe.degnorm(sun_longitude - (ascendant + 180.0))
    return 0.0 <= arc_from_descendant < 180.0
