"""Exceptions raised by the rules engine."""

from __future__ import annotations


class AstroRulesError(Exception):
    """Base class for every error raised by astro_rules."""


class InvalidDegreeError(AstroRulesError, ValueError):
    """A degree-in-sign outside [0, 30) was passed to a scorer."""

    def __init__(self, degree: float) -> None:
        super().__init__(f"Degree in sign must be within [0, 30), got {degree!r}")
        self.degree = degree


class UnknownSignError(AstroRulesError, ValueError):
    """A sign name that is not one of the twelve zodiac signs."""


class ChartFileError(AstroRulesError):
    """A chart file could not be interpreted."""
