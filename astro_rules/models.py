"""Dataclasses that capture the chart data and scoring results used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .zodiac import degree_in_sign, normalize_longitude, sign_from_longitude


@dataclass(frozen=True)
class PlanetPosition:
    """Placement of a single body as delivered by the ephemeris.

    ``sign`` and ``degree_in_sign`` must agree with ``longitude``; the
    engine trusts them as given. Use :meth:`from_longitude` to build a
    consistent position.
    """

    planet: str
    longitude: float
    sign: str
    degree_in_sign: float
    retrograde: bool = False
    speed: Optional[float] = None  # degrees per day, None when not tracked

    @classmethod
    def from_longitude(
        cls,
        planet: str,
        longitude: float,
        speed: float | None = None,
        retrograde: bool | None = None,
    ) -> "PlanetPosition":
        lon = normalize_longitude(longitude)
        if retrograde is None:
            retrograde = speed is not None and speed < 0
        return cls(
            planet=planet,
            longitude=lon,
            sign=sign_from_longitude(lon),
            degree_in_sign=degree_in_sign(lon),
            retrograde=retrograde,
            speed=speed,
        )


@dataclass(frozen=True)
class ChartInput:
    """One chart's worth of positions plus its sect."""

    name: str
    positions: tuple[PlanetPosition, ...]
    is_day_chart: bool
    ascendant: float | None = None

    def position_of(self, planet: str) -> PlanetPosition | None:
        return next((p for p in self.positions if p.planet == planet), None)


@dataclass(frozen=True)
class DignityScore:
    """Essential dignity of a planet at a point of the zodiac."""

    planet: str
    sign: str
    degree: float
    total: int
    domicile: bool = False
    exaltation: bool = False
    triplicity: bool = False
    term: bool = False
    face: bool = False
    detriment: bool = False
    fall: bool = False
    peregrine: bool = False
    # False for bodies without traditional tables (outer planets, nodes, Chiron)
    applicable: bool = True

    @classmethod
    def not_applicable(cls, planet: str, sign: str, degree: float) -> "DignityScore":
        return cls(planet=planet, sign=sign, degree=degree, total=0, applicable=False)

    @property
    def dignities(self) -> list[str]:
        names = ("domicile", "exaltation", "triplicity", "term", "face")
        return [name for name in names if getattr(self, name)]

    @property
    def debilities(self) -> list[str]:
        names = ("detriment", "fall", "peregrine")
        return [name for name in names if getattr(self, name)]


@dataclass(frozen=True)
class DignityLords:
    """Planets holding each essential dignity at a point."""

    domicile: str
    exaltation: str | None
    triplicity: str
    term: str
    face: str


@dataclass(frozen=True)
class AspectDefinition:
    name: str
    angle: float
    base_orb: float
    energy: str
    major: bool
    symbol: str


@dataclass(frozen=True)
class DetectedAspect:
    """Aspect between two positions, reported from planet1's side."""

    planet1: str
    planet2: str
    type: str
    angle: float  # exact angle of the aspect
    separation: float  # actual shortest-arc separation
    exact_orb: float
    effective_orb: float
    strength: float
    applying: bool

    def involves(self, planet: str) -> bool:
        return planet in (self.planet1, self.planet2)


@dataclass(frozen=True)
class SynastryAspect:
    """Cross-chart aspect: planet1 belongs to chart A, planet2 to chart B."""

    aspect: DetectedAspect
    nature: str  # "harmonious", "challenging" or "neutral"
    categories: tuple[str, ...] = ()

    @property
    def planet1(self) -> str:
        return self.aspect.planet1

    @property
    def planet2(self) -> str:
        return self.aspect.planet2

    @property
    def type(self) -> str:
        return self.aspect.type

    @property
    def strength(self) -> float:
        return self.aspect.strength

    @property
    def exact_orb(self) -> float:
        return self.aspect.exact_orb


@dataclass(frozen=True)
class SignCompatibility:
    sign_a: str
    sign_b: str
    matrix: int
    element: int
    modality: int
    polarity: int
    baseline: float


@dataclass(frozen=True)
class CategoryScores:
    emotional: int
    romantic: int
    physical: int
    communication: int
    growth: int
    stability: int

    def as_dict(self) -> dict[str, int]:
        return {
            "emotional": self.emotional,
            "romantic": self.romantic,
            "physical": self.physical,
            "communication": self.communication,
            "growth": self.growth,
            "stability": self.stability,
        }


@dataclass(frozen=True)
class AspectSummary:
    harmonious: int = 0
    challenging: int = 0
    neutral: int = 0

    @property
    def total(self) -> int:
        return self.harmonious + self.challenging + self.neutral


@dataclass(frozen=True)
class CompatibilityResult:
    overall: int
    categories: CategoryScores
    aspect_summary: AspectSummary
    signs: SignCompatibility | None
    aspects: tuple[SynastryAspect, ...] = ()
    key_aspects: tuple[SynastryAspect, ...] = ()
    strongest_connection: SynastryAspect | None = None
    main_challenge: SynastryAspect | None = None


@dataclass(frozen=True)
class PlanetReport:
    """Dignity and aspect analysis for a single planet."""

    position: PlanetPosition
    dignity: DignityScore
    lords: DignityLords
    aspects: tuple[DetectedAspect, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ChartSummary:
    """Headline facts of one chart for the interpretation prompt."""

    sun_sign: str | None
    moon_sign: str | None
    rising_sign: str | None
    dominant_element: str
    dominant_modality: str
    retrograde_count: int
    aspect_count: int
