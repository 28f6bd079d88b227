"""Table-driven rules for essential dignities, aspects and synastry compatibility."""

from .almuten import check_mutual_reception, find_almuten
from .analysis import build_reports
from .analysis.aspects import ASPECT_DEFINITIONS, MAJOR_ASPECTS, MINOR_ASPECTS, detect, effective_orb
from .analysis.compatibility import score_compatibility
from .analysis.dignity import score_dignity
from .analysis.summary import chart_summary
from .chart_parser import load_chart
from .errors import AstroRulesError, ChartFileError, InvalidDegreeError, UnknownSignError
from .models import (
    AspectDefinition,
    ChartInput,
    ChartSummary,
    CompatibilityResult,
    DetectedAspect,
    DignityScore,
    PlanetPosition,
    PlanetReport,
)

__all__ = [
    "ASPECT_DEFINITIONS",
    "MAJOR_ASPECTS",
    "MINOR_ASPECTS",
    "AspectDefinition",
    "AstroRulesError",
    "ChartFileError",
    "ChartInput",
    "ChartSummary",
    "CompatibilityResult",
    "DetectedAspect",
    "DignityScore",
    "InvalidDegreeError",
    "PlanetPosition",
    "PlanetReport",
    "UnknownSignError",
    "build_reports",
    "chart_summary",
    "check_mutual_reception",
    "detect",
    "effective_orb",
    "find_almuten",
    "load_chart",
    "score_compatibility",
    "score_dignity",
]
