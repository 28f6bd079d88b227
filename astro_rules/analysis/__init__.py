from __future__ import annotations

from typing import List, Sequence, Tuple

from ..models import AspectDefinition, ChartInput, DetectedAspect, PlanetReport
from .aspects import ASPECT_DEFINITIONS, aspects_for_planet, chart_aspects
from .dignity import dignities_for_position, dignity_lords


def build_reports(
    chart: ChartInput, definitions: Sequence[AspectDefinition] = ASPECT_DEFINITIONS
) -> Tuple[List[PlanetReport], List[DetectedAspect]]:
    """
    Build a PlanetReport for each planet of the chart:
    - essential dignity score (not applicable for modern bodies)
    - the lords of every dignity at its degree
    - aspects to all other planets

    Returns the reports in chart order and the chart's aspect list,
    strongest first.
    """
    aspects = chart_aspects(chart.positions, definitions)

    reports: List[PlanetReport] = []
    for p in chart.positions:
        reports.append(
            PlanetReport(
                position=p,
                dignity=dignities_for_position(p, chart.is_day_chart),
                lords=dignity_lords(p.sign, p.degree_in_sign, chart.is_day_chart),
                aspects=tuple(aspects_for_planet(p.planet, aspects)),
            )
        )
    return reports, aspects
