# xiuchart/core/chart.py
# -----------------------------------------------------------------------------
# One-call assembly of everything the chart face needs for an instant.
#
# Public API:
#   compute_solar_terms() -> tuple[SolarTerm, ...]
#   compute_chart(date, year=None, radial_guides=24) -> dict  (JSON-ready)
#
# Notes:
#   • `year` selects the mansion/division table; it defaults to the date's
#     own year and is always passed down explicitly.
#   • Division failures are reported in `division_errors`, never raised.
#   • `radial_guides` comes from the `chart.radial_guides` config key when
#     called through the API.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from xiuchart.core.bodies import body_positions
from xiuchart.core.calendar_clock import AstronomicalDate
from xiuchart.core.constants import SOLAR_TERM_NAMES, SOLAR_TERM_STEP_DEG, SolarTerm
from xiuchart.core.divisions import resolve_divisions
from xiuchart.core.mansions import compute_mansion_longitudes, mansion_at, precession_offset
from xiuchart.core.projection import CARDINAL_DIRECTIONS, longitude_to_chart_angle, radial_guide_angles

__all__ = ["compute_solar_terms", "compute_chart"]

log = logging.getLogger(__name__)

RADIAL_GUIDES = 24


def compute_solar_terms() -> Tuple[SolarTerm, ...]:
    return tuple(
        SolarTerm(name=name, longitude=i * SOLAR_TERM_STEP_DEG)
        for i, name in enumerate(SOLAR_TERM_NAMES)
    )


def compute_chart(
    date: AstronomicalDate,
    year: Optional[int] = None,
    radial_guides: int = RADIAL_GUIDES,
) -> Dict[str, Any]:
    if year is None:
        year = date.year

    mansions = compute_mansion_longitudes(year)
    divisions = resolve_divisions(year)

    bodies = []
    for pos in body_positions(date):
        bodies.append({
            "name": pos.name,
            "longitude": pos.longitude,
            "chart_angle": pos.chart_angle,
            "mansion": mansion_at(pos.longitude, mansions).name,
        })

    log.debug(
        "chart for %s (table year %d): %d divisions, %d failures",
        date, year, len(divisions.arcs), len(divisions.failures),
    )

    return {
        "date": date.to_dict(),
        "year": year,
        "precession_offset": precession_offset(year),
        "mansions": [
            {**m.to_dict(), "chart_angle": longitude_to_chart_angle(m.start_longitude)}
            for m in mansions
        ],
        "solar_terms": [
            {"name": t.name, "longitude": t.longitude, "chart_angle": longitude_to_chart_angle(t.longitude)}
            for t in compute_solar_terms()
        ],
        "divisions": [a.to_dict() for a in divisions.arcs],
        "division_errors": [f.to_dict() for f in divisions.failures],
        "bodies": bodies,
        "cardinal_directions": dict(CARDINAL_DIRECTIONS),
        "radial_angles": list(radial_guide_angles(radial_guides)),
    }
