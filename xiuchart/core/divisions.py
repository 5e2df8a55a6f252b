# xiuchart/core/divisions.py
# -----------------------------------------------------------------------------
# The 12 zodiacal divisions as arcs on a given year's mansion table.
#
# Public API:
#   resolve_division(division, mansions) -> DivisionArc
#   resolve_divisions(year, catalog=ZODIACAL_DIVISIONS) -> DivisionResolution
#   compute_zodiacal_divisions(year) -> tuple[DivisionArc, ...]
#
# Guarantees:
#   • start_angle in [0, 360); end_angle >= start_angle (end may reach past
#     360 when the arc crosses the 0° seam).
#   • A bad descriptor fails only its own division; the rest still resolve.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Tuple

from xiuchart.core.constants import ZODIACAL_DIVISIONS, ZodiacalDivision, wrap_deg
from xiuchart.core.descriptors import resolve_descriptor
from xiuchart.core.errors import ChartError
from xiuchart.core.mansions import MansionLongitude, mansion_table

__all__ = [
    "DivisionArc",
    "DivisionFailure",
    "DivisionResolution",
    "resolve_division",
    "resolve_divisions",
    "compute_zodiacal_divisions",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DivisionArc:
    name: str
    start_angle: float
    end_angle: float
    start_descriptor: str
    end_descriptor: str

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def mid_longitude(self) -> float:
        return wrap_deg(self.start_angle + self.span / 2.0)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "start_angle": self.start_angle,
            "end_angle": self.end_angle,
            "span": self.span,
            "mid_longitude": self.mid_longitude,
            "start_descriptor": self.start_descriptor,
            "end_descriptor": self.end_descriptor,
        }


@dataclass(frozen=True)
class DivisionFailure:
    name: str
    code: str
    message: str

    def to_dict(self) -> dict:
        return {"name": self.name, "code": self.code, "message": self.message}


@dataclass(frozen=True)
class DivisionResolution:
    arcs: Tuple[DivisionArc, ...]
    failures: Tuple[DivisionFailure, ...]

    @property
    def ok(self) -> bool:
        return not self.failures


def resolve_division(division: ZodiacalDivision, mansions: Mapping[str, MansionLongitude]) -> DivisionArc:
    start = resolve_descriptor(division.start_descriptor, mansions)
    end = resolve_descriptor(division.end_descriptor, mansions)
    if end < start:
        end += 360.0
    return DivisionArc(
        name=division.name,
        start_angle=start,
        end_angle=end,
        start_descriptor=division.start_descriptor,
        end_descriptor=division.end_descriptor,
    )


def resolve_divisions(year: int, catalog: Iterable[ZodiacalDivision] = ZODIACAL_DIVISIONS) -> DivisionResolution:
    mansions = mansion_table(year)
    arcs: List[DivisionArc] = []
    failures: List[DivisionFailure] = []
    for division in catalog:
        try:
            arc = resolve_division(division, mansions)
        except ChartError as exc:
            log.warning("division %s skipped for year %d: %s", division.name, year, exc)
            failures.append(DivisionFailure(division.name, exc.code, exc.message))
            continue
        log.debug("division %s: %.4f -> %.4f", arc.name, arc.start_angle, arc.end_angle)
        arcs.append(arc)
    return DivisionResolution(arcs=tuple(arcs), failures=tuple(failures))


def compute_zodiacal_divisions(year: int) -> Tuple[DivisionArc, ...]:
    return resolve_divisions(year).arcs
