# xiuchart/core/mansions.py
"""
Mansion longitudes for a given year.

The anchor mansion (牛) sits on REFERENCE_LONGITUDE at REFERENCE_YEAR; every
mansion boundary then drifts by one degree per 72 years. Widths are quoted in
"days" and scaled so the whole catalog spans exactly 360°.

Public API:
    precession_offset(year) -> float
    compute_mansion_longitudes(year) -> tuple[MansionLongitude, ...]   (catalog order)
    mansion_table(year) -> Mapping[str, MansionLongitude]               (by name)
    mansion_at(longitude, mansions) -> MansionLongitude
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from xiuchart.core.constants import (
    ANCHOR_MANSION,
    MANSIONS,
    MANSION_NAMES,
    Mansion,
    PRECESSION_RATE_DEG_PER_YEAR,
    REFERENCE_LONGITUDE,
    REFERENCE_YEAR,
    astronomical_year,
    wrap_deg,
)

__all__ = [
    "MansionLongitude",
    "precession_offset",
    "mansion_span",
    "compute_mansion_longitudes",
    "mansion_table",
    "mansion_at",
]

MansionTable = Union[Mapping[str, "MansionLongitude"], Iterable["MansionLongitude"]]

_TOTAL_DAYS = sum(m.width_days for m in MANSIONS)


@dataclass(frozen=True)
class MansionLongitude:
    name: str
    start_longitude: float
    end_longitude: float

    @property
    def span(self) -> float:
        """Width in degrees; an end below the start means the range crosses 0°."""
        return wrap_deg(self.end_longitude - self.start_longitude)

    def contains(self, longitude: float) -> bool:
        return wrap_deg(longitude - self.start_longitude) < self.span

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "start_longitude": self.start_longitude,
            "end_longitude": self.end_longitude,
            "span": self.span,
        }


def precession_offset(year: int) -> float:
    """
    Degrees the mansion boundaries have moved since REFERENCE_YEAR.

    Both years go through the same no-year-zero adjustment as the calendar.
    """
    elapsed = astronomical_year(year) - astronomical_year(REFERENCE_YEAR)
    return elapsed * PRECESSION_RATE_DEG_PER_YEAR


def mansion_span(mansion: Mansion) -> float:
    return mansion.width_days * 360.0 / _TOTAL_DAYS


def compute_mansion_longitudes(year: int) -> Tuple[MansionLongitude, ...]:
    offset = precession_offset(year)
    anchor = MANSION_NAMES.index(ANCHOR_MANSION)
    count = len(MANSIONS)

    # Boundaries walked from the anchor; each end is the next start, so the
    # ranges tile the circle with no float gaps.
    bounds: List[float] = []
    walked = 0.0
    for step in range(count):
        bounds.append(wrap_deg(REFERENCE_LONGITUDE + walked * 360.0 / _TOTAL_DAYS + offset))
        walked += MANSIONS[(anchor + step) % count].width_days

    out: List[Optional[MansionLongitude]] = [None] * count
    for step in range(count):
        idx = (anchor + step) % count
        out[idx] = MansionLongitude(MANSIONS[idx].name, bounds[step], bounds[(step + 1) % count])
    return tuple(out)  # type: ignore[arg-type]


def mansion_table(year: int) -> Mapping[str, MansionLongitude]:
    return MappingProxyType({m.name: m for m in compute_mansion_longitudes(year)})


def _rows(mansions: MansionTable) -> Iterable[MansionLongitude]:
    if isinstance(mansions, Mapping):
        return mansions.values()
    return mansions


def mansion_at(longitude: float, mansions: MansionTable) -> MansionLongitude:
    """The mansion whose range holds `longitude` (start inclusive, end exclusive)."""
    for row in _rows(mansions):
        if row.contains(longitude):
            return row
    raise LookupError(f"no mansion covers longitude {longitude!r}")
