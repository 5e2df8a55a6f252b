# xiuchart/core/projection.py
"""
Polar projection for the circular chart.

Chart angle 0 points right and the chart runs opposite to ecliptic longitude,
so every longitude goes through `longitude_to_chart_angle` before it is turned
into a screen point. Screen y grows downward; nothing here flips it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple

from xiuchart.core.constants import wrap_deg

__all__ = [
    "Point",
    "ArcGeometry",
    "CARDINAL_DIRECTIONS",
    "point_on_circle",
    "longitude_to_chart_angle",
    "chart_angle_to_radians",
    "project_longitude",
    "mid_longitude",
    "arc_geometry",
    "radial_guide_angles",
]


class Point(NamedTuple):
    x: float
    y: float


# Chart angles of the four direction labels.
CARDINAL_DIRECTIONS: Mapping[str, float] = MappingProxyType({
    "西": 0.0,
    "北": 90.0,
    "东": 180.0,
    "南": 270.0,
})


def point_on_circle(center: Tuple[float, float], radius: float, angle_radians: float) -> Point:
    """Negative radii are clamped to 0 (the centre)."""
    r = max(0.0, float(radius))
    cx, cy = center
    return Point(cx + r * math.cos(angle_radians), cy + r * math.sin(angle_radians))


def longitude_to_chart_angle(longitude: float) -> float:
    return wrap_deg(360.0 - longitude)


def chart_angle_to_radians(angle: float) -> float:
    return math.radians(wrap_deg(angle))


def project_longitude(center: Tuple[float, float], radius: float, longitude: float) -> Point:
    return point_on_circle(center, radius, chart_angle_to_radians(longitude_to_chart_angle(longitude)))


def mid_longitude(start: float, end: float) -> float:
    """Midpoint going forward from `start` to `end`, across 0° if needed."""
    return wrap_deg(start + wrap_deg(end - start) / 2.0)


@dataclass(frozen=True)
class ArcGeometry:
    outer_start: Point
    outer_end: Point
    inner_end: Point
    inner_start: Point
    large_arc: bool
    span: float

    def to_dict(self) -> dict:
        return {
            "outer_start": self.outer_start._asdict(),
            "outer_end": self.outer_end._asdict(),
            "inner_end": self.inner_end._asdict(),
            "inner_start": self.inner_start._asdict(),
            "large_arc": self.large_arc,
            "span": self.span,
        }


def arc_geometry(
    center: Tuple[float, float],
    inner_radius: float,
    outer_radius: float,
    start_longitude: float,
    end_longitude: float,
) -> ArcGeometry:
    """
    Corner points of the annular sector from `start_longitude` forward to
    `end_longitude`. An end past 360 is fine; equal ends mean an empty sector.
    """
    span = wrap_deg(end_longitude - start_longitude)
    if span == 0.0 and end_longitude != start_longitude:
        span = 360.0
    return ArcGeometry(
        outer_start=project_longitude(center, outer_radius, start_longitude),
        outer_end=project_longitude(center, outer_radius, end_longitude),
        inner_end=project_longitude(center, inner_radius, end_longitude),
        inner_start=project_longitude(center, inner_radius, start_longitude),
        large_arc=span > 180.0,
        span=span,
    )


def radial_guide_angles(divisions: int = 24) -> Tuple[float, ...]:
    """Chart angles of `divisions` evenly spaced spokes, the first at 0."""
    if divisions <= 0:
        raise ValueError(f"divisions must be positive, got {divisions}")
    step = 360.0 / divisions
    return tuple(wrap_deg(360.0 - i * step) for i in range(divisions))
