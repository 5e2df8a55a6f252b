# xiuchart/core/bodies.py
"""
Mean-longitude positions for the sun, moon and mars.

Low-order polynomials in Julian centuries from J2000; good enough to place a
marker on the chart, not an ephemeris. Callers get *chart angles*
((360 - L) mod 360) because the chart runs opposite to increasing longitude.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from xiuchart.core.calendar_clock import AstronomicalDate
from xiuchart.core.constants import DAYS_PER_JULIAN_CENTURY, J2000_JD, wrap_deg

__all__ = [
    "BODY_NAMES",
    "CelestialBodyPosition",
    "julian_centuries",
    "mean_longitude",
    "chart_angle",
    "sun_position",
    "moon_position",
    "mars_position",
    "body_positions",
    "compute_body_positions",
]

# L = c0 + c1*T + c2*T^2 (degrees)
MEAN_LONGITUDE_TERMS: Dict[str, Tuple[float, float, float]] = {
    "sun": (280.46646, 36000.76983, 0.0003032),
    "moon": (218.3164477, 481267.88123421, -0.0015786),
    "mars": (355.45332, 68905103.78, 0.0),
}

BODY_NAMES: Tuple[str, ...] = tuple(MEAN_LONGITUDE_TERMS)


@dataclass(frozen=True)
class CelestialBodyPosition:
    name: str
    longitude: float    # mean ecliptic longitude, [0, 360)
    chart_angle: float  # (360 - longitude) mod 360


def julian_centuries(julian_day: float) -> float:
    return (float(julian_day) - J2000_JD) / DAYS_PER_JULIAN_CENTURY


def mean_longitude(body: str, julian_day: float) -> float:
    """Mean ecliptic longitude of `body` in [0, 360). Unknown names raise KeyError."""
    c0, c1, c2 = MEAN_LONGITUDE_TERMS[body]
    t = julian_centuries(julian_day)
    return wrap_deg(c0 + c1 * t + c2 * t * t)


def chart_angle(body: str, julian_day: float) -> float:
    return wrap_deg(360.0 - mean_longitude(body, julian_day))


def sun_position(date: AstronomicalDate) -> float:
    return chart_angle("sun", date.julian_day)


def moon_position(date: AstronomicalDate) -> float:
    return chart_angle("moon", date.julian_day)


def mars_position(date: AstronomicalDate) -> float:
    return chart_angle("mars", date.julian_day)


def body_positions(date: AstronomicalDate) -> Tuple[CelestialBodyPosition, ...]:
    out = []
    for name in BODY_NAMES:
        lon = mean_longitude(name, date.julian_day)
        out.append(CelestialBodyPosition(name=name, longitude=lon, chart_angle=wrap_deg(360.0 - lon)))
    return tuple(out)


def compute_body_positions(date: AstronomicalDate) -> Dict[str, float]:
    """{'sun': angle, 'moon': angle, 'mars': angle} in chart angles."""
    return {p.name: p.chart_angle for p in body_positions(date)}
