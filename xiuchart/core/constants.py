# -*- coding: utf-8 -*-
"""
xiuchart: core constants & small helpers

Purpose
-------
Single source of truth for:
- the 28 lunar mansions (width in "days", septet grouping, catalog order)
- the 24 solar terms
- the 12 zodiacal divisions (boundary descriptors)
- epoch constants (J2000, reference year, anchor mansion, precession rate)
- tiny angle helpers (wrap/Δ)

Design
------
- Pure-Python, no external dependencies.
- Safe to import from any core module.
- Catalogs are tuples of frozen records plus read-only name-keyed maps;
  nothing downstream addresses a mansion by array position.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

__all__ = [
    # records
    "Mansion", "SolarTerm", "ZodiacalDivision",
    # catalogs
    "SEPTETS", "MANSIONS", "MANSIONS_BY_NAME", "MANSION_NAMES",
    "SOLAR_TERM_NAMES", "ZODIACAL_DIVISIONS",
    # epoch / model constants
    "J2000_JD", "DAYS_PER_JULIAN_CENTURY", "SECONDS_PER_DAY",
    "MANSION_DAYS_PER_CIRCLE", "REFERENCE_YEAR", "REFERENCE_LONGITUDE",
    "ANCHOR_MANSION", "PRECESSION_YEARS_PER_DEGREE", "PRECESSION_RATE_DEG_PER_YEAR",
    "SOLAR_TERM_STEP_DEG",
    # helpers
    "wrap_deg", "delta_deg", "astronomical_year", "civil_year",
    # version tag
    "CONSTANTS_VERSION",
]

# ── version tag ───────────────────────────────────────────────────────────────
CONSTANTS_VERSION: str = "1.0.0"

# ── time constants ────────────────────────────────────────────────────────────
J2000_JD: float = 2451545.0               # 2000-01-01 12:00 (JD)
DAYS_PER_JULIAN_CENTURY: float = 36525.0
SECONDS_PER_DAY: float = 86400.0

# ── mansion model ─────────────────────────────────────────────────────────────
MANSION_DAYS_PER_CIRCLE: float = 365.25   # mansion widths are quoted in these units
REFERENCE_YEAR: int = -2629               # epoch at which the anchor sits on REFERENCE_LONGITUDE
REFERENCE_LONGITUDE: float = 240.0
ANCHOR_MANSION: str = "牛"
PRECESSION_YEARS_PER_DEGREE: float = 72.0
PRECESSION_RATE_DEG_PER_YEAR: float = 1.0 / PRECESSION_YEARS_PER_DEGREE

SOLAR_TERM_STEP_DEG: float = 15.0


@dataclass(frozen=True)
class Mansion:
    name: str
    width_days: float
    septet: str


@dataclass(frozen=True)
class SolarTerm:
    name: str
    longitude: float


@dataclass(frozen=True)
class ZodiacalDivision:
    name: str
    start_descriptor: str
    end_descriptor: str


# Directional septets in catalog order: east, north, west, south.
SEPTETS: Mapping[str, Tuple[Tuple[str, float], ...]] = MappingProxyType({
    "east": (
        ("角", 12.0), ("亢", 9.0), ("氐", 15.0), ("房", 5.0),
        ("心", 5.0), ("尾", 18.0), ("箕", 11.0),
    ),
    "north": (
        ("斗", 26.25), ("牛", 8.0), ("女", 12.0), ("虚", 10.0),
        ("危", 17.0), ("室", 16.0), ("壁", 9.0),
    ),
    "west": (
        ("奎", 16.0), ("娄", 12.0), ("胃", 14.0), ("昴", 11.0),
        ("毕", 16.0), ("觜", 2.0), ("参", 9.0),
    ),
    "south": (
        ("井", 33.0), ("鬼", 4.0), ("柳", 15.0), ("星", 7.0),
        ("张", 18.0), ("翼", 18.0), ("轸", 17.0),
    ),
})

MANSIONS: Tuple[Mansion, ...] = tuple(
    Mansion(name=name, width_days=width, septet=septet)
    for septet, members in SEPTETS.items()
    for name, width in members
)
MANSIONS_BY_NAME: Mapping[str, Mansion] = MappingProxyType({m.name: m for m in MANSIONS})
MANSION_NAMES: Tuple[str, ...] = tuple(m.name for m in MANSIONS)

# Index order = longitude / 15°, starting at the vernal equinox.
SOLAR_TERM_NAMES: Tuple[str, ...] = (
    "春分", "清明", "谷雨", "立夏", "小满", "芒种",
    "夏至", "小暑", "大暑", "立秋", "处暑", "白露",
    "秋分", "寒露", "霜降", "立冬", "小雪", "大雪",
    "冬至", "小寒", "大寒", "立春", "雨水", "惊蛰",
)

# Each end descriptor is the next division's start descriptor.
ZODIACAL_DIVISIONS: Tuple[ZodiacalDivision, ...] = (
    ZodiacalDivision("星纪", "斗宿11度", "女宿7度"),
    ZodiacalDivision("玄枵", "女宿7度", "危宿15度"),
    ZodiacalDivision("娵訾", "危宿15度", "奎宿4度"),
    ZodiacalDivision("降娄", "奎宿4度", "胃宿6度"),
    ZodiacalDivision("大梁", "胃宿6度", "毕宿11度"),
    ZodiacalDivision("实沈", "毕宿11度", "井宿15度"),
    ZodiacalDivision("鹑首", "井宿15度", "柳宿8度"),
    ZodiacalDivision("鹑火", "柳宿8度", "张宿17度"),
    ZodiacalDivision("鹑尾", "张宿17度", "轸宿11度"),
    ZodiacalDivision("寿星", "轸宿11度", "氐宿4度"),
    ZodiacalDivision("大火", "氐宿4度", "尾宿9度"),
    ZodiacalDivision("析木", "尾宿9度", "斗宿11度"),
)


# ── tiny angle helpers (no external imports) ──────────────────────────────────
def wrap_deg(x: float) -> float:
    """
    Wrap any angle to [0, 360).
    """
    v = math.fmod(float(x), 360.0)
    if v < 0.0:
        v += 360.0
    # -1e-17 + 360.0 rounds up to 360.0
    return 0.0 if v >= 360.0 else v


def delta_deg(a: float, b: float) -> float:
    """
    Shortest signed difference b - a in degrees, range (-180, 180].
    """
    d = wrap_deg(b) - wrap_deg(a)
    if d > 180.0:
        d -= 360.0
    elif d <= -180.0:
        d += 360.0
    return d


# ── year numbering ────────────────────────────────────────────────────────────
def astronomical_year(year: int) -> int:
    """
    Map the exposed year numbering (…, -2, -1, 1, 2, …; no year zero) onto a
    continuous count. Shared by the calendar and the precession model.
    """
    return year + 1 if year <= 0 else year


def civil_year(astro_year: int) -> int:
    """Inverse of `astronomical_year` for every year except the missing zero."""
    return astro_year - 1 if astro_year <= 0 else astro_year
