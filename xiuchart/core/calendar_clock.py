# xiuchart/core/calendar_clock.py
# -----------------------------------------------------------------------------
# Proleptic calendar <-> continuous Julian Day.
#
# Public API:
#   date_to_julian_day(year, month, day, hour, minute, second) -> float
#   julian_day_to_date(jd) -> (year, month, day, hour, minute, second)
#   AstronomicalDate  (immutable value; arithmetic returns a new value)
#
# Guarantees:
#   • Gregorian rules extended proleptically to every year (Meeus, floor
#     arithmetic), no Julian/Gregorian switch.
#   • Exposed years have no year zero: year <= 0 is shifted by +1 before the
#     formula and the inverse applies the matching -1. Year 0 is rejected.
#   • julian_day_to_date(date_to_julian_day(...)) reproduces the calendar
#     date for any year, and the time of day to within one second.
#   • Sub-day fields are floored, never rounded. Float residue in the JD is
#     not corrected, so a time may read one second early.
#   • add_days / add_hours step the calendar fields, not the raw JD, so
#     repeated steps never accumulate that residue.
#   • No timezone handling: timestamps are read as UTC or as naive wall time.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union

from xiuchart.core.constants import SECONDS_PER_DAY, astronomical_year, civil_year
from xiuchart.core.errors import InvalidDate

__all__ = [
    "AstronomicalDate",
    "date_to_julian_day",
    "julian_day_to_date",
    "is_leap_year",
    "days_in_month",
]

log = logging.getLogger(__name__)

DateFields = Tuple[int, int, int, int, int, int]

_DAYS_PER_400_YEARS = 146097          # one full Gregorian cycle
_MEEUS_SAFE_JDN = 2299161             # inverse is exact from here on
_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


# ───────────────────────────── Field checks ─────────────────────────────

def is_leap_year(year: int) -> bool:
    """Gregorian leap rule on the exposed (no year zero) numbering."""
    y = astronomical_year(year)
    return y % 4 == 0 and (y % 100 != 0 or y % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidDate(f"month must be 1..12, got {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]


def _require_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDate(f"{name} must be an integer, got {value!r}")
    return value


def _check_fields(year, month, day, hour, minute, second) -> None:
    for name, value in (
        ("year", year), ("month", month), ("day", day),
        ("hour", hour), ("minute", minute), ("second", second),
    ):
        _require_int(name, value)
    if year == 0:
        raise InvalidDate("year 0 does not exist; 1 BCE is year -1")
    if not 1 <= month <= 12:
        raise InvalidDate(f"month must be 1..12, got {month}")
    last = days_in_month(year, month)
    if not 1 <= day <= last:
        raise InvalidDate(f"day must be 1..{last} for {year}-{month:02d}, got {day}")
    if not 0 <= hour <= 23:
        raise InvalidDate(f"hour must be 0..23, got {hour}")
    if not 0 <= minute <= 59:
        raise InvalidDate(f"minute must be 0..59, got {minute}")
    if not 0 <= second <= 59:
        raise InvalidDate(f"second must be 0..59, got {second}")


# ───────────────────────────── Conversions ─────────────────────────────

def date_to_julian_day(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> float:
    """
    Calendar fields -> Julian Day.

    Raises InvalidDate for out-of-range fields; nothing is clamped.
    """
    _check_fields(year, month, day, hour, minute, second)

    y = astronomical_year(year)
    m = month
    if m <= 2:
        y -= 1
        m += 12

    a = y // 100
    b = 2 - a + a // 4
    jd = math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + day + b - 1524.5
    return jd + (hour + minute / 60.0 + second / 3600.0) / 24.0


def julian_day_to_date(julian_day: float) -> DateFields:
    """
    Julian Day -> (year, month, day, hour, minute, second).

    Inverse of date_to_julian_day for any finite JD, including negative ones.
    The time of day is floored to the whole second.
    """
    jd = float(julian_day)
    if not math.isfinite(jd):
        raise InvalidDate(f"julian day must be finite, got {julian_day!r}")

    shifted = jd + 0.5
    z = math.floor(shifted)
    seconds = math.floor((shifted - z) * SECONDS_PER_DAY)
    if seconds >= SECONDS_PER_DAY:
        z += 1
        seconds -= SECONDS_PER_DAY

    # Move early dates forward by whole 400-year cycles, undo on the year.
    cycles = 0
    if z < _MEEUS_SAFE_JDN:
        cycles = (_MEEUS_SAFE_JDN - z) // _DAYS_PER_400_YEARS + 1
        z += cycles * _DAYS_PER_400_YEARS

    alpha = math.floor((z - 1867216.25) / 36524.25)
    a = z + 1 + alpha - alpha // 4
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    astro_year = (c - 4716 if month > 2 else c - 4715) - 400 * cycles

    hour, rest = divmod(seconds, 3600)
    minute, second = divmod(rest, 60)
    return civil_year(astro_year), month, day, hour, minute, second


# ───────────────────────────── Value type ─────────────────────────────

@dataclass(frozen=True)
class AstronomicalDate:
    """
    A calendar instant backed by a Julian Day.

    Constructing from fields validates them and derives `julian_day`;
    `from_julian_day` keeps the given JD and derives the fields. Arithmetic
    never mutates: every `add_*` returns a new instance.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    julian_day: float = field(init=False)

    def __post_init__(self) -> None:
        jd = date_to_julian_day(self.year, self.month, self.day, self.hour, self.minute, self.second)
        object.__setattr__(self, "julian_day", jd)

    # ── constructors ──
    @classmethod
    def from_fields(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
    ) -> "AstronomicalDate":
        return cls(year, month, day, hour, minute, second)

    @classmethod
    def from_julian_day(cls, julian_day: float) -> "AstronomicalDate":
        out = cls(*julian_day_to_date(julian_day))
        object.__setattr__(out, "julian_day", float(julian_day))
        return out

    @classmethod
    def from_timestamp(cls, wall_clock: Union[datetime, int, float]) -> "AstronomicalDate":
        """
        Aware datetimes are converted to UTC, naive ones are taken as wall
        time, numbers are POSIX seconds (UTC). Sub-second parts are dropped.
        """
        if isinstance(wall_clock, datetime):
            dt = wall_clock
            if dt.tzinfo is not None:
                dt = dt.astimezone(timezone.utc)
        elif isinstance(wall_clock, (int, float)) and not isinstance(wall_clock, bool):
            dt = datetime.fromtimestamp(wall_clock, tz=timezone.utc)
        else:
            raise InvalidDate(f"unsupported timestamp {wall_clock!r}")
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    @classmethod
    def now(cls) -> "AstronomicalDate":
        return cls.from_timestamp(datetime.now(timezone.utc))

    @classmethod
    def from_year_offset(cls, year: int, days: int) -> "AstronomicalDate":
        """Midnight of 1 January `year`, `days` days later (timeline slider)."""
        return cls(year, 1, 1).add_days(days)

    # ── arithmetic ──
    def add_years(self, years: int) -> "AstronomicalDate":
        _require_int("years", years)
        target = civil_year(astronomical_year(self.year) + years)
        return self._with_calendar(target, self.month)

    def add_months(self, months: int) -> "AstronomicalDate":
        _require_int("months", months)
        total = astronomical_year(self.year) * 12 + (self.month - 1) + months
        astro, month0 = divmod(total, 12)
        return self._with_calendar(civil_year(astro), month0 + 1)

    def add_days(self, days: int) -> "AstronomicalDate":
        """Same wall-clock time `days` later; the JD moves by exactly `days`."""
        _require_int("days", days)
        # Midnight JDs end in .5 and stay exact under integer steps.
        midnight = date_to_julian_day(self.year, self.month, self.day)
        year, month, day = julian_day_to_date(midnight + days)[:3]
        return type(self)(year, month, day, self.hour, self.minute, self.second)

    def add_hours(self, hours: int) -> "AstronomicalDate":
        _require_int("hours", hours)
        days, hour = divmod(self.hour + hours, 24)
        moved = self.add_days(days)
        return type(self)(moved.year, moved.month, moved.day, hour, self.minute, self.second)

    def _with_calendar(self, year: int, month: int) -> "AstronomicalDate":
        last = days_in_month(year, month)
        day = self.day
        if day > last:
            log.debug("day %d does not exist in %d-%02d; using %d", day, year, month, last)
            day = last
        return type(self)(year, month, day, self.hour, self.minute, self.second)

    # ── presentation ──
    def to_calendar_string(self) -> str:
        label = f"{1 - self.year} BCE" if self.year <= 0 else f"{self.year} CE"
        return (
            f"{label}-{self.month:02d}-{self.day:02d} "
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )

    def __str__(self) -> str:
        return self.to_calendar_string()

    def to_datetime(self) -> Optional[datetime]:
        """UTC datetime when the year fits the stdlib range (1..9999), else None."""
        if not 1 <= self.year <= 9999:
            return None
        return datetime(
            self.year, self.month, self.day, self.hour, self.minute, self.second,
            tzinfo=timezone.utc,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "hour": self.hour,
            "minute": self.minute,
            "second": self.second,
            "julian_day": self.julian_day,
            "label": self.to_calendar_string(),
        }
