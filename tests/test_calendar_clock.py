# tests/test_calendar_clock.py
from __future__ import annotations

from dataclasses import astuple
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from xiuchart.core.calendar_clock import (
    AstronomicalDate,
    date_to_julian_day,
    days_in_month,
    is_leap_year,
    julian_day_to_date,
)
from xiuchart.core.constants import astronomical_year
from xiuchart.core.errors import ChartError, InvalidDate

# ─────────────────────────────────────────────────────────────────────────────
# Strategies
# ─────────────────────────────────────────────────────────────────────────────

years = st.integers(min_value=-10000, max_value=10000).filter(lambda y: y != 0)

@st.composite
def date_fields(draw, year_strategy=years):
    y = draw(year_strategy)
    m = draw(st.integers(min_value=1, max_value=12))
    d = draw(st.integers(min_value=1, max_value=days_in_month(y, m)))
    hh = draw(st.integers(min_value=0, max_value=23))
    mm = draw(st.integers(min_value=0, max_value=59))
    ss = draw(st.integers(min_value=0, max_value=59))
    return y, m, d, hh, mm, ss


# ─────────────────────────────────────────────────────────────────────────────
# Known values
# ─────────────────────────────────────────────────────────────────────────────

def test_j2000_epoch() -> None:
    assert AstronomicalDate(2000, 1, 1, 12, 0, 0).julian_day == 2451545.0

@pytest.mark.parametrize(
    "fields, jd",
    [
        ((1582, 10, 15), 2299160.5),   # first day of the Gregorian reform
        ((1582, 10, 4), 2299149.5),    # proleptic Gregorian, no Julian switch
        ((1, 1, 1), 1721425.5),
        ((-1, 1, 1), 1721059.5),       # 1 BCE is a leap year (366 days before 1 CE)
        ((1970, 1, 1), 2440587.5),
    ],
)
def test_known_julian_days(fields, jd) -> None:
    assert date_to_julian_day(*fields) == jd
    assert julian_day_to_date(jd)[:3] == fields

def test_from_julian_day_keeps_exact_value() -> None:
    d = AstronomicalDate.from_julian_day(2451545.25)
    assert (d.year, d.month, d.day, d.hour, d.minute, d.second) == (2000, 1, 1, 18, 0, 0)
    assert d.julian_day == 2451545.25

def test_sub_second_fraction_truncates() -> None:
    d = AstronomicalDate.from_julian_day(2451545.0 + 0.5 / 86400.0)
    assert (d.hour, d.minute, d.second) == (12, 0, 0)

def test_fraction_just_below_next_second_truncates() -> None:
    jd = date_to_julian_day(2000, 1, 1, 12, 0, 0) + 0.9996 / 86400.0
    assert julian_day_to_date(jd) == (2000, 1, 1, 12, 0, 0)

def test_negative_julian_day() -> None:
    jd = date_to_julian_day(-5000, 6, 15, 18, 0, 0)
    assert jd < 0
    assert julian_day_to_date(jd) == (-5000, 6, 15, 18, 0, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Properties
# ─────────────────────────────────────────────────────────────────────────────

def _second_of_day(fields) -> int:
    return fields[3] * 3600 + fields[4] * 60 + fields[5]

@given(fields=date_fields())
def test_round_trip_fields(fields) -> None:
    back = julian_day_to_date(date_to_julian_day(*fields))
    assert back[:3] == fields[:3]
    assert _second_of_day(fields) - _second_of_day(back) in (0, 1)

@given(fields=date_fields(), hour=st.sampled_from([0, 6, 12, 18]))
def test_round_trip_is_exact_on_binary_fractions(fields, hour) -> None:
    exact = fields[:3] + (hour, 0, 0)
    assert julian_day_to_date(date_to_julian_day(*exact)) == exact

@given(fields=date_fields())
def test_from_julian_day_of_date_is_same_date(fields) -> None:
    d = AstronomicalDate(*fields)
    e = AstronomicalDate.from_julian_day(d.julian_day)
    assert e.julian_day == d.julian_day
    assert (e.year, e.month, e.day) == (d.year, d.month, d.day)
    assert _second_of_day(fields) - _second_of_day(astuple(e)) in (0, 1)

@given(fields=date_fields(st.integers(min_value=-4700, max_value=9999).filter(lambda y: y != 0)))
def test_matches_erfa_cal2jd(ensure_erfa, fields) -> None:
    y, m, d, *_ = fields
    djm0, djm = ensure_erfa.cal2jd(astronomical_year(y), m, d)
    assert date_to_julian_day(y, m, d) == pytest.approx(float(djm0) + float(djm), abs=1e-9)

@given(fields=date_fields(st.integers(min_value=-4700, max_value=9999).filter(lambda y: y != 0)))
def test_matches_erfa_jd2cal(ensure_erfa, fields) -> None:
    y, m, d, *_ = fields
    jd = date_to_julian_day(y, m, d, 12)
    iy, im, iday, _fd = ensure_erfa.jd2cal(jd, 0.0)
    assert (int(iy), int(im), int(iday)) == (astronomical_year(y), m, d)

@given(fields=date_fields(), n=st.integers(min_value=-5000, max_value=5000))
def test_add_days_moves_julian_day_exactly(fields, n) -> None:
    d = AstronomicalDate(*fields)
    moved = d.add_days(n)
    assert moved.julian_day == pytest.approx(d.julian_day + n, abs=1e-8)
    assert (moved.hour, moved.minute, moved.second) == fields[3:]

@given(fields=date_fields(), n=st.integers(min_value=-100, max_value=100))
def test_add_hours_keeps_minutes_and_seconds(fields, n) -> None:
    d = AstronomicalDate(*fields)
    moved = d.add_hours(n)
    assert moved.julian_day == pytest.approx(d.julian_day + n / 24.0, abs=1e-8)
    assert (moved.minute, moved.second) == fields[4:]


# ─────────────────────────────────────────────────────────────────────────────
# Year numbering
# ─────────────────────────────────────────────────────────────────────────────

def test_bce_label() -> None:
    assert AstronomicalDate(-1, 3, 1, 6, 5, 4).to_calendar_string() == "2 BCE-03-01 06:05:04"
    assert str(AstronomicalDate(2024, 12, 31, 23, 59, 59)) == "2024 CE-12-31 23:59:59"

def test_leap_years_without_year_zero() -> None:
    assert is_leap_year(-1)       # astronomical year 0
    assert is_leap_year(-5)       # astronomical year -4
    assert not is_leap_year(-2)
    assert is_leap_year(2000) and not is_leap_year(1900)
    assert days_in_month(-1, 2) == 29

def test_year_zero_rejected() -> None:
    with pytest.raises(InvalidDate):
        AstronomicalDate(0, 1, 1)

def test_day_before_1_ce_is_1_bce() -> None:
    d = AstronomicalDate(1, 1, 1).add_days(-1)
    assert (d.year, d.month, d.day) == (-1, 12, 31)


# ─────────────────────────────────────────────────────────────────────────────
# Arithmetic
# ─────────────────────────────────────────────────────────────────────────────

def test_add_months_back_from_january() -> None:
    d = AstronomicalDate(2024, 1, 15, 8).add_months(-1)
    assert (d.year, d.month, d.day, d.hour) == (2023, 12, 15, 8)

def test_add_months_back_from_january_of_1_ce() -> None:
    d = AstronomicalDate(1, 1, 10).add_months(-1)
    assert (d.year, d.month, d.day) == (-1, 12, 10)

def test_add_years_skips_zero() -> None:
    assert AstronomicalDate(1, 6, 1).add_years(-1).year == -1
    assert AstronomicalDate(-1, 6, 1).add_years(1).year == 1
    assert AstronomicalDate(-3, 6, 1).add_years(5).year == 3

def test_add_months_clamps_to_month_end() -> None:
    d = AstronomicalDate(2024, 1, 31).add_months(1)
    assert (d.year, d.month, d.day) == (2024, 2, 29)
    d = AstronomicalDate(2023, 3, 31).add_months(-1)
    assert (d.month, d.day) == (2, 28)

def test_add_years_clamps_leap_day() -> None:
    d = AstronomicalDate(2024, 2, 29).add_years(1)
    assert (d.year, d.month, d.day) == (2025, 2, 28)

def test_add_hours_rolls_over_year() -> None:
    d = AstronomicalDate(2024, 12, 31).add_hours(25)
    assert (d.year, d.month, d.day, d.hour) == (2025, 1, 1, 1)

def test_repeated_hour_steps_keep_the_second() -> None:
    d = AstronomicalDate(2024, 3, 20, 7, 41, 13)
    for _ in range(48):
        d = d.add_hours(1)
    assert (d.month, d.day, d.hour, d.minute, d.second) == (3, 22, 7, 41, 13)
    d = d.add_hours(-49)
    assert (d.month, d.day, d.hour) == (3, 20, 6)

def test_arithmetic_returns_new_value() -> None:
    d = AstronomicalDate(2024, 5, 5)
    e = d.add_days(1)
    assert d.day == 5 and e.day == 6
    with pytest.raises(AttributeError):
        d.day = 7  # type: ignore[misc]

def test_from_year_offset() -> None:
    d = AstronomicalDate.from_year_offset(2024, 59)
    assert (d.year, d.month, d.day) == (2024, 2, 29)


# ─────────────────────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "fields",
    [
        (2024, 13, 1),
        (2024, 0, 1),
        (2023, 2, 29),
        (2024, 4, 31),
        (2024, 1, 1, 24),
        (2024, 1, 1, 0, 60),
        (2024, 1, 1, 0, 0, 60),
        (2024, 1, 1.5),
        (True, 1, 1),
    ],
)
def test_invalid_fields_raise(fields) -> None:
    with pytest.raises(InvalidDate):
        AstronomicalDate(*fields)

def test_invalid_date_is_a_value_error() -> None:
    with pytest.raises(ValueError) as exc:
        AstronomicalDate(2023, 2, 30)
    assert isinstance(exc.value, ChartError)
    assert exc.value.code == "invalid_date"

def test_non_finite_julian_day() -> None:
    with pytest.raises(InvalidDate):
        julian_day_to_date(float("nan"))


# ─────────────────────────────────────────────────────────────────────────────
# Timestamps & presentation
# ─────────────────────────────────────────────────────────────────────────────

def test_from_posix_timestamp() -> None:
    d = AstronomicalDate.from_timestamp(0)
    assert (d.year, d.month, d.day, d.hour) == (1970, 1, 1, 0)
    assert d.julian_day == 2440587.5

def test_from_aware_datetime_converts_to_utc() -> None:
    local = datetime(2024, 1, 1, 8, 30, 15, 999999, tzinfo=timezone(timedelta(hours=8)))
    d = AstronomicalDate.from_timestamp(local)
    assert (d.year, d.month, d.day, d.hour, d.minute, d.second) == (2024, 1, 1, 0, 30, 15)

def test_from_naive_datetime_is_wall_clock() -> None:
    d = AstronomicalDate.from_timestamp(datetime(1999, 12, 31, 23, 59, 59))
    assert (d.year, d.hour, d.second) == (1999, 23, 59)

def test_from_timestamp_rejects_strings() -> None:
    with pytest.raises(InvalidDate):
        AstronomicalDate.from_timestamp("2024-01-01")  # type: ignore[arg-type]

def test_to_datetime_range() -> None:
    assert AstronomicalDate(2024, 3, 1, 2).to_datetime() == datetime(2024, 3, 1, 2, tzinfo=timezone.utc)
    assert AstronomicalDate(-1, 3, 1).to_datetime() is None

def test_to_dict() -> None:
    out = AstronomicalDate(-771, 3, 1).to_dict()
    assert out["year"] == -771
    assert out["label"] == "772 BCE-03-01 00:00:00"
    assert isinstance(out["julian_day"], float)
