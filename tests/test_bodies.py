# tests/test_bodies.py
from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from xiuchart.core.bodies import (
    BODY_NAMES,
    body_positions,
    chart_angle,
    compute_body_positions,
    julian_centuries,
    mars_position,
    mean_longitude,
    moon_position,
    sun_position,
)
from xiuchart.core.calendar_clock import AstronomicalDate

J2000 = AstronomicalDate(2000, 1, 1, 12)


def test_julian_centuries() -> None:
    assert julian_centuries(2451545.0) == 0.0
    assert julian_centuries(2451545.0 + 36525.0) == 1.0

def test_mean_longitudes_at_j2000() -> None:
    assert mean_longitude("sun", J2000.julian_day) == pytest.approx(280.46646)
    assert mean_longitude("moon", J2000.julian_day) == pytest.approx(218.3164477)
    assert mean_longitude("mars", J2000.julian_day) == pytest.approx(355.45332)

def test_chart_angles_at_j2000() -> None:
    assert sun_position(J2000) == pytest.approx(79.53354)
    assert moon_position(J2000) == pytest.approx(141.6835523)
    assert mars_position(J2000) == pytest.approx(4.54668)

def test_compute_body_positions_keys() -> None:
    out = compute_body_positions(J2000)
    assert set(out) == {"sun", "moon", "mars"}
    assert out["sun"] == sun_position(J2000)

def test_body_positions_records() -> None:
    recs = body_positions(J2000)
    assert tuple(r.name for r in recs) == BODY_NAMES
    for r in recs:
        assert r.chart_angle == pytest.approx((360.0 - r.longitude) % 360.0)

def test_unknown_body_raises_key_error() -> None:
    with pytest.raises(KeyError):
        mean_longitude("venus", J2000.julian_day)

@given(
    jd=st.floats(min_value=-2e6, max_value=6e6, allow_nan=False, allow_infinity=False),
    body=st.sampled_from(BODY_NAMES),
)
def test_angles_in_range(jd, body) -> None:
    assert 0.0 <= mean_longitude(body, jd) < 360.0
    assert 0.0 <= chart_angle(body, jd) < 360.0

def test_sun_advances_about_one_degree_per_day() -> None:
    a = mean_longitude("sun", J2000.julian_day)
    b = mean_longitude("sun", J2000.add_days(1).julian_day)
    assert (b - a) % 360.0 == pytest.approx(0.98565, abs=1e-4)
