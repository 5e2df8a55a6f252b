# tests/test_divisions.py
from __future__ import annotations

import logging

import pytest
from hypothesis import given, strategies as st

from xiuchart.core.constants import ZODIACAL_DIVISIONS, ZodiacalDivision, delta_deg
from xiuchart.core.divisions import (
    compute_zodiacal_divisions,
    resolve_division,
    resolve_divisions,
)
from xiuchart.core.mansions import mansion_table

years = st.integers(min_value=-10000, max_value=10000).filter(lambda y: y != 0)


def test_catalog_chains() -> None:
    assert len(ZODIACAL_DIVISIONS) == 12
    for cur, nxt in zip(ZODIACAL_DIVISIONS, ZODIACAL_DIVISIONS[1:] + ZODIACAL_DIVISIONS[:1]):
        assert cur.end_descriptor == nxt.start_descriptor

def test_first_division_at_reference_year() -> None:
    arc = compute_zodiacal_divisions(-2629)[0]
    assert arc.name == "星纪"
    assert arc.start_angle == pytest.approx(240.0 - 26.25 * 360.0 / 365.25 + 11.0)
    assert arc.end_angle == pytest.approx(240.0 + 8.0 * 360.0 / 365.25 + 7.0)

@given(y=years)
def test_divisions_cover_the_circle(y) -> None:
    res = resolve_divisions(y)
    assert res.ok and len(res.arcs) == 12
    assert [a.name for a in res.arcs] == [d.name for d in ZODIACAL_DIVISIONS]
    assert sum(a.end_angle >= 360.0 for a in res.arcs) <= 1
    assert sum(a.span for a in res.arcs) == pytest.approx(360.0)
    for a in res.arcs:
        assert 0.0 <= a.start_angle < 360.0
        assert a.end_angle >= a.start_angle

@given(y=years)
def test_arcs_chain(y) -> None:
    arcs = compute_zodiacal_divisions(y)
    for cur, nxt in zip(arcs, arcs[1:] + arcs[:1]):
        assert abs(delta_deg(cur.end_angle, nxt.start_angle)) < 1e-9

def test_seam_crossing_end_exceeds_360() -> None:
    crossing = [a for a in compute_zodiacal_divisions(2024) if a.end_angle >= 360.0]
    assert [a.name for a in crossing] == ["娵訾"]
    arc = crossing[0]
    assert arc.start_angle > 300.0 and arc.end_angle - 360.0 < 60.0
    assert 0.0 <= arc.mid_longitude < 360.0

def test_resolve_division_against_table() -> None:
    table = mansion_table(2024)
    arc = resolve_division(ZODIACAL_DIVISIONS[0], table)
    assert arc.start_angle == pytest.approx(table["斗"].start_longitude + 11.0)
    assert arc.end_angle == pytest.approx(table["女"].start_longitude + 7.0)

def test_mid_longitude() -> None:
    for arc in compute_zodiacal_divisions(1):
        assert abs(delta_deg(arc.start_angle, arc.mid_longitude)) == pytest.approx(arc.span / 2.0)

def test_typo_does_not_sink_other_divisions(caplog) -> None:
    catalog = list(ZODIACAL_DIVISIONS)
    catalog[0] = ZodiacalDivision("星纪", "抖宿11度", "女宿7度")
    catalog[5] = ZodiacalDivision("实沈", "毕宿11度", "井15度")
    with caplog.at_level(logging.WARNING, logger="xiuchart.core.divisions"):
        res = resolve_divisions(2024, catalog)
    assert not res.ok
    assert len(res.arcs) == 10
    assert {f.name: f.code for f in res.failures} == {
        "星纪": "unknown_mansion",
        "实沈": "malformed_descriptor",
    }
    assert "星纪" in caplog.text and "实沈" in caplog.text

def test_to_dict_shape() -> None:
    out = compute_zodiacal_divisions(2024)[3].to_dict()
    assert set(out) == {
        "name", "start_angle", "end_angle", "span", "mid_longitude",
        "start_descriptor", "end_descriptor",
    }
