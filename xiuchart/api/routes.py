# xiuchart/api/routes.py
"""
xiuchart: JSON API routes
- Calendar: /api/date, /api/julian-day
- Tables: /api/mansions, /api/solar-terms, /api/divisions
- Chart: /api/bodies, /api/descriptor, /api/project, /api/chart
- Ops: /api/health, /api/config

Notes:
- Request-shape problems answer 400 validation_error with pydantic-style details.
- Domain errors (InvalidDate, MalformedDescriptor, UnknownMansion) propagate to
  the app-level handler, which answers 422 with the error's code.
- Mansion tables are memoised per year in an LRU cache owned by the app.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from flask import Blueprint, current_app, jsonify, request

from xiuchart.version import VERSION
from xiuchart.utils.cache import LRUCache
from xiuchart.core.bodies import body_positions
from xiuchart.core.calendar_clock import AstronomicalDate
from xiuchart.core.chart import RADIAL_GUIDES, compute_chart, compute_solar_terms
from xiuchart.core.constants import (
    ANCHOR_MANSION,
    CONSTANTS_VERSION,
    PRECESSION_YEARS_PER_DEGREE,
    REFERENCE_LONGITUDE,
    REFERENCE_YEAR,
    wrap_deg,
)
from xiuchart.core.descriptors import parse_descriptor, resolve_descriptor
from xiuchart.core.divisions import resolve_divisions
from xiuchart.core.mansions import MansionLongitude, mansion_at, mansion_table, precession_offset
from xiuchart.core.projection import (
    arc_geometry,
    chart_angle_to_radians,
    longitude_to_chart_angle,
    point_on_circle,
)
from xiuchart.core.validators import (
    ValidationError,
    apply_steps,
    parse_date_payload,
    parse_descriptor_payload,
    parse_julian_day,
    parse_projection_payload,
    parse_steps,
    parse_year,
)

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)

CACHE_EXTENSION = "xiuchart.mansion_cache"


# ───────────────────────── helpers ─────────────────────────
def _json_error(code: str, details: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    return jsonify(out), http


def _cfg() -> Mapping[str, Any]:
    return getattr(current_app, "cfg", None) or {}


def _default_year() -> int:
    return int(_cfg().get("default_year", 2024))


def _radial_guides() -> int:
    return int((_cfg().get("chart") or {}).get("radial_guides", RADIAL_GUIDES))


def _body() -> Dict[str, Any]:
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise ValidationError([{"loc": [], "msg": "JSON body must be an object", "type": "type_error.dict"}])
    return data


def _mansions_for(year: int) -> Mapping[str, MansionLongitude]:
    cache = current_app.extensions.get(CACHE_EXTENSION)
    if cache is None:
        cache = current_app.extensions[CACHE_EXTENSION] = LRUCache(int(_cfg().get("cache_size", 256)))
    return cache.get_or_compute(year, lambda: mansion_table(year))


# ───────────────────────── health / ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION}), 200


@api.get("/api/config")
def config_info():
    cache = current_app.extensions.get(CACHE_EXTENSION)
    return jsonify({
        "ok": True,
        "version": VERSION,
        "config": dict(_cfg()),
        "constants": {
            "version": CONSTANTS_VERSION,
            "reference_year": REFERENCE_YEAR,
            "reference_longitude": REFERENCE_LONGITUDE,
            "anchor_mansion": ANCHOR_MANSION,
            "precession_years_per_degree": PRECESSION_YEARS_PER_DEGREE,
        },
        "cache": None if cache is None else {
            "size": len(cache), "capacity": cache.capacity, "hits": cache.hits, "misses": cache.misses,
        },
    }), 200


# ───────────────────────── calendar ─────────────────────────
@api.post("/api/date")
def date_endpoint():
    try:
        body = _body()
        date = parse_date_payload(body)
        steps = parse_steps(body.get("steps"))
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    result = apply_steps(date, steps)
    return jsonify({"ok": True, "input": date.to_dict(), "date": result.to_dict()}), 200


@api.get("/api/julian-day")
def julian_day_endpoint():
    try:
        jd = parse_julian_day(request.args.get("jd"))
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)
    return jsonify({"ok": True, "date": AstronomicalDate.from_julian_day(jd).to_dict()}), 200


# ───────────────────────── tables ─────────────────────────
@api.get("/api/mansions")
def mansions_endpoint():
    try:
        year = parse_year(request.args.get("year"), default=_default_year())
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    table = _mansions_for(year)
    return jsonify({
        "ok": True,
        "year": year,
        "precession_offset": precession_offset(year),
        "mansions": [m.to_dict() for m in table.values()],
    }), 200


@api.get("/api/solar-terms")
def solar_terms_endpoint():
    terms = [
        {"name": t.name, "longitude": t.longitude, "chart_angle": longitude_to_chart_angle(t.longitude)}
        for t in compute_solar_terms()
    ]
    return jsonify({"ok": True, "solar_terms": terms}), 200


@api.get("/api/divisions")
def divisions_endpoint():
    try:
        year = parse_year(request.args.get("year"), default=_default_year())
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    res = resolve_divisions(year)
    return jsonify({
        "ok": True,
        "year": year,
        "divisions": [a.to_dict() for a in res.arcs],
        "failures": [f.to_dict() for f in res.failures],
    }), 200


# ───────────────────────── chart ─────────────────────────
@api.post("/api/bodies")
def bodies_endpoint():
    try:
        body = _body()
        date = parse_date_payload(body)
        year = parse_year(body.get("table_year"), loc="table_year", default=date.year)
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    table = _mansions_for(year)
    out = []
    for pos in body_positions(date):
        out.append({
            "name": pos.name,
            "longitude": pos.longitude,
            "chart_angle": pos.chart_angle,
            "mansion": mansion_at(pos.longitude, table).name,
        })
    return jsonify({"ok": True, "date": date.to_dict(), "table_year": year, "bodies": out}), 200


@api.post("/api/descriptor")
def descriptor_endpoint():
    try:
        text, year = parse_descriptor_payload(_body(), _default_year())
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    descriptor = parse_descriptor(text)
    longitude = resolve_descriptor(descriptor, _mansions_for(year))
    return jsonify({
        "ok": True,
        "descriptor": text,
        "year": year,
        "mansion": descriptor.mansion,
        "offset_deg": descriptor.offset_deg,
        "longitude": longitude,
        "chart_angle": longitude_to_chart_angle(longitude),
    }), 200


@api.post("/api/project")
def project_endpoint():
    try:
        req = parse_projection_payload(_body())
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    if "longitude" in req:
        angle = longitude_to_chart_angle(req["longitude"])
    else:
        angle = req["angle"]
    pt = point_on_circle(req["center"], req["radius"], chart_angle_to_radians(angle))
    return jsonify({"ok": True, "chart_angle": wrap_deg(angle), "point": pt._asdict()}), 200


def _chart_geometry(chart: Dict[str, Any]) -> Dict[str, Any]:
    geo = _cfg().get("chart", {}) or {}
    center = tuple(geo.get("center", (0.0, 0.0)))
    inner = float(geo.get("inner_radius", 200.0))
    outer = float(geo.get("outer_radius", 240.0))
    return {
        "center": {"x": center[0], "y": center[1]},
        "inner_radius": inner,
        "outer_radius": outer,
        "mansions": [
            {"name": m["name"], **arc_geometry(center, inner, outer, m["start_longitude"], m["end_longitude"]).to_dict()}
            for m in chart["mansions"]
        ],
        "divisions": [
            {"name": d["name"], **arc_geometry(center, inner, outer, d["start_angle"], d["end_angle"]).to_dict()}
            for d in chart["divisions"]
        ],
    }


@api.post("/api/chart")
def chart_endpoint():
    try:
        body = _body()
        date = parse_date_payload(body)
        date = apply_steps(date, parse_steps(body.get("steps")))
        year = parse_year(body.get("table_year"), loc="table_year", default=date.year)
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    chart = compute_chart(date, year, radial_guides=_radial_guides())
    if body.get("geometry"):
        chart["geometry"] = _chart_geometry(chart)
    if chart["division_errors"]:
        log.warning("chart for %s: %d division(s) unresolved", date, len(chart["division_errors"]))
    chart["ok"] = True
    return jsonify(chart), 200
