# xiuchart/core/validators.py
from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from xiuchart.core.calendar_clock import AstronomicalDate

# ───────────────────────── errors ─────────────────────────

class ValidationError(ValueError):
    """Request-shape error; `.errors()` gives pydantic-style details for the API."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        else:
            self._details = list(details)
            super().__init__(self._details[0]["msg"] if self._details else "validation_error")

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


# ───────────────────────── helpers ─────────────────────────

def _err(loc: List[str] | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _as_float(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    return x if math.isfinite(x) else None

def _as_int(v: Any) -> Optional[int]:
    """Integers, integral floats and digit strings; everything else is None."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if math.isfinite(v) and v.is_integer() else None
    if isinstance(v, str) and re.fullmatch(r"\s*[+-]?\d+\s*", v):
        return int(v)
    return None


# ───────────────────────── atomic parsers ─────────────────────────

_DATE_RE = re.compile(r"^\s*(?P<y>[+-]?\d{1,6})-(?P<m>\d{1,2})-(?P<d>\d{1,2})\s*$")
_TIME_RE = re.compile(r"^\s*(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?\s*$")

def parse_date_str(s: Any) -> Tuple[int, int, int]:
    """'YYYY-MM-DD' with a signed year ('-0771-03-01' is 772 BCE). Range checks happen later."""
    m = _DATE_RE.match(s) if isinstance(s, str) else None
    if not m:
        raise ValidationError(_err("date", "date must be '[-]YYYY-MM-DD'", "value_error.date"))
    return int(m.group("y")), int(m.group("m")), int(m.group("d"))

def parse_time_str(s: Any) -> Tuple[int, int, int]:
    """'HH:MM' or 'HH:MM:SS'. No fractions, no leap seconds."""
    m = _TIME_RE.match(s) if isinstance(s, str) else None
    if not m:
        raise ValidationError(_err("time", "time must be 'HH:MM' or 'HH:MM:SS'", "value_error.time"))
    return int(m.group("h")), int(m.group("m")), int(m.group("s") or 0)

def parse_year(val: Any, loc: str = "year", default: Optional[int] = None) -> int:
    if val is None or val == "":
        if default is None:
            raise ValidationError(_err(loc, "field required", "value_error.missing"))
        return default
    y = _as_int(val)
    if y is None:
        raise ValidationError(_err(loc, "year must be an integer", "type_error.integer"))
    if y == 0:
        raise ValidationError(_err(loc, "year 0 does not exist; 1 BCE is -1"))
    return y

def parse_julian_day(val: Any, loc: str = "jd") -> float:
    jd = _as_float(val)
    if jd is None:
        raise ValidationError(_err(loc, "julian day must be a finite number", "type_error.float"))
    return jd


# ───────────────────────── payload parsers ─────────────────────────

_FIELDS = ("year", "month", "day", "hour", "minute", "second")

def parse_date_payload(data: Dict[str, Any]) -> AstronomicalDate:
    """
    Accepts one of:
      {"jd": 2451545.0}
      {"date": "-0771-03-01", "time": "12:00"}
      {"year": -771, "month": 3, "day": 1, "hour": 12}
    Field ranges are enforced by AstronomicalDate (InvalidDate, not ValidationError).
    """
    if not isinstance(data, dict):
        raise ValidationError(_err([], "request body must be a JSON object", "type_error.dict"))

    if data.get("jd") is not None:
        return AstronomicalDate.from_julian_day(parse_julian_day(data["jd"]))

    if data.get("date") is not None:
        y, mo, d = parse_date_str(data["date"])
        h, mi, s = parse_time_str(data["time"]) if data.get("time") else (0, 0, 0)
        return AstronomicalDate.from_fields(y, mo, d, h, mi, s)

    errors: List[Dict[str, Any]] = []
    values: Dict[str, int] = {}
    for name in _FIELDS:
        raw = data.get(name)
        if raw is None:
            if name in ("year", "month", "day"):
                errors.append(_err(name, "field required", "value_error.missing"))
            else:
                values[name] = 0
            continue
        v = _as_int(raw)
        if v is None:
            errors.append(_err(name, f"{name} must be an integer", "type_error.integer"))
        else:
            values[name] = v
    if errors:
        raise ValidationError(errors)
    return AstronomicalDate.from_fields(**values)


StepUnit = Literal["years", "months", "days", "hours"]
_UNITS = {
    "year": "years", "years": "years",
    "month": "months", "months": "months",
    "day": "days", "days": "days",
    "hour": "hours", "hours": "hours",
}

def parse_steps(val: Any) -> List[Tuple[StepUnit, int]]:
    """[{"unit": "months", "amount": -1}, ...] -> [("months", -1), ...]"""
    if val is None:
        return []
    if not isinstance(val, list):
        raise ValidationError(_err("steps", "steps must be a list", "type_error.list"))
    out: List[Tuple[StepUnit, int]] = []
    errors: List[Dict[str, Any]] = []
    for i, step in enumerate(val):
        if not isinstance(step, dict):
            errors.append(_err(["steps", str(i)], "step must be an object", "type_error.dict"))
            continue
        unit = _UNITS.get(str(step.get("unit", "")).strip().lower())
        amount = _as_int(step.get("amount"))
        if unit is None:
            errors.append(_err(["steps", str(i), "unit"], "unit must be years, months, days or hours"))
        if amount is None:
            errors.append(_err(["steps", str(i), "amount"], "amount must be an integer", "type_error.integer"))
        if unit is not None and amount is not None:
            out.append((unit, amount))  # type: ignore[arg-type]
    if errors:
        raise ValidationError(errors)
    return out

def apply_steps(date: AstronomicalDate, steps: List[Tuple[StepUnit, int]]) -> AstronomicalDate:
    for unit, amount in steps:
        date = getattr(date, f"add_{unit}")(amount)
    return date


def parse_descriptor_payload(data: Dict[str, Any], default_year: int) -> Tuple[str, int]:
    if not isinstance(data, dict):
        raise ValidationError(_err([], "request body must be a JSON object", "type_error.dict"))
    text = data.get("descriptor")
    if not isinstance(text, str) or not text.strip():
        raise ValidationError(_err("descriptor", "descriptor must be a non-empty string", "type_error.str"))
    return text, parse_year(data.get("year"), default=default_year)


def _parse_center(val: Any) -> Tuple[float, float]:
    if val is None:
        return 0.0, 0.0
    if isinstance(val, dict):
        x, y = _as_float(val.get("x")), _as_float(val.get("y"))
    elif isinstance(val, (list, tuple)) and len(val) == 2:
        x, y = _as_float(val[0]), _as_float(val[1])
    else:
        x = y = None
    if x is None or y is None:
        raise ValidationError(_err("center", "center must be [x, y] or {x, y} with finite numbers"))
    return x, y

def parse_projection_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    {"center": [cx, cy], "radius": r, "angle": deg} or the same with "longitude".
    Returns {"center", "radius", "angle"|"longitude"}; exactly one of the last two.
    """
    if not isinstance(data, dict):
        raise ValidationError(_err([], "request body must be a JSON object", "type_error.dict"))
    errors: List[Dict[str, Any]] = []

    radius = _as_float(data.get("radius"))
    if radius is None:
        errors.append(_err("radius", "radius must be a finite number", "type_error.float"))

    has_angle = data.get("angle") is not None
    has_lon = data.get("longitude") is not None
    if has_angle == has_lon:
        errors.append(_err(["angle", "longitude"], "provide exactly one of angle or longitude"))
    key = "angle" if has_angle else "longitude"
    value = _as_float(data.get(key))
    if (has_angle or has_lon) and value is None:
        errors.append(_err(key, f"{key} must be a finite number", "type_error.float"))

    try:
        center = _parse_center(data.get("center"))
    except ValidationError as e:
        errors.extend(e.errors())
        center = (0.0, 0.0)

    if errors:
        raise ValidationError(errors)
    return {"center": center, "radius": radius, key: value}


__all__ = [
    "ValidationError",
    "parse_date_str",
    "parse_time_str",
    "parse_year",
    "parse_julian_day",
    "parse_date_payload",
    "parse_steps",
    "apply_steps",
    "parse_descriptor_payload",
    "parse_projection_payload",
]
