# xiuchart/utils/config.py
import copy
import logging
import os

import yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/defaults.yaml"

DEFAULTS = {
    "default_year": 2024,
    "cache_size": 256,
    "log_level": "INFO",
    "chart": {
        "radial_guides": 24,
        "center": [0.0, 0.0],
        "inner_radius": 200.0,
        "outer_radius": 240.0,
    },
    "cors": {"origins": "*"},
}


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.cache_size and cfg['cache_size'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def _merge(base, override):
    out = dict(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def _env_int(name):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        log.warning("ignoring %s=%r: not an integer", name, raw)
        return None

def load_config(path=None):
    """
    Load YAML config from `path` (default: $XIU_CONFIG or config/defaults.yaml)
    over the built-in DEFAULTS. A missing file is logged and the defaults are used.
    Env overrides:
      - XIU_DEFAULT_YEAR  (0 is ignored: there is no year zero)
      - XIU_CACHE_SIZE
      - XIU_LOG_LEVEL
    Returns an AttrDict for convenient access.
    """
    path = path or os.getenv("XIU_CONFIG", DEFAULT_CONFIG_PATH)
    data = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: top level must be a mapping")
    else:
        log.info("config file %s not found; using built-in defaults", path)

    cfg = _merge(copy.deepcopy(DEFAULTS), data)

    year = _env_int("XIU_DEFAULT_YEAR")
    if year:
        cfg["default_year"] = year
    size = _env_int("XIU_CACHE_SIZE")
    if size is not None and size > 0:
        cfg["cache_size"] = size
    level = os.getenv("XIU_LOG_LEVEL")
    if level:
        cfg["log_level"] = level.upper()

    return _to_attr(cfg)
