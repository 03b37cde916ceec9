# lunch/services/config_svc.py
from __future__ import annotations

import logging
import os
import sys

import yaml

logger = logging.getLogger(__name__)

DEFAULTS = {
    "db_path": "",          # empty: platform data dir, see default_db_path()
    "lock_timeout": "5.0",  # seconds to wait for the store lock
    "avoid_repeats": "false",
    "history_limit": "14",
    "log_level": "INFO",
}

# env var per key; env wins over config.yaml
ENV_KEYS = {
    "db_path": "LUNCH_DB_PATH",
    "lock_timeout": "LUNCH_LOCK_TIMEOUT",
    "avoid_repeats": "LUNCH_AVOID_REPEATS",
    "history_limit": "LUNCH_HISTORY_LIMIT",
    "log_level": "LUNCH_LOG_LEVEL",
}


def config_file_path() -> str:
    return os.environ.get("LUNCH_CONFIG") or os.path.join(os.getcwd(), "config.yaml")


def _read_config_yaml(path: str | None = None) -> dict:
    cfg_path = path or config_file_path()
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    if not isinstance(cfg, dict):
        logger.warning("ignoring config %s: top level is not a mapping", cfg_path)
        return {}
    out = {}
    for k in DEFAULTS:
        v = cfg.get(k)
        if v is not None and str(v).strip():
            out[k] = str(v).strip()
    return out


def default_db_path() -> str:
    """Per-user data location, mirroring where desktop apps keep their files."""
    home = os.path.expanduser("~")
    if sys.platform == "darwin":
        return os.path.join(home, "Library", "Application Support", "Lunch", "lunch.db")
    if sys.platform.startswith("win"):
        base = os.environ.get("APPDATA") or os.path.join(home, "AppData", "Roaming")
        return os.path.join(base, "lunch", "lunch.db")
    base = os.environ.get("XDG_DATA_HOME") or os.path.join(home, ".local", "share")
    return os.path.join(base, "lunch", "lunch.db")


def _to_float(x, default: float) -> float:
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def _to_int(x, default: int) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return default


def _to_bool(x) -> bool:
    return str(x).strip().lower() in ("1", "true", "yes", "on")


def get_config(path: str | None = None) -> dict:
    """Resolve settings: env var > config.yaml > DEFAULTS, converted to their types."""
    cfg = dict(DEFAULTS)
    cfg.update(_read_config_yaml(path))
    for k, env in ENV_KEYS.items():
        v = os.environ.get(env)
        if v is not None and v.strip():
            cfg[k] = v.strip()

    lock_timeout = _to_float(cfg["lock_timeout"], float(DEFAULTS["lock_timeout"]))
    history_limit = _to_int(cfg["history_limit"], int(DEFAULTS["history_limit"]))
    return {
        "db_path": os.path.expanduser(cfg["db_path"]) if cfg["db_path"] else default_db_path(),
        "lock_timeout": lock_timeout if lock_timeout > 0 else float(DEFAULTS["lock_timeout"]),
        "avoid_repeats": _to_bool(cfg["avoid_repeats"]),
        "history_limit": history_limit if history_limit > 0 else int(DEFAULTS["history_limit"]),
        "log_level": str(cfg["log_level"]).upper(),
    }
