# ./src/expiringmap/utils/config.py
"""Configuration loader and coercion utilities for ExpiringMap.

Used by ``build_map`` and the CLI to merge defaults, JSON config, dotenv, and environment.
Run path: internal import via ``expiringmap.expiring`` or direct helper import in tests.
Inputs: optional JSON config path, optional local ``.env``, and ``EXPIRINGMAP_*`` variables.
Outputs: populated ``Config`` dataclass with normalized types.
Side effects: may read local files and mutate process env when a ``.env`` is present.
Operational notes: malformed overrides are safely ignored to preserve deterministic defaults.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

_LOG_LEVELS = {
    "CRITICAL": 50,
    "ERROR": 40,
    "WARNING": 30,
    "INFO": 20,
    "DEBUG": 10,
    "NOTSET": 0,
}


@dataclass
class Config:
    ttl_seconds: float = 60.0
    log_level: int = 20
    logger_name: str = "expiringmap"


def _positive_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        if isinstance(value, (int, float)):
            parsed = float(value)
        elif isinstance(value, str) and value.strip():
            parsed = float(value.strip())
        else:
            return default
    except ValueError:
        return default
    if not math.isfinite(parsed) or parsed <= 0:
        return default
    return parsed


def _log_level(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        normalized = value.strip().upper()
        if normalized in _LOG_LEVELS:
            return _LOG_LEVELS[normalized]
        try:
            return int(normalized)
        except ValueError:
            return default
    return default


def _apply_json_overrides(cfg: Config, data: dict[str, Any]) -> None:
    for key, value in data.items():
        if key == "ttl_seconds":
            cfg.ttl_seconds = _positive_float(value, cfg.ttl_seconds)
        elif key == "log_level":
            cfg.log_level = _log_level(value, cfg.log_level)
        elif key == "logger_name":
            if isinstance(value, str) and value.strip():
                cfg.logger_name = value.strip()


def _load_json_config(config_path: str) -> dict[str, Any]:
    path = Path(config_path)
    if not path.is_file():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _load_dotenv_if_present() -> None:
    env_path = Path(".env")
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=True)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load runtime config with precedence: defaults -> JSON -> dotenv -> env."""
    cfg = Config()

    if config_path:
        _apply_json_overrides(cfg, _load_json_config(config_path))

    _load_dotenv_if_present()
    env = os.environ.get

    cfg.ttl_seconds = _positive_float(env("EXPIRINGMAP_TTL_SECONDS"), cfg.ttl_seconds)

    level = env("EXPIRINGMAP_LOG_LEVEL")
    if level:
        cfg.log_level = _LOG_LEVELS.get(level.strip().upper(), cfg.log_level)

    cfg.logger_name = (env("EXPIRINGMAP_LOGGER_NAME") or "").strip() or cfg.logger_name

    return cfg
