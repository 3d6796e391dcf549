"""Load optional dashboard configuration from `<state dir>/config.yaml`."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from .constants import (
    CONFIG_FILE,
    DEFAULT_CAPACITY_PER_WEEK,
    DEFAULT_LOG_LEVEL,
    STATE_DIR_ENV,
    STATE_DIR_NAME,
)
from .domain.models import ProjectStatus, coerce_enum
from .io_utils import load_yaml_with_error

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def resolve_state_dir(state_dir: Optional[str | Path] = None) -> Path:
    """Pick the state directory: explicit argument, then `ORBIT_STATE_DIR`, then `./.orbit`."""
    if state_dir:
        return Path(state_dir).expanduser().resolve()
    env = os.environ.get(STATE_DIR_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return (Path.cwd() / STATE_DIR_NAME).resolve()


def load_dashboard_config(state_dir: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        state_dir: Dashboard state directory.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    path = state_dir / CONFIG_FILE
    data, err = load_yaml_with_error(path, {})
    if err:
        return {}, err
    return data, None


def _get_nested(config: dict[str, Any], *keys: str) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def get_workload_config(config: dict[str, Any]) -> dict[str, Any]:
    """Extract workload settings with defaults applied.

    Args:
        config: Dashboard configuration dictionary.

    Returns:
        A mapping with `default_capacity`, `include_done` and `active_statuses`.
    """
    raw = _get_nested(config, "workload")
    raw = raw if isinstance(raw, dict) else {}

    capacity = raw.get("default_capacity")
    if isinstance(capacity, bool) or not isinstance(capacity, (int, float)) or capacity <= 0:
        capacity = DEFAULT_CAPACITY_PER_WEEK

    statuses_raw = raw.get("active_statuses")
    statuses: list[ProjectStatus] = []
    if isinstance(statuses_raw, list):
        for item in statuses_raw:
            status = coerce_enum(ProjectStatus, item, None)
            if status is not None and status not in statuses:
                statuses.append(status)
    if not statuses:
        statuses = [ProjectStatus.ACTIVE]

    return {
        "default_capacity": capacity,
        "include_done": bool(raw.get("include_done", False)),
        "active_statuses": statuses,
    }


def get_log_level(config: dict[str, Any]) -> str:
    raw = _get_nested(config, "logging", "level")
    if isinstance(raw, str) and raw.upper() in VALID_LOG_LEVELS:
        return raw.upper()
    return DEFAULT_LOG_LEVEL


def seed_users_enabled(config: dict[str, Any]) -> bool:
    raw = _get_nested(config, "seed", "users")
    return raw if isinstance(raw, bool) else True
