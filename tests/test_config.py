from __future__ import annotations

from pathlib import Path

import pytest

from orbit_portfolio.config import (
    get_log_level,
    get_workload_config,
    load_dashboard_config,
    resolve_state_dir,
    seed_users_enabled,
)
from orbit_portfolio.domain.models import ProjectStatus


def _write_config(state_dir: Path, text: str) -> None:
    state_dir.mkdir(parents=True, exist_ok=True)
    (state_dir / "config.yaml").write_text(text, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config, err = load_dashboard_config(tmp_path)
    assert (config, err) == ({}, None)
    assert get_workload_config(config) == {
        "default_capacity": 30,
        "include_done": False,
        "active_statuses": [ProjectStatus.ACTIVE],
    }
    assert get_log_level(config) == "INFO"
    assert seed_users_enabled(config) is True


def test_values_are_read(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        "workload:\n"
        "  default_capacity: 25\n"
        "  include_done: true\n"
        "  active_statuses: [Active, On Hold, Active]\n"
        "logging:\n"
        "  level: debug\n"
        "seed:\n"
        "  users: false\n",
    )
    config, err = load_dashboard_config(tmp_path)
    assert err is None
    assert get_workload_config(config) == {
        "default_capacity": 25,
        "include_done": True,
        "active_statuses": [ProjectStatus.ACTIVE, ProjectStatus.ON_HOLD],
    }
    assert get_log_level(config) == "DEBUG"
    assert seed_users_enabled(config) is False


@pytest.mark.parametrize("capacity", ["lots", 0, -1, True])
def test_bad_capacity_falls_back(capacity: object) -> None:
    assert get_workload_config({"workload": {"default_capacity": capacity}})["default_capacity"] == 30


def test_unknown_log_level_falls_back() -> None:
    assert get_log_level({"logging": {"level": "LOUD"}}) == "INFO"


def test_invalid_yaml_reports_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "workload: [\n")
    config, err = load_dashboard_config(tmp_path)
    assert config == {}
    assert err and "YAMLError" in err


def test_non_mapping_reports_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "- just\n- a list\n")
    _, err = load_dashboard_config(tmp_path)
    assert err and "expected object" in err


def test_resolve_state_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ORBIT_STATE_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    assert resolve_state_dir() == (tmp_path / ".orbit").resolve()

    monkeypatch.setenv("ORBIT_STATE_DIR", str(tmp_path / "from-env"))
    assert resolve_state_dir() == (tmp_path / "from-env").resolve()
    assert resolve_state_dir(tmp_path / "explicit") == (tmp_path / "explicit").resolve()
