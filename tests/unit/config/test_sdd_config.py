"""Unit tests for project config loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from _pytest.monkeypatch import MonkeyPatch

from sdd.config import (
    DEFAULT_APPROVER,
    ApprovalSettings,
    ConfigError,
    SddConfig,
    load_config,
)
from sdd.gates.engine import ReentryPolicy


@pytest.mark.unit
def test_missing_config_returns_defaults(tmp_path: Path) -> None:
    """No config file means default settings."""
    config = load_config(tmp_path / "config.yaml")

    assert config == SddConfig()
    assert config.workflow.reentry_policy is ReentryPolicy.ACCUMULATE
    assert config.workflow.lock_timeout_seconds == 10.0
    assert config.logging.level == "WARNING"
    assert config.logging.event_log is True


@pytest.mark.unit
def test_yaml_config_is_parsed(tmp_path: Path) -> None:
    """YAML config values override defaults."""
    # Arrange
    path = tmp_path / "config.yaml"
    path.write_text(
        "approval:\n"
        "  default_approver: alice\n"
        "workflow:\n"
        "  reentry_policy: reset\n"
        "  lock_timeout_seconds: 2.5\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )

    # Act
    config = load_config(path)

    # Assert
    assert config.approval.default_approver == "alice"
    assert config.workflow.reentry_policy is ReentryPolicy.RESET
    assert config.workflow.lock_timeout_seconds == 2.5
    assert config.logging.level == "DEBUG"


@pytest.mark.unit
def test_json_config_is_parsed(tmp_path: Path) -> None:
    """A .json suffix is decoded as JSON."""
    path = tmp_path / "config.json"
    path.write_text('{"workflow": {"reentry_policy": "reset"}}', encoding="utf-8")

    assert load_config(path).workflow.reentry_policy is ReentryPolicy.RESET


@pytest.mark.unit
def test_empty_config_returns_defaults(tmp_path: Path) -> None:
    """An empty YAML document is treated as no overrides."""
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == SddConfig()


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    [
        "workflow: [broken\n",
        "- a\n- b\n",
        "unknown_section: {}\n",
        "workflow:\n  lock_timeout_seconds: 0\n",
        "logging:\n  level: LOUD\n",
        "workflow:\n  reentry_policy: forget\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    """Undecodable or invalid payloads raise ConfigError."""
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.unit
def test_resolve_approver_prefers_config() -> None:
    """Configured approver wins over the login user."""
    assert ApprovalSettings(default_approver="alice").resolve_approver() == "alice"


@pytest.mark.unit
def test_resolve_approver_falls_back_to_login(monkeypatch: MonkeyPatch) -> None:
    """Without config the login user is used."""
    monkeypatch.setattr("sdd.config.getpass.getuser", lambda: "bob")

    assert ApprovalSettings().resolve_approver() == "bob"


@pytest.mark.unit
def test_resolve_approver_last_resort(monkeypatch: MonkeyPatch) -> None:
    """When the login user is unknown the default approver name is used."""

    def _no_user() -> str:
        raise OSError("no user")

    monkeypatch.setattr("sdd.config.getpass.getuser", _no_user)

    assert ApprovalSettings().resolve_approver() == DEFAULT_APPROVER
