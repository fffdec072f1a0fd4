"""Unit tests for sdd CLI command entrypoints."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from sdd.cli import app

_RUNNER = CliRunner()


def _invoke(root: Path, *args: str):
    return _RUNNER.invoke(app, ["--root", str(root), *args])


def _load_state(root: Path) -> dict:
    return yaml.safe_load((root / ".sdd" / "state.yaml").read_text(encoding="utf-8"))


@pytest.mark.unit
def test_init_creates_state(tmp_path: Path) -> None:
    """`sdd init Demo` should write .sdd/state.yaml and exit 0."""
    # Act
    result = _invoke(tmp_path, "init", "Demo")

    # Assert
    assert result.exit_code == 0, result.output
    assert "Initialized project 'Demo'" in result.output
    assert _load_state(tmp_path)["project_name"] == "Demo"


@pytest.mark.unit
def test_init_here_uses_directory_name(tmp_path: Path) -> None:
    """`sdd init --here` names the project after the root directory."""
    root = tmp_path / "checkout-flow"
    root.mkdir()

    result = _invoke(root, "init", "--here")

    assert result.exit_code == 0, result.output
    assert _load_state(root)["project_name"] == "checkout-flow"


@pytest.mark.unit
def test_init_without_name_fails(tmp_path: Path) -> None:
    """Missing PROJECT_NAME without --here is a usage error."""
    result = _invoke(tmp_path, "init")

    assert result.exit_code == 1
    assert "PROJECT_NAME argument is required" in result.output
    assert not (tmp_path / ".sdd" / "state.yaml").exists()


@pytest.mark.unit
def test_init_twice_requires_force(tmp_path: Path) -> None:
    """Re-init should fail with a --force hint and succeed with --force."""
    _invoke(tmp_path, "init", "Demo")

    refused = _invoke(tmp_path, "init", "Other")
    forced = _invoke(tmp_path, "init", "Other", "--force")

    assert refused.exit_code == 1
    assert "Run 'sdd init <name> --force' to continue." in refused.output
    assert forced.exit_code == 0, forced.output
    assert _load_state(tmp_path)["project_name"] == "Other"


@pytest.mark.unit
def test_specify_joins_description_words(tmp_path: Path) -> None:
    """Unquoted description words are joined into the artifact request."""
    _invoke(tmp_path, "init", "Demo")

    result = _invoke(tmp_path, "specify", "Add", "password", "reset")

    assert result.exit_code == 0, result.output
    spec = (tmp_path / ".sdd" / "spec.md").read_text(encoding="utf-8")
    assert "Add password reset" in spec
    assert _load_state(tmp_path)["current_phase"] == "specify"


@pytest.mark.unit
def test_phase_before_init_points_to_init(tmp_path: Path) -> None:
    """Phase commands before init exit 1 with an init hint."""
    result = _invoke(tmp_path, "plan")

    assert result.exit_code == 1
    assert "Run 'sdd init <name>' to continue." in result.output


@pytest.mark.unit
def test_task_gate_then_approve(tmp_path: Path) -> None:
    """Task is refused until `sdd approve` signs off the plan."""
    # Arrange - specify and plan done
    _invoke(tmp_path, "init", "Demo")
    _invoke(tmp_path, "specify", "Add login")
    _invoke(tmp_path, "plan")

    # Act - gated task, approve, retry
    refused = _invoke(tmp_path, "task")
    approved = _invoke(tmp_path, "approve", "--by", "alice", "-c", "lgtm")
    accepted = _invoke(tmp_path, "task")

    # Assert
    assert refused.exit_code == 1
    assert "Run 'sdd approve' to continue." in refused.output
    assert approved.exit_code == 0, approved.output
    assert "Phase plan approved by alice" in approved.output
    assert accepted.exit_code == 0, accepted.output
    state = _load_state(tmp_path)
    assert state["current_phase"] == "task"
    assert state["phases"]["plan"]["approvals"][0]["approved_by"] == "alice"
    assert state["phases"]["plan"]["approvals"][0]["comments"] == "lgtm"


@pytest.mark.unit
def test_approve_uses_configured_approver(tmp_path: Path) -> None:
    """Without --by the approver comes from .sdd/config.yaml."""
    _invoke(tmp_path, "init", "Demo")
    (tmp_path / ".sdd" / "config.yaml").write_text(
        "approval:\n  default_approver: carol\n", encoding="utf-8"
    )

    result = _invoke(tmp_path, "approve")

    assert result.exit_code == 0, result.output
    assert "already approved" not in result.output
    assert _load_state(tmp_path)["phases"]["init"]["approvals"][0]["approved_by"] == "carol"


@pytest.mark.unit
def test_invalid_config_exits_with_hint(tmp_path: Path) -> None:
    """A broken config file is reported, not raised."""
    (tmp_path / ".sdd").mkdir()
    (tmp_path / ".sdd" / "config.yaml").write_text("workflow: [broken\n", encoding="utf-8")

    result = _invoke(tmp_path, "status")

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


@pytest.mark.unit
def test_status_reports_phases(tmp_path: Path) -> None:
    """`sdd status` prints the phase table and next step."""
    _invoke(tmp_path, "init", "Demo")

    result = _invoke(tmp_path, "status")

    assert result.exit_code == 0, result.output
    assert "Project: Demo" in result.output
    assert "Current Phase: init" in result.output
    assert "init: ✓ APPROVED" in result.output
    assert "sdd specify" in result.output


@pytest.mark.unit
def test_event_log_can_be_disabled(tmp_path: Path) -> None:
    """logging.event_log: false suppresses .sdd/log.jsonl."""
    (tmp_path / ".sdd").mkdir()
    (tmp_path / ".sdd" / "config.yaml").write_text(
        "logging:\n  event_log: false\n", encoding="utf-8"
    )

    result = _invoke(tmp_path, "init", "Demo")

    assert result.exit_code == 0, result.output
    assert not (tmp_path / ".sdd" / "log.jsonl").exists()


@pytest.mark.unit
def test_undecodable_state_reports_and_force_repairs(tmp_path: Path) -> None:
    """A garbage state file is reported with a --force hint that then works."""
    # Arrange - binary garbage in place of the state document
    (tmp_path / ".sdd").mkdir()
    (tmp_path / ".sdd" / "state.yaml").write_bytes(b"\xff\xfe\x00garbage")

    # Act
    reported = _invoke(tmp_path, "status")
    repaired = _invoke(tmp_path, "init", "Demo", "--force")

    # Assert
    assert reported.exit_code == 1
    assert "✗ Failed to get status" in reported.output
    assert "Run 'sdd init <name> --force' to continue." in reported.output
    assert repaired.exit_code == 0, repaired.output
    assert _load_state(tmp_path)["project_name"] == "Demo"
