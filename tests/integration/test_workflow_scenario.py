"""Integration tests: full feature workflow through engine and CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from sdd.cli import app
from sdd.gates.engine import WorkflowEngine
from sdd.gates.errors import ApprovalRequiredError
from sdd.gates.event_log import EventLog, WorkflowAction
from sdd.gates.phases import Phase, Status
from sdd.gates.store import StateStore
from tests.helpers import ticking_clock

_RUNNER = CliRunner()


@pytest.mark.integration
def test_engine_walkthrough_with_plan_gate(tmp_path: Path) -> None:
    """Specify and plan, hit the gate, approve, then finish the feature."""
    # Arrange
    engine = WorkflowEngine(
        StateStore(tmp_path, clock=ticking_clock()),
        event_log=EventLog.for_project(tmp_path),
    )
    engine.initialize("Demo")

    # Act - specify, plan
    engine.transition_phase(Phase.SPECIFY, "pm")
    engine.complete_phase(["spec.md"])
    engine.transition_phase(Phase.PLAN, "designer")
    engine.complete_phase(["plan.md"])

    # Assert - gate holds
    with pytest.raises(ApprovalRequiredError):
        engine.transition_phase(Phase.TASK, "taskmaster")

    # Act - approve and continue to the end
    engine.approve_phase("alice")
    assert engine.transition_phase(Phase.TASK, "taskmaster").current_phase.value == "task"
    engine.complete_phase(["tasks.md"])
    for phase, agent, artifact in [
        (Phase.EXECUTE, "developer", "implementation.md"),
        (Phase.REVIEW, "qa", "review.md"),
    ]:
        engine.transition_phase(phase, agent)
        engine.complete_phase([artifact])
    engine.transition_phase(Phase.COMPLETE, "qa")
    state = engine.complete_phase(["complete.md"])

    # Assert - every phase carries a consistent record
    assert state.current_phase is Phase.COMPLETE
    for phase, phase_state in state.phases.items():
        assert phase_state.phase is phase
        assert phase_state.status is Status.APPROVED
    assert [a.approved_by for a in state.phases[Phase.PLAN].approvals] == ["alice"]
    actions = [e.action for e in EventLog.for_project(tmp_path).read_events()]
    assert actions.count(WorkflowAction.APPROVED) == 1
    assert actions.count(WorkflowAction.TRANSITIONED) == 6


@pytest.mark.integration
def test_revision_loop_through_cli(tmp_path: Path) -> None:
    """Review can send work back to execute and the feature still completes."""

    def run(*args: str) -> str:
        result = _RUNNER.invoke(app, ["--root", str(tmp_path), *args])
        assert result.exit_code == 0, result.output
        return result.output

    run("init", "Demo")
    run("specify", "Add", "login")
    run("plan")
    run("approve", "--by", "alice")
    run("task")
    run("execute")
    run("review")
    run("execute")
    run("review")
    output = run("complete")

    assert "Feature complete" in output
    state = yaml.safe_load((tmp_path / ".sdd" / "state.yaml").read_text(encoding="utf-8"))
    assert state["current_phase"] == "complete"
    assert state["phases"]["execute"]["output_files"] == [
        "implementation.md",
        "implementation.md",
    ]
    for artifact in ["spec.md", "plan.md", "tasks.md", "implementation.md", "review.md"]:
        assert (tmp_path / ".sdd" / artifact).is_file()
    log_md = (tmp_path / ".sdd" / "log.md").read_text(encoding="utf-8")
    assert "approved: plan (alice)" in log_md
