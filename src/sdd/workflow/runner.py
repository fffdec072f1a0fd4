"""Phase runner: the call sequence CLI handlers and interactive UIs follow.

A phase run is: load state, enter the phase, generate the artifact through
the external generator, write it to the phase output path, then record the
written file with ``complete_phase``. Approval is a separate call made on the
source phase before the next gated transition. Presentation state is always
derived from a fresh ``load``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from sdd.gates.engine import WorkflowEngine
from sdd.gates.models import ProjectState
from sdd.gates.phases import PHASE_ORDER, Phase, Status, next_phase, requires_approval
from sdd.workflow.generator import ArtifactGenerator, ArtifactRequest

_LOGGER = logging.getLogger(__name__)

PHASE_AGENTS: dict[Phase, str] = {
    Phase.SPECIFY: "pm",
    Phase.PLAN: "designer",
    Phase.TASK: "taskmaster",
    Phase.EXECUTE: "developer",
    Phase.REVIEW: "qa",
    Phase.COMPLETE: "qa",
}


class ViewState(StrEnum):
    """Presentation-level status derived from persisted state."""

    IDLE = "idle"
    BUSY = "busy"
    AWAITING_APPROVAL = "awaiting_approval"
    BLOCKED = "blocked"
    COMPLETE = "complete"


def derive_view_state(state: ProjectState) -> ViewState:
    """Derive presentation status from a freshly loaded state.

    Args:
        state: State returned by ``load`` after the latest mutation.

    Returns:
        View status for dashboards and prompts.
    """
    current = state.current
    if current.status.is_blocked:
        return ViewState.BLOCKED
    if current.status is Status.IN_PROGRESS:
        return ViewState.BUSY
    if state.current_phase is Phase.COMPLETE and current.status.is_complete:
        return ViewState.COMPLETE
    upcoming = next_phase(state.current_phase)
    if (
        current.status.is_complete
        and requires_approval(state.current_phase, upcoming)
        and not current.is_human_approved
    ):
        return ViewState.AWAITING_APPROVAL
    return ViewState.IDLE


@dataclass
class PhaseRunResult:
    """Outcome of one phase run.

    Attributes:
        state: Persisted state after completion.
        artifact_path: Path the artifact was written to.
        transitioned: Whether the run entered the phase (False on regeneration).
    """

    state: ProjectState
    artifact_path: Path
    transitioned: bool


class PhaseRunner:
    """Drives one phase through transition, generation and completion."""

    def __init__(self, engine: WorkflowEngine, generator: ArtifactGenerator) -> None:
        """Create runner.

        Args:
            engine: Workflow engine of the project.
            generator: External artifact generator.
        """
        self.engine = engine
        self.generator = generator

    def run_phase(
        self,
        phase: Phase,
        user_input: str = "",
        *,
        agent: str | None = None,
    ) -> PhaseRunResult:
        """Enter ``phase``, generate its artifact and record it.

        When the project already sits in ``phase`` the transition is skipped
        and the artifact regenerated; output files accumulate.

        Args:
            phase: Phase to run.
            user_input: Free-text input for the generator (e.g. feature description).
            agent: Agent name override; defaults to the phase's agent.

        Returns:
            PhaseRunResult with the persisted state and artifact path.

        Raises:
            WorkflowError: Any engine error, raised before the artifact is generated.
        """
        phase = Phase(phase)
        agent_name = agent or PHASE_AGENTS.get(phase, phase.value)

        state = self.engine.load()
        transitioned = state.current_phase is not phase
        if transitioned:
            state = self.engine.transition_phase(phase, agent_name)
        else:
            _LOGGER.info("Regenerating %s artifact without transition", phase.value)

        request = ArtifactRequest(
            project_name=state.project_name,
            phase=phase,
            agent=agent_name,
            user_input=user_input,
            context=self._previous_artifact(state, phase),
        )
        content = self.generator.generate(request)

        artifact_path = self.engine.get_phase_output_path(phase)
        artifact_path.parent.mkdir(parents=True, exist_ok=True)
        artifact_path.write_text(content, encoding="utf-8")

        state = self.engine.complete_phase([artifact_path.name])
        return PhaseRunResult(
            state=state,
            artifact_path=artifact_path,
            transitioned=transitioned,
        )

    def approve(
        self,
        approved_by: str,
        comments: str | None = None,
        *,
        skip_if_approved: bool = False,
    ) -> tuple[ProjectState, bool]:
        """Approve the current phase.

        Returns:
            The persisted state and whether an approval was appended.
        """
        if skip_if_approved:
            return self.engine.approve_phase_if_needed(approved_by, comments)
        return self.engine.approve_phase(approved_by, comments), True

    def view_state(self) -> ViewState:
        """Return presentation status from a fresh load."""
        return derive_view_state(self.engine.load())

    def _previous_artifact(self, state: ProjectState, phase: Phase) -> str:
        """Return the most relevant earlier artifact text, if one was written."""
        position = PHASE_ORDER.index(phase)
        for earlier, phase_state in reversed(state.phases.items()[:position]):
            if not phase_state.output_files:
                continue
            path = self.engine.get_phase_output_path(earlier)
            if path.is_file():
                return path.read_text(encoding="utf-8")
        return ""
