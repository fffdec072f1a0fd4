"""Phase-gated workflow engine.

This module enforces the phase transition table and approval preconditions
on top of the StateStore. Every public operation is a single
load -> validate -> mutate -> persist unit executed under the store lock, so
a failing call never leaves a partially written document and two callers
never interleave writes.

``approve_phase`` and ``complete_phase`` both leave the current phase
Approved, but they are different records: only ``approve_phase`` appends to
the approvals audit trail, and only ``complete_phase`` records artifact
files. Approval-gated edges require a human approval at least as recent as
the source phase's last completion, so a system completion alone never
opens a gate.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path

from sdd.gates.errors import ApprovalRequiredError, IllegalTransitionError
from sdd.gates.event_log import EventLog, WorkflowAction, WorkflowEvent
from sdd.gates.models import Approval, ProjectState
from sdd.gates.paths import get_phase_output_path
from sdd.gates.phases import (
    Phase,
    Status,
    allowed_targets,
    can_transition,
    requires_approval,
)
from sdd.gates.store import StateStore

_LOGGER = logging.getLogger(__name__)


class ReentryPolicy(StrEnum):
    """What happens to a phase's record when it is entered again."""

    ACCUMULATE = "accumulate"
    RESET = "reset"


class WorkflowEngine:
    """Runs phase transitions, approvals and completions against a store.

    Under ``ReentryPolicy.ACCUMULATE`` a revisited phase keeps its earlier
    output files and completion stamp. Under ``ReentryPolicy.RESET`` both are
    cleared on entry. Approvals are an audit trail and are never removed.
    """

    def __init__(
        self,
        store: StateStore,
        *,
        event_log: EventLog | None = None,
        reentry_policy: ReentryPolicy = ReentryPolicy.ACCUMULATE,
    ) -> None:
        """Create an engine bound to one project store.

        Args:
            store: State store of the project.
            event_log: Optional workflow event log receiving every mutation.
            reentry_policy: Handling of output files when a phase is re-entered.
        """
        self.store = store
        self.event_log = event_log
        self.reentry_policy = ReentryPolicy(reentry_policy)

    def load(self) -> ProjectState:
        """Load a fresh snapshot of the project state."""
        return self.store.load()

    def initialize(self, project_name: str, *, force: bool = False) -> ProjectState:
        """Seed the project state document.

        Args:
            project_name: Human-readable project name.
            force: Overwrite an existing document.

        Returns:
            The persisted initial state.
        """
        state = self.store.initialize(project_name, force=force)
        self._record(
            WorkflowAction.INITIALIZED,
            state,
            Phase.INIT,
            metadata={"project_name": state.project_name, "project_id": state.project_id},
        )
        return state

    def transition_phase(self, target: Phase, agent_used: str | None = None) -> ProjectState:
        """Enter ``target`` from the current phase.

        Args:
            target: Phase to enter.
            agent_used: Name of the agent that will produce the phase artifact.

        Returns:
            The persisted state with ``current_phase == target``.

        Raises:
            IllegalTransitionError: If the edge is not in the transition table.
            ApprovalRequiredError: If the edge is gated and the source phase
                is not approved.
        """
        target = Phase(target)
        with self.store.locked():
            state = self.store.load()
            source = state.current_phase

            if not can_transition(source, target):
                raise IllegalTransitionError(
                    source.value,
                    target.value,
                    [phase.value for phase in allowed_targets(source)],
                )
            if requires_approval(source, target) and not state.phases[source].is_human_approved:
                raise ApprovalRequiredError(source.value, target.value)

            now = self.store.clock()
            target_state = state.phases[target]
            if self.reentry_policy is ReentryPolicy.RESET and target_state.started_at is not None:
                target_state.output_files = []
                target_state.completed_at = None
            target_state.status = Status.IN_PROGRESS
            target_state.started_at = now
            target_state.agent_used = agent_used
            if target != source:
                state.current_phase = target
            state.touch(now)
            self.store.save(state)

            _LOGGER.info("Transitioned %s -> %s (agent=%s)", source.value, target.value, agent_used)
            self._record(
                WorkflowAction.TRANSITIONED,
                state,
                target,
                actor=agent_used,
                metadata={"from": source.value},
            )
        return state

    def approve_phase(self, approved_by: str, comments: str | None = None) -> ProjectState:
        """Record a human approval of the current phase.

        No precondition on the prior status: approving an already approved
        phase appends another audit entry and re-stamps ``completed_at``.

        Args:
            approved_by: Name of the approver.
            comments: Optional approval comments.

        Returns:
            The persisted state.
        """
        with self.store.locked():
            state = self.store.load()
            self._approve(state, approved_by, comments)
        return state

    def approve_phase_if_needed(
        self, approved_by: str, comments: str | None = None
    ) -> tuple[ProjectState, bool]:
        """Approve the current phase unless a human approval already covers it.

        The check and the append run in one locked unit, so two concurrent
        callers never both append.

        Returns:
            The persisted state and whether an approval was appended.
        """
        with self.store.locked():
            state = self.store.load()
            if state.current.is_human_approved:
                _LOGGER.info("%s already approved; skipping", state.current_phase.value)
                return state, False
            self._approve(state, approved_by, comments)
        return state, True

    def _approve(self, state: ProjectState, approved_by: str, comments: str | None) -> None:
        now = self.store.clock()
        phase_state = state.current
        approval = Approval(
            approved_by=approved_by,
            approved_at=now,
            comments=comments or None,
        )
        phase_state.approvals.append(approval)
        phase_state.status = Status.APPROVED
        phase_state.completed_at = now
        state.touch(now)
        self.store.save(state)

        _LOGGER.info("Approved %s by %s", state.current_phase.value, approved_by)
        self._record(
            WorkflowAction.APPROVED,
            state,
            state.current_phase,
            actor=approved_by,
            metadata={"comments": comments} if comments else None,
        )

    def complete_phase(self, output_files: Sequence[str]) -> ProjectState:
        """Mark the current phase system-completed and record its artifacts.

        Does not append to the approvals audit trail.

        Args:
            output_files: Artifact file names appended to the existing list.

        Returns:
            The persisted state.
        """
        files = list(output_files)
        with self.store.locked():
            state = self.store.load()
            now = self.store.clock()
            phase_state = state.current
            phase_state.status = Status.APPROVED
            phase_state.completed_at = now
            phase_state.output_files = [*phase_state.output_files, *files]
            state.touch(now)
            self.store.save(state)

            _LOGGER.info("Completed %s with %d file(s)", state.current_phase.value, len(files))
            self._record(WorkflowAction.COMPLETED, state, state.current_phase, files=files)
        return state

    def get_phase_output_path(self, phase: Phase) -> Path:
        """Return where the artifact of ``phase`` is read and written."""
        return get_phase_output_path(self.store.project_root, phase)

    def _record(
        self,
        action: WorkflowAction,
        state: ProjectState,
        phase: Phase,
        *,
        actor: str | None = None,
        files: list[str] | None = None,
        metadata: dict[str, str] | None = None,
    ) -> None:
        if self.event_log is None:
            return
        self.event_log.record(
            WorkflowEvent(
                timestamp=state.updated_at,
                action=action,
                phase=phase.value,
                actor=actor,
                files=files or [],
                metadata=metadata,
            )
        )
