"""Project, phase and approval state models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from sdd.gates.phases import PHASE_ORDER, Phase, Status


class Approval(BaseModel):
    """Immutable audit record of a human sign-off on a phase."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    approved_by: str = Field(min_length=1)
    approved_at: AwareDatetime
    comments: str | None = None


class PhaseState(BaseModel):
    """State of one phase within a project."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    phase: Phase
    status: Status = Status.PENDING
    started_at: AwareDatetime | None = None
    completed_at: AwareDatetime | None = None
    approvals: list[Approval] = Field(default_factory=list)
    agent_used: str | None = None
    output_files: list[str] = Field(default_factory=list)

    @property
    def last_approval(self) -> Approval | None:
        """Return the most recent approval, if any."""
        return self.approvals[-1] if self.approvals else None

    @property
    def is_human_approved(self) -> bool:
        """Return whether a human approval covers the latest completion.

        A system completion after the last approval re-opens the gate.
        """
        last = self.last_approval
        if not self.status.is_complete or last is None:
            return False
        return self.completed_at is None or last.approved_at >= self.completed_at


class PhaseStates(BaseModel):
    """Fixed record holding exactly one PhaseState per Phase.

    Serialized as a mapping keyed by phase value. Missing or extra keys fail
    validation, so an incomplete project cannot be constructed or loaded.
    """

    model_config = ConfigDict(extra="forbid")

    init: PhaseState
    specify: PhaseState
    plan: PhaseState
    task: PhaseState
    execute: PhaseState
    review: PhaseState
    complete: PhaseState

    @model_validator(mode="after")
    def _keys_match_phases(self) -> PhaseStates:
        for phase in PHASE_ORDER:
            entry: PhaseState = getattr(self, phase.value)
            if entry.phase is not phase:
                raise ValueError(
                    f"phases.{phase.value} holds state for {entry.phase.value!r}"
                )
        return self

    def __getitem__(self, phase: Phase) -> PhaseState:
        return getattr(self, Phase(phase).value)

    def items(self) -> list[tuple[Phase, PhaseState]]:
        """Return (phase, state) pairs in workflow order."""
        return [(phase, self[phase]) for phase in PHASE_ORDER]


class ProjectState(BaseModel):
    """Project state stored in .sdd/state.yaml."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    project_id: str = Field(min_length=1)
    project_name: str = Field(min_length=1)
    created_at: AwareDatetime
    updated_at: AwareDatetime
    current_phase: Phase = Phase.INIT
    phases: PhaseStates
    metadata: dict[str, Any] = Field(default_factory=dict)
    revision: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _updated_not_before_created(self) -> ProjectState:
        if self.updated_at < self.created_at:
            raise ValueError("updated_at is earlier than created_at")
        return self

    @property
    def current(self) -> PhaseState:
        """Return the PhaseState of ``current_phase``."""
        return self.phases[self.current_phase]

    def touch(self, now: datetime) -> None:
        """Stamp ``updated_at``, never moving it before ``created_at``."""
        self.updated_at = max(now, self.created_at)

    def to_file_dict(self) -> dict[str, Any]:
        """Serialize for the state document."""
        return self.model_dump(mode="json")

    @classmethod
    def from_file_dict(cls, d: dict[str, Any]) -> ProjectState:
        """Deserialize from the state document."""
        return cls.model_validate(d)


def generate_project_id(now: datetime) -> str:
    """Return a project id of the form ``sdd_<unix seconds>``."""
    return f"sdd_{int(now.timestamp())}"


def create_initial_project_state(
    project_name: str,
    now: datetime,
    *,
    project_id: str | None = None,
) -> ProjectState:
    """Create a seeded ProjectState. Init starts approved, all others pending."""
    phases = {phase.value: PhaseState(phase=phase) for phase in PHASE_ORDER}
    phases[Phase.INIT.value] = PhaseState(
        phase=Phase.INIT,
        status=Status.APPROVED,
        completed_at=now,
    )
    return ProjectState(
        project_id=project_id or generate_project_id(now),
        project_name=project_name,
        created_at=now,
        updated_at=now,
        current_phase=Phase.INIT,
        phases=PhaseStates(**phases),
    )
