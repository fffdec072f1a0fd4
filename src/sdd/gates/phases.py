"""Phase taxonomy and the fixed transition table."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Phase(StrEnum):
    """Feature lifecycle phase, declared in workflow order."""

    INIT = "init"
    SPECIFY = "specify"
    PLAN = "plan"
    TASK = "task"
    EXECUTE = "execute"
    REVIEW = "review"
    COMPLETE = "complete"


PHASE_ORDER: tuple[Phase, ...] = tuple(Phase)


class Status(StrEnum):
    """Approval state of a single phase."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    APPROVED = "approved"
    REJECTED = "rejected"
    BLOCKED = "blocked"

    @property
    def is_complete(self) -> bool:
        """Return whether the phase has been signed off."""
        return self is Status.APPROVED

    @property
    def is_blocked(self) -> bool:
        """Return whether the phase cannot proceed."""
        return self in (Status.REJECTED, Status.BLOCKED)


class PhaseTransition(BaseModel):
    """One legal edge of the phase graph."""

    model_config = ConfigDict(frozen=True)

    source: Phase
    target: Phase
    requires_approval: bool = False


VALID_TRANSITIONS: tuple[PhaseTransition, ...] = (
    PhaseTransition(source=Phase.INIT, target=Phase.SPECIFY),
    PhaseTransition(source=Phase.SPECIFY, target=Phase.PLAN),
    # The plan is the contract for task breakdown; it needs a human sign-off.
    PhaseTransition(source=Phase.PLAN, target=Phase.TASK, requires_approval=True),
    PhaseTransition(source=Phase.TASK, target=Phase.EXECUTE),
    PhaseTransition(source=Phase.EXECUTE, target=Phase.REVIEW),
    PhaseTransition(source=Phase.REVIEW, target=Phase.COMPLETE),
    # Revisions
    PhaseTransition(source=Phase.PLAN, target=Phase.SPECIFY),
    PhaseTransition(source=Phase.TASK, target=Phase.PLAN),
    PhaseTransition(source=Phase.EXECUTE, target=Phase.TASK),
    PhaseTransition(source=Phase.REVIEW, target=Phase.EXECUTE),
)

_EDGES: dict[tuple[Phase, Phase], PhaseTransition] = {
    (edge.source, edge.target): edge for edge in VALID_TRANSITIONS
}


def can_transition(source: Phase, target: Phase) -> bool:
    """Return whether ``source -> target`` is a member of the edge table.

    Args:
        source: Phase being left.
        target: Phase being entered.

    Returns:
        True only for listed edges; self-loops are never implied.
    """
    return (Phase(source), Phase(target)) in _EDGES


def requires_approval(source: Phase, target: Phase) -> bool:
    """Return the approval flag for an edge, False when the edge is absent."""
    edge = _EDGES.get((Phase(source), Phase(target)))
    return edge.requires_approval if edge is not None else False


def allowed_targets(source: Phase) -> list[Phase]:
    """Return phases reachable from ``source``, forward edge first."""
    source = Phase(source)
    return [edge.target for edge in VALID_TRANSITIONS if edge.source is source]


def next_phase(phase: Phase) -> Phase:
    """Return the canonical forward successor; ``complete`` is terminal."""
    index = PHASE_ORDER.index(Phase(phase))
    if index + 1 >= len(PHASE_ORDER):
        return PHASE_ORDER[index]
    return PHASE_ORDER[index + 1]
