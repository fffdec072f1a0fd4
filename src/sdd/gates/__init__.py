"""Phase gates: transition table, project state, store and workflow engine."""

from sdd.gates.engine import ReentryPolicy, WorkflowEngine
from sdd.gates.errors import (
    AlreadyInitializedError,
    ApprovalRequiredError,
    CorruptStateError,
    IllegalTransitionError,
    InvalidProjectNameError,
    NotInitializedError,
    StaleStateError,
    StateLockedError,
    WorkflowError,
    WorkflowErrorCode,
)
from sdd.gates.event_log import EventLog, WorkflowAction, WorkflowEvent
from sdd.gates.models import (
    Approval,
    PhaseState,
    PhaseStates,
    ProjectState,
    create_initial_project_state,
)
from sdd.gates.phases import (
    PHASE_ORDER,
    VALID_TRANSITIONS,
    Phase,
    PhaseTransition,
    Status,
    allowed_targets,
    can_transition,
    next_phase,
    requires_approval,
)
from sdd.gates.store import StateStore

__all__ = [
    "PHASE_ORDER",
    "VALID_TRANSITIONS",
    "AlreadyInitializedError",
    "Approval",
    "ApprovalRequiredError",
    "CorruptStateError",
    "EventLog",
    "IllegalTransitionError",
    "InvalidProjectNameError",
    "NotInitializedError",
    "Phase",
    "PhaseState",
    "PhaseStates",
    "PhaseTransition",
    "ProjectState",
    "ReentryPolicy",
    "StaleStateError",
    "StateLockedError",
    "StateStore",
    "Status",
    "WorkflowAction",
    "WorkflowEngine",
    "WorkflowError",
    "WorkflowErrorCode",
    "WorkflowEvent",
    "allowed_targets",
    "can_transition",
    "create_initial_project_state",
    "next_phase",
    "requires_approval",
]
