"""Deterministic workflow error contracts."""

from __future__ import annotations

from enum import StrEnum


class WorkflowErrorCode(StrEnum):
    """Stable workflow engine/store error codes."""

    NOT_INITIALIZED = "not_initialized"
    ALREADY_INITIALIZED = "already_initialized"
    CORRUPT_STATE = "corrupt_state"
    ILLEGAL_TRANSITION = "illegal_transition"
    APPROVAL_REQUIRED = "approval_required"
    STALE_STATE = "stale_state"
    STATE_LOCKED = "state_locked"
    INVALID_PROJECT_NAME = "invalid_project_name"


class WorkflowError(RuntimeError):
    """Workflow failure with stable deterministic code."""

    def __init__(
        self,
        code: WorkflowErrorCode,
        message: str,
        *,
        remedy: str | None = None,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create workflow failure.

        Args:
            code: Stable workflow error code.
            message: Human-readable error message.
            remedy: Optional command hint that resolves the failure.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.code = code
        self.remedy = remedy
        self.data = data or {}


class NotInitializedError(WorkflowError):
    """Raised when no state document exists under the project root."""

    def __init__(self, message: str = "Project not initialized.") -> None:
        super().__init__(
            WorkflowErrorCode.NOT_INITIALIZED,
            message,
            remedy="sdd init <name>",
        )


class AlreadyInitializedError(WorkflowError):
    """Raised when initialize would overwrite an existing state document."""

    def __init__(self, message: str) -> None:
        super().__init__(
            WorkflowErrorCode.ALREADY_INITIALIZED,
            message,
            remedy="sdd init <name> --force",
        )


class CorruptStateError(WorkflowError):
    """Raised when the state document cannot be decoded/validated."""

    def __init__(self, message: str) -> None:
        super().__init__(
            WorkflowErrorCode.CORRUPT_STATE,
            message,
            remedy="sdd init <name> --force",
        )


class IllegalTransitionError(WorkflowError):
    """Raised when the requested phase pair is not in the edge table."""

    def __init__(self, current: str, target: str, allowed: list[str]) -> None:
        """Create illegal transition failure.

        Args:
            current: Phase the project is in.
            target: Phase that was requested.
            allowed: Phases legally reachable from ``current``.
        """
        hint = f"sdd {allowed[0]}" if allowed else None
        super().__init__(
            WorkflowErrorCode.ILLEGAL_TRANSITION,
            f"Invalid transition from {current} to {target}",
            remedy=hint,
            data={"current": current, "target": target, "allowed": allowed},
        )
        self.current = current
        self.target = target


class ApprovalRequiredError(WorkflowError):
    """Raised when a gated edge is attempted before its source is approved."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            WorkflowErrorCode.APPROVAL_REQUIRED,
            f"Cannot transition to {target}: {current} phase requires approval",
            remedy="sdd approve",
            data={"current": current, "target": target},
        )
        self.current = current
        self.target = target


class StaleStateError(WorkflowError):
    """Raised when the on-disk revision moved past the caller's snapshot."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            WorkflowErrorCode.STALE_STATE,
            f"State changed on disk (expected revision {expected}, found {actual})",
            remedy="sdd status",
            data={"expected": expected, "actual": actual},
        )


class StateLockedError(WorkflowError):
    """Raised when the state lock cannot be acquired in time."""

    def __init__(self, lock_path: str, timeout: float) -> None:
        super().__init__(
            WorkflowErrorCode.STATE_LOCKED,
            f"Timed out after {timeout}s waiting for state lock {lock_path}",
            data={"lock_path": lock_path, "timeout": timeout},
        )


class InvalidProjectNameError(WorkflowError):
    """Raised when a project name is empty or filesystem-hostile."""

    def __init__(self, message: str) -> None:
        super().__init__(WorkflowErrorCode.INVALID_PROJECT_NAME, message)
