"""Base command interface following the Command Pattern."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from sdd.gates.errors import WorkflowError


class CommandResult(Protocol):
    """Protocol defining the structure of command results."""

    success: bool
    message: str
    remedy: Optional[str]


@dataclass
class CommandResultImpl:
    """Concrete implementation of CommandResult protocol.

    Attributes:
        success: Whether the command executed successfully
        message: Human-readable summary message
        files_created: List of file paths that were written
        remedy: Command that resolves a failure, if any
    """

    success: bool
    message: str
    files_created: List[str] = field(default_factory=list)
    remedy: Optional[str] = None

    @classmethod
    def from_error(cls, action: str, error: WorkflowError) -> "CommandResultImpl":
        """Build a failed result from a workflow error.

        Args:
            action: Short description of what failed (e.g. "approve phase")
            error: Workflow error raised by the engine or store

        Returns:
            Failed CommandResultImpl carrying the error's remedy
        """
        return cls(
            success=False,
            message=f"✗ Failed to {action}: {error}",
            remedy=error.remedy,
        )


class Command(ABC):
    """Abstract base class for all sdd commands.

    All commands must implement execute() and validate() methods.
    """

    @abstractmethod
    def execute(self, *args, **kwargs) -> CommandResult:
        """Execute the command and return result.

        Returns:
            CommandResult instance with success status and message
        """

    @abstractmethod
    def validate(self, *args, **kwargs) -> bool:
        """Validate prerequisites before execution.

        Returns:
            True if validation passes

        Raises:
            WorkflowError: If validation fails with specific error details
        """
