"""Approve command implementation."""

from typing import Optional

from sdd.commands.base import Command, CommandResult, CommandResultImpl
from sdd.gates.errors import WorkflowError
from sdd.gates.phases import next_phase
from sdd.workflow.runner import PhaseRunner


class ApproveCommand(Command):
    """Command to record a human approval of the current phase."""

    def __init__(self, runner: PhaseRunner):
        """Initialize ApproveCommand with dependencies.

        Args:
            runner: Phase runner bound to the project
        """
        self.runner = runner

    def validate(self) -> bool:
        """Validate the project is initialized and readable.

        Raises:
            NotInitializedError: If the project has no state document
            CorruptStateError: If the state document is unreadable
        """
        self.runner.engine.load()
        return True

    def execute(self, approved_by: str, comments: Optional[str] = None) -> CommandResult:
        """Approve the current phase unless a human approval already covers it.

        Args:
            approved_by: Name recorded on the approval
            comments: Optional approval comments

        Returns:
            CommandResult describing the approval and the next step
        """
        try:
            state, appended = self.runner.approve(
                approved_by, comments, skip_if_approved=True
            )
        except WorkflowError as e:
            return CommandResultImpl.from_error("approve phase", e)

        phase = state.current_phase
        if not appended:
            return CommandResultImpl(
                success=True,
                message=f"Phase {phase.value} is already approved.",
            )
        lines = [f"✅ Phase {phase.value} approved by {approved_by}"]
        if comments:
            lines.append(f"Comments: {comments}")
        upcoming = next_phase(phase)
        if upcoming is not phase:
            lines.append("")
            lines.append(f"Next: Run 'sdd {upcoming.value}' to proceed")
        return CommandResultImpl(success=True, message="\n".join(lines))
