"""Status command implementation for displaying workflow state."""

from sdd.commands.base import Command, CommandResult, CommandResultImpl
from sdd.commands.phase import NEXT_STEPS
from sdd.gates.errors import WorkflowError
from sdd.gates.models import PhaseState, ProjectState
from sdd.gates.phases import Status
from sdd.gates.store import StateStore
from sdd.workflow.runner import derive_view_state

STATUS_LABELS = {
    Status.APPROVED: "✓ APPROVED",
    Status.IN_PROGRESS: "⟳ IN PROGRESS",
    Status.REJECTED: "✗ REJECTED",
    Status.BLOCKED: "🚫 BLOCKED",
    Status.PENDING: "○ PENDING",
}


def format_phase_line(phase_state: PhaseState) -> str:
    """Format one phase row, e.g. ``plan: ✓ APPROVED (01-02 15:04) [designer]``."""
    parts = [f"{phase_state.phase.value}: {STATUS_LABELS[phase_state.status]}"]
    if phase_state.status is Status.APPROVED and phase_state.completed_at:
        parts.append(f"({phase_state.completed_at.strftime('%m-%d %H:%M')})")
    elif phase_state.status is Status.IN_PROGRESS and phase_state.started_at:
        parts.append(f"(started {phase_state.started_at.strftime('%m-%d %H:%M')})")
    if phase_state.agent_used:
        parts.append(f"[{phase_state.agent_used}]")
    if phase_state.last_approval is not None:
        parts.append(f"(approved by {phase_state.last_approval.approved_by})")
    return " ".join(parts)


class StatusCommand(Command):
    """Command to display the current phase, per-phase status and next step."""

    def __init__(self, store: StateStore):
        """Initialize StatusCommand with dependencies.

        Args:
            store: State store of the project
        """
        self.store = store

    def validate(self) -> bool:
        """Validate the project is initialized.

        Raises:
            NotInitializedError: If the project has no state document
        """
        self.store.load()
        return True

    def load(self) -> ProjectState:
        """Load a fresh state snapshot for rendering."""
        return self.store.load()

    def execute(self) -> CommandResult:
        """Execute status command.

        Returns:
            CommandResult with the formatted status report
        """
        try:
            state = self.load()
        except WorkflowError as e:
            return CommandResultImpl.from_error("get status", e)

        last_updated_str = state.updated_at.strftime("%Y-%m-%d %H:%M:%S")

        lines = []
        lines.append(f"Project: {state.project_name}")
        lines.append(f"Current Phase: {state.current_phase.value}")
        lines.append(f"State: {derive_view_state(state).value}")
        lines.append(f"Last Updated: {last_updated_str}")
        lines.append("")
        lines.append("Phase Status:")
        for _, phase_state in state.phases.items():
            lines.append(f"  {format_phase_line(phase_state)}")
            for file_name in phase_state.output_files:
                lines.append(f"    📄 {file_name}")
        lines.append("")
        lines.append("Next Steps:")
        lines.append(f"  {NEXT_STEPS[state.current_phase]}")

        return CommandResultImpl(success=True, message="\n".join(lines))
