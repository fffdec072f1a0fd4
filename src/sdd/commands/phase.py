"""Phase command: run one workflow phase and record its artifact."""

from sdd.commands.base import Command, CommandResult, CommandResultImpl
from sdd.gates.errors import WorkflowError
from sdd.gates.phases import Phase
from sdd.workflow.runner import PhaseRunner

ARTIFACT_LABELS = {
    Phase.SPECIFY: "Specification",
    Phase.PLAN: "Architecture plan",
    Phase.TASK: "Task breakdown",
    Phase.EXECUTE: "Implementation notes",
    Phase.REVIEW: "Review report",
    Phase.COMPLETE: "Completion summary",
}

NEXT_STEPS = {
    Phase.INIT: "Run: sdd specify \"your feature description\"",
    Phase.SPECIFY: "Run: sdd plan",
    Phase.PLAN: "Run: sdd approve  # then sdd task",
    Phase.TASK: "Run: sdd execute",
    Phase.EXECUTE: "Run: sdd review",
    Phase.REVIEW: "Run: sdd complete",
    Phase.COMPLETE: "🎉 Feature complete! Start a new project with sdd init --force",
}


class PhaseCommand(Command):
    """Command that enters a phase and produces its artifact."""

    def __init__(self, runner: PhaseRunner, phase: Phase):
        """Initialize PhaseCommand with dependencies.

        Args:
            runner: Phase runner bound to the project
            phase: Phase this command runs
        """
        self.runner = runner
        self.phase = Phase(phase)

    def validate(self) -> bool:
        """Validate the project is initialized and readable.

        Returns:
            True if validation passes

        Raises:
            NotInitializedError: If the project has no state document
            CorruptStateError: If the state document is unreadable
        """
        self.runner.engine.load()
        return True

    def execute(self, user_input: str = "") -> CommandResult:
        """Run the phase.

        Args:
            user_input: Free-text input passed to the artifact generator

        Returns:
            CommandResult naming the written artifact and the next step
        """
        try:
            self.validate()
            result = self.runner.run_phase(self.phase, user_input)
        except WorkflowError as e:
            return CommandResultImpl.from_error(f"run {self.phase.value}", e)

        label = ARTIFACT_LABELS.get(self.phase, self.phase.value)
        lines = [f"✅ {label} created: {result.artifact_path}"]
        if not result.transitioned:
            lines.append(f"  (regenerated; {self.phase.value} was already active)")
        lines.append(f"Next: {NEXT_STEPS[self.phase]}")
        return CommandResultImpl(
            success=True,
            message="\n".join(lines),
            files_created=[str(result.artifact_path)],
        )
