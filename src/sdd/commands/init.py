"""Init command implementation for seeding a project's workflow state."""

from pathlib import Path

from sdd.commands.base import Command, CommandResult, CommandResultImpl
from sdd.gates.engine import WorkflowEngine
from sdd.gates.errors import WorkflowError
from sdd.gates.store import validate_project_name


class InitCommand(Command):
    """Command to initialize a new sdd project."""

    def __init__(self, engine: WorkflowEngine):
        """Initialize InitCommand with dependencies.

        Args:
            engine: Workflow engine bound to the project root
        """
        self.engine = engine

    def validate(self, project_name: str) -> bool:
        """Validate the project name before anything touches disk.

        Args:
            project_name: Name of the project

        Returns:
            True if validation passes

        Raises:
            InvalidProjectNameError: If the name is empty or has invalid characters
        """
        validate_project_name(project_name)
        return True

    def execute(self, project_name: str, force: bool = False) -> CommandResult:
        """Execute init command.

        Args:
            project_name: Name of the project
            force: Overwrite an existing state document

        Returns:
            CommandResult with success status and the created state file
        """
        try:
            self.validate(project_name)
            state = self.engine.initialize(project_name, force=force)
        except WorkflowError as e:
            return CommandResultImpl.from_error("initialize project", e)

        root = self.engine.store.project_root
        state_file = str(self.engine.store.state_path.relative_to(root))
        lines = [
            f"✅ Initialized project '{state.project_name}' ({state.project_id})",
            f"  - {state_file}",
            "",
            "Next: Run 'sdd specify \"your feature description\"'",
        ]
        return CommandResultImpl(
            success=True,
            message="\n".join(lines),
            files_created=[state_file],
        )

    @staticmethod
    def default_project_name(root_path: Path) -> str:
        """Return the project name used by ``--here`` (directory name)."""
        return root_path.resolve().name
