"""CLI entry point for sdd using Typer."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from sdd.commands import (
    ApproveCommand,
    CommandResult,
    InitCommand,
    PhaseCommand,
    StatusCommand,
)
from sdd.config import ConfigError, SddConfig, load_config
from sdd.gates.engine import WorkflowEngine
from sdd.gates.event_log import EventLog
from sdd.gates.paths import get_config_path
from sdd.gates.phases import Phase
from sdd.gates.store import StateStore
from sdd.workflow.generator import PlaceholderGenerator
from sdd.workflow.runner import PhaseRunner

app = typer.Typer(
    name="sdd",
    help="sdd: phase-gated feature workflow with explicit approvals",
    add_completion=False,
)
_LOGGING_CONFIGURED = False


@dataclass
class CliContext:
    """Per-invocation wiring shared by all commands."""

    root: Path
    config: SddConfig
    store: StateStore
    engine: WorkflowEngine
    runner: PhaseRunner


def _configure_logging(level: str) -> None:
    """Configure Rich-backed logging once for CLI commands."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        logging.getLogger().setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )
    _LOGGING_CONFIGURED = True


def _build_context(root: Path, verbose: bool) -> CliContext:
    """Load config and wire store, engine and runner for ``root``."""
    config = load_config(get_config_path(root))
    _configure_logging("DEBUG" if verbose else config.logging.level)
    store = StateStore(root, lock_timeout=config.workflow.lock_timeout_seconds)
    event_log = EventLog.for_project(root) if config.logging.event_log else None
    engine = WorkflowEngine(
        store,
        event_log=event_log,
        reentry_policy=config.workflow.reentry_policy,
    )
    runner = PhaseRunner(engine, PlaceholderGenerator())
    return CliContext(root=root, config=config, store=store, engine=engine, runner=runner)


def _emit(result: CommandResult) -> None:
    """Print a command result and exit with its status code."""
    if result.success:
        typer.echo(result.message)
        sys.exit(0)
    typer.echo(result.message, err=True)
    if result.remedy:
        typer.echo(f"\nRun '{result.remedy}' to continue.", err=True)
    sys.exit(1)


def _run(ctx: typer.Context, action: str, body: Callable[[CliContext], CommandResult]) -> None:
    """Build context, run ``body`` and map unexpected failures to exit 1."""
    try:
        cli_ctx = _build_context(ctx.obj["root"], ctx.obj["verbose"])
        result = body(cli_ctx)
    except ConfigError as e:
        typer.echo(f"✗ Failed to {action}: Invalid configuration", err=True)
        typer.echo(f"\nError: {e}", err=True)
        typer.echo(f"\nFix {get_config_path(ctx.obj['root'])} and try again.", err=True)
        sys.exit(1)
    except PermissionError as e:
        typer.echo(f"✗ Failed to {action}: Permission denied", err=True)
        typer.echo(f"\nError: {e}", err=True)
        typer.echo("\nPlease check write permissions and try again.", err=True)
        sys.exit(1)
    except OSError as e:
        typer.echo(f"✗ Failed to {action}: System error", err=True)
        typer.echo(f"\nError: {e}", err=True)
        sys.exit(1)
    _emit(result)


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Annotated[
        Optional[Path],
        typer.Option(
            "--root",
            file_okay=False,
            dir_okay=True,
            help="Project root (defaults to the current directory).",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
) -> None:
    """Phase-gated feature workflow."""
    ctx.obj = {"root": root or Path.cwd(), "verbose": verbose}


@app.command()
def init(
    ctx: typer.Context,
    project_name: Optional[str] = typer.Argument(None, help="Name of the project"),
    here: bool = typer.Option(
        False, "--here", help="Use current directory name as project name"
    ),
    force: bool = typer.Option(
        False, "--force", help="Overwrite an existing workflow state"
    ),
) -> None:
    """Initialize workflow state for a new feature.

    Either PROJECT_NAME argument or --here flag must be provided.
    """
    if here:
        project_name = InitCommand.default_project_name(ctx.obj["root"])
    elif not project_name:
        typer.echo(
            "Error: PROJECT_NAME argument is required unless --here is specified.",
            err=True,
        )
        typer.echo("Usage: sdd init [PROJECT_NAME] [--here] [--force]", err=True)
        sys.exit(1)

    _run(
        ctx,
        "initialize project",
        lambda c: InitCommand(c.engine).execute(project_name, force=force),
    )


def _phase(ctx: typer.Context, phase: Phase, user_input: str = "") -> None:
    _run(
        ctx,
        f"run {phase.value}",
        lambda c: PhaseCommand(c.runner, phase).execute(user_input),
    )


@app.command()
def specify(
    ctx: typer.Context,
    description: list[str] = typer.Argument(..., help="Feature description"),
) -> None:
    """Create the feature specification."""
    _phase(ctx, Phase.SPECIFY, " ".join(description))


@app.command()
def plan(ctx: typer.Context) -> None:
    """Create the architecture plan from the specification."""
    _phase(ctx, Phase.PLAN)


@app.command()
def task(ctx: typer.Context) -> None:
    """Break the approved plan down into tasks."""
    _phase(ctx, Phase.TASK)


@app.command()
def execute(ctx: typer.Context) -> None:
    """Record implementation of the task breakdown."""
    _phase(ctx, Phase.EXECUTE)


@app.command()
def review(ctx: typer.Context) -> None:
    """Review the implementation."""
    _phase(ctx, Phase.REVIEW)


@app.command()
def complete(ctx: typer.Context) -> None:
    """Close the feature after review."""
    _phase(ctx, Phase.COMPLETE)


@app.command()
def approve(
    ctx: typer.Context,
    comments: str = typer.Option("", "--comments", "-c", help="Approval comments"),
    by: Optional[str] = typer.Option(
        None, "--by", help="Approver name (defaults to config, then $USER)"
    ),
) -> None:
    """Approve the current phase to proceed."""
    _run(
        ctx,
        "approve phase",
        lambda c: ApproveCommand(c.runner).execute(
            by or c.config.approval.resolve_approver(),
            comments or None,
        ),
    )


@app.command()
def status(ctx: typer.Context) -> None:
    """Show the current phase, per-phase status and next step."""
    _run(ctx, "get status", lambda c: StatusCommand(c.store).execute())


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
