"""Command objects behind the sdd CLI."""

from sdd.commands.approve import ApproveCommand
from sdd.commands.base import Command, CommandResult, CommandResultImpl
from sdd.commands.init import InitCommand
from sdd.commands.phase import NEXT_STEPS, PhaseCommand
from sdd.commands.status import StatusCommand

__all__ = [
    "NEXT_STEPS",
    "ApproveCommand",
    "Command",
    "CommandResult",
    "CommandResultImpl",
    "InitCommand",
    "PhaseCommand",
    "StatusCommand",
]
