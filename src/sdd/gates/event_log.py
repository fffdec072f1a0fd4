"""Dual-format (JSONL and Markdown) workflow event log."""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sdd.gates.paths import get_log_paths


class WorkflowAction(str, Enum):
    """Action type for workflow log entries."""

    INITIALIZED = "initialized"
    TRANSITIONED = "transitioned"
    APPROVED = "approved"
    COMPLETED = "completed"


class WorkflowEvent(BaseModel):
    """Model representing a single entry in both log.jsonl and log.md."""

    timestamp: datetime = Field(..., description="ISO 8601 format timestamp")
    action: WorkflowAction = Field(..., description="Action type")
    phase: str = Field(..., min_length=1, description="Phase the action applied to")
    actor: Optional[str] = Field(
        default=None, description="Approver or agent responsible for the action"
    )
    files: List[str] = Field(
        default_factory=list, description="Artifact files recorded by the action"
    )
    metadata: Optional[Dict[str, str]] = Field(
        default=None,
        description="Additional context (previous phase, comments, etc.)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "timestamp": "2026-01-14T10:30:00Z",
                "action": "approved",
                "phase": "plan",
                "actor": "alice",
                "files": [],
                "metadata": {"comments": "looks good"},
            }
        }
    )


class EventLog:
    """Appends workflow events to log.jsonl and log.md under .sdd."""

    def __init__(self, log_jsonl_path: Path, log_md_path: Path):
        """Initialize event log with its file paths.

        Args:
            log_jsonl_path: Path to JSONL log file (.sdd/log.jsonl)
            log_md_path: Path to Markdown log file (.sdd/log.md)
        """
        self.log_jsonl_path = log_jsonl_path
        self.log_md_path = log_md_path

    @classmethod
    def for_project(cls, project_root: Path) -> "EventLog":
        """Create an event log at the default .sdd locations."""
        return cls(*get_log_paths(project_root))

    def record(self, event: WorkflowEvent) -> None:
        """Write the same event to both formats synchronously.

        Args:
            event: Event to append.
        """
        self._append_jsonl(event.model_dump(mode="json"))
        self._append_markdown(self._format_markdown_entry(event))

    def read_events(self) -> List[WorkflowEvent]:
        """Return all events recorded in log.jsonl, oldest first."""
        if not self.log_jsonl_path.exists():
            return []
        events = []
        with self.log_jsonl_path.open(encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    events.append(WorkflowEvent.model_validate(json.loads(line)))
        return events

    def _append_jsonl(self, entry: Dict) -> None:
        self.log_jsonl_path.parent.mkdir(parents=True, exist_ok=True)
        with self.log_jsonl_path.open("a", encoding="utf-8") as f:
            json.dump(entry, f, ensure_ascii=False)
            f.write("\n")

    def _append_markdown(self, entry: str) -> None:
        self.log_md_path.parent.mkdir(parents=True, exist_ok=True)
        with self.log_md_path.open("a", encoding="utf-8") as f:
            f.write(entry)
            if not entry.endswith("\n"):
                f.write("\n")

    def _format_markdown_entry(self, event: WorkflowEvent) -> str:
        """Format event as Markdown.

        Args:
            event: WorkflowEvent instance

        Returns:
            Markdown-formatted log entry string
        """
        # Format timestamp for display: "2026-01-14 10:30:00"
        display_time = event.timestamp.strftime("%Y-%m-%d %H:%M:%S")

        header = f"[{display_time}] {event.action.value}: {event.phase}"
        if event.actor:
            header += f" ({event.actor})"
        lines = [header]
        for file_path in event.files:
            lines.append(f"- {file_path}")

        if event.metadata:
            for key, value in event.metadata.items():
                lines.append(f"  {key}: {value}")

        return "\n".join(lines)
