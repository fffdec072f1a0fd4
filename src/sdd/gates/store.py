"""State store: one YAML state document per project root."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from sdd.gates.atomic_write import atomic_write_text
from sdd.gates.errors import (
    AlreadyInitializedError,
    CorruptStateError,
    InvalidProjectNameError,
    NotInitializedError,
    StaleStateError,
)
from sdd.gates.models import ProjectState, create_initial_project_state
from sdd.gates.paths import get_sdd_root, get_state_path
from sdd.gates.state_lock import state_lock

_LOGGER = logging.getLogger(__name__)

_INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def _utc_now() -> datetime:
    return datetime.now(UTC)


def validate_project_name(project_name: str) -> str:
    """Validate a project name for filesystem compatibility.

    Args:
        project_name: Raw project name.

    Returns:
        The stripped project name.

    Raises:
        InvalidProjectNameError: If the name is empty or has invalid characters.
    """
    if not project_name or not project_name.strip():
        raise InvalidProjectNameError("Project name cannot be empty")
    if _INVALID_NAME_CHARS.search(project_name):
        raise InvalidProjectNameError(
            "Project name contains invalid characters. "
            'Project name cannot contain: < > : " / \\ | ? * or control characters'
        )
    return project_name.strip()


class StateStore:
    """Load and persist the ProjectState document of one project root.

    The store never caches state between calls; every ``load`` reads the
    document from disk.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        lock_timeout: float = -1,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Create a store bound to ``project_root``.

        Args:
            project_root: Directory holding the .sdd store directory.
            lock_timeout: Seconds to wait for the state lock; negative waits forever.
            clock: Source of timezone-aware "now" timestamps.
        """
        self.project_root = project_root
        self.sdd_root = get_sdd_root(project_root)
        self.state_path = get_state_path(project_root)
        self.lock_timeout = lock_timeout
        self.clock = clock

    def exists(self) -> bool:
        """Return whether a non-empty state document is present."""
        return self.state_path.is_file() and bool(self.state_path.read_bytes().strip())

    def locked(self) -> AbstractContextManager[None]:
        """Return a context manager holding the store lock."""
        return state_lock(self.project_root, timeout=self.lock_timeout)

    def initialize(self, project_name: str, *, force: bool = False) -> ProjectState:
        """Write a freshly seeded state document.

        Args:
            project_name: Human-readable project name.
            force: Overwrite an existing document instead of failing.

        Returns:
            The persisted initial ProjectState.

        Raises:
            InvalidProjectNameError: If the project name is rejected.
            AlreadyInitializedError: If a document exists and ``force`` is False.
        """
        name = validate_project_name(project_name)
        with self.locked():
            if not force and self.exists():
                raise AlreadyInitializedError(
                    f"Project already initialized at {self.state_path}"
                )
            state = create_initial_project_state(name, self.clock())
            self._write(state)
        _LOGGER.info("Initialized project %s (%s)", name, state.project_id)
        return state

    def load(self) -> ProjectState:
        """Load the state document.

        Returns:
            Parsed ProjectState.

        Raises:
            NotInitializedError: If no document exists or it is empty.
            CorruptStateError: If the document cannot be parsed or validated.
        """
        if not self.state_path.is_file():
            raise NotInitializedError(
                f"Project not initialized: {self.state_path} not found"
            )
        raw = self.state_path.read_bytes()
        if not raw.strip():
            raise NotInitializedError(
                f"Project not initialized: {self.state_path} is empty"
            )
        payload = self._decode(raw)
        try:
            return ProjectState.from_file_dict(payload)
        except ValidationError as exc:
            raise CorruptStateError(f"Invalid state document: {exc}") from exc

    def save(self, state: ProjectState, *, check_revision: bool = False) -> None:
        """Serialize the whole document and replace the file in one write.

        Args:
            state: State to persist. Its ``revision`` is bumped on success.
            check_revision: Reject the save when the on-disk revision differs
                from ``state.revision`` (optimistic concurrency). Without it
                the last writer wins.

        Raises:
            StaleStateError: If ``check_revision`` is set and the document moved on.
        """
        if check_revision and self.state_path.is_file():
            on_disk = self.load().revision
            if on_disk != state.revision:
                raise StaleStateError(state.revision, on_disk)
        self._write(state)

    def _write(self, state: ProjectState) -> None:
        payload = state.to_file_dict()
        payload["revision"] = state.revision + 1
        content = yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
        atomic_write_text(self.state_path, content, temp_prefix="state")
        state.revision = payload["revision"]
        _LOGGER.debug(
            "Saved state %s revision=%s phase=%s",
            self.state_path,
            state.revision,
            state.current_phase.value,
        )

    @staticmethod
    def _decode(raw: bytes) -> dict[str, Any]:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptStateError(f"State document is not valid UTF-8: {exc}") from exc
        try:
            payload = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise CorruptStateError(f"Invalid state YAML: {exc}") from exc
        if not isinstance(payload, dict):
            raise CorruptStateError(
                "Invalid state document: root must be a mapping"
            )
        return payload
