"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from sdd.gates.engine import WorkflowEngine
from sdd.gates.event_log import EventLog
from sdd.gates.store import StateStore
from tests.helpers import ticking_clock


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project root. .sdd will be created under it."""
    return tmp_path


@pytest.fixture
def store(project_root: Path) -> StateStore:
    """State store with a deterministic ticking clock."""
    return StateStore(project_root, clock=ticking_clock())


@pytest.fixture
def event_log(project_root: Path) -> EventLog:
    """Event log at the default .sdd locations."""
    return EventLog.for_project(project_root)


@pytest.fixture
def engine(store: StateStore, event_log: EventLog) -> WorkflowEngine:
    """Engine over an uninitialized store."""
    return WorkflowEngine(store, event_log=event_log)


@pytest.fixture
def initialized_engine(engine: WorkflowEngine) -> WorkflowEngine:
    """Engine whose project was initialized as 'Demo'."""
    engine.initialize("Demo")
    return engine
