"""Consumer-side workflow helpers: phase runner and artifact generator seam."""

from sdd.workflow.generator import (
    ArtifactGenerator,
    ArtifactRequest,
    PlaceholderGenerator,
)
from sdd.workflow.runner import (
    PHASE_AGENTS,
    PhaseRunner,
    PhaseRunResult,
    ViewState,
    derive_view_state,
)

__all__ = [
    "PHASE_AGENTS",
    "ArtifactGenerator",
    "ArtifactRequest",
    "PhaseRunResult",
    "PhaseRunner",
    "PlaceholderGenerator",
    "ViewState",
    "derive_view_state",
]
