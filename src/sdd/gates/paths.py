"""Paths for the per-project workflow store. .sdd is the store root."""

from pathlib import Path

from sdd.gates.phases import Phase

SDD_DIR = ".sdd"
STATE_FILENAME = "state.yaml"
LOCK_FILENAME = ".lock"
CONFIG_FILENAME = "config.yaml"
LOG_JSONL_FILENAME = "log.jsonl"
LOG_MD_FILENAME = "log.md"

# Canonical artifact file name per phase
PHASE_ARTIFACTS: dict[Phase, str] = {
    Phase.SPECIFY: "spec.md",
    Phase.PLAN: "plan.md",
    Phase.TASK: "tasks.md",
    Phase.EXECUTE: "implementation.md",
    Phase.REVIEW: "review.md",
}
ARTIFACT_EXTENSION = ".md"


def get_sdd_root(project_root: Path) -> Path:
    """Return path to .sdd under the project root."""
    return project_root / SDD_DIR


def get_state_path(project_root: Path) -> Path:
    """Return path to .sdd/state.yaml."""
    return get_sdd_root(project_root) / STATE_FILENAME


def get_lock_path(project_root: Path) -> Path:
    """Return path to the store lock file: .sdd/.lock."""
    return get_sdd_root(project_root) / LOCK_FILENAME


def get_config_path(project_root: Path) -> Path:
    """Return path to .sdd/config.yaml."""
    return get_sdd_root(project_root) / CONFIG_FILENAME


def get_log_paths(project_root: Path) -> tuple[Path, Path]:
    """Return (log.jsonl, log.md) paths under .sdd."""
    sdd_root = get_sdd_root(project_root)
    return sdd_root / LOG_JSONL_FILENAME, sdd_root / LOG_MD_FILENAME


def artifact_filename(phase: Phase) -> str:
    """Return the canonical artifact file name for a phase.

    Phases without a dedicated name fall back to ``<phase>.md``.
    """
    phase = Phase(phase)
    return PHASE_ARTIFACTS.get(phase, f"{phase.value}{ARTIFACT_EXTENSION}")


def get_phase_output_path(project_root: Path, phase: Phase) -> Path:
    """Return path to the phase artifact under .sdd."""
    return get_sdd_root(project_root) / artifact_filename(phase)
