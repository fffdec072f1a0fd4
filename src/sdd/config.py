"""Project config models and loading helpers."""

from __future__ import annotations

import getpass
import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sdd.gates.engine import ReentryPolicy

DEFAULT_APPROVER = "developer"


class ApprovalSettings(BaseModel):
    """Approval defaults."""

    model_config = ConfigDict(extra="forbid")

    default_approver: str | None = None

    def resolve_approver(self) -> str:
        """Return configured approver, else the login user, else ``developer``."""
        if self.default_approver:
            return self.default_approver
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = ""
        return user or DEFAULT_APPROVER


class WorkflowSettings(BaseModel):
    """Workflow engine behavior."""

    model_config = ConfigDict(extra="forbid")

    reentry_policy: ReentryPolicy = ReentryPolicy.ACCUMULATE
    lock_timeout_seconds: float = Field(default=10.0, gt=0, le=600)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str = "WARNING"
    event_log: bool = True

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class SddConfig(BaseModel):
    """Root project configuration model (.sdd/config.yaml)."""

    model_config = ConfigDict(extra="forbid")

    approval: ApprovalSettings = ApprovalSettings()
    workflow: WorkflowSettings = WorkflowSettings()
    logging: LoggingSettings = LoggingSettings()


class ConfigError(RuntimeError):
    """Raised when project config cannot be decoded or validated."""


def _decode_config_payload(path: Path) -> dict[str, object]:
    """Decode config payload from JSON or YAML.

    Args:
        path: Config file path.

    Returns:
        Parsed mapping payload.

    Raises:
        ConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid config JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid config YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError("Invalid config payload: root must be an object")
    return payload


def load_config(path: Path) -> SddConfig:
    """Load project config from disk, defaulting when missing.

    Args:
        path: Config file path.

    Returns:
        Parsed config payload, or defaults when file does not exist.

    Raises:
        ConfigError: If payload decode or validation fails.
    """
    if not path.exists():
        return SddConfig()
    payload = _decode_config_payload(path)
    try:
        return SddConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config payload: {exc}") from exc
