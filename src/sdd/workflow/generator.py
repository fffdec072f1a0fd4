"""Artifact generator contract for the external language-model collaborator."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from sdd.gates.phases import Phase


class ArtifactRequest(BaseModel):
    """Normalized request payload for artifact generators."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    project_name: str = Field(min_length=1)
    phase: Phase
    agent: str = Field(min_length=1)
    user_input: str = ""
    context: str = ""


class ArtifactGenerator(Protocol):
    """Produces the artifact text for one phase."""

    def generate(self, request: ArtifactRequest) -> str:
        """Return artifact markdown for ``request``."""


class PlaceholderGenerator:
    """Writes a markdown skeleton when no model provider is configured."""

    def generate(self, request: ArtifactRequest) -> str:
        """Return a minimal artifact carrying the request input and context.

        Args:
            request: Artifact request.

        Returns:
            Markdown artifact text.
        """
        lines = [
            f"# {request.phase.value.capitalize()}: {request.project_name}",
            "",
            f"_Prepared by agent `{request.agent}`._",
        ]
        if request.user_input:
            lines.extend(["", "## Request", "", request.user_input])
        if request.context:
            lines.extend(["", "## Previous artifact", "", request.context.strip()])
        return "\n".join(lines) + "\n"
