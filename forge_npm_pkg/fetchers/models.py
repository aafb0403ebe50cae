"""Result models produced by the version fetchers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class VersionResolutionResult(BaseModel):
    """Version to pin for one npm package or GitHub Action.

    ``version`` is a caret range (``^1.2.3``), a major tag (``v5``) or the
    literal ``"latest"``.  ``used_fallback`` is left unset on the primary
    path and is ``True`` whenever a fallback tier produced the value.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    used_fallback: bool | None = Field(default=None)
    warning: str | None = Field(default=None)
    level: Literal["info", "warning"] = Field(
        default="warning", description="How loudly the CLI should show ``warning``"
    )


class NodeVersionConfig(BaseModel):
    """Supported Node.js release lines for ``engines`` and the CI matrix."""

    model_config = ConfigDict(frozen=True)

    minimum: int
    engines: str
    ci_matrix: list[int] = Field(max_length=2)
    latest_lts: int
    used_fallback: bool = Field(default=False)


class ResolvedVersions(BaseModel):
    """Everything fetched from the network for one scaffold run."""

    packages: dict[str, VersionResolutionResult] = Field(default_factory=dict)
    node: NodeVersionConfig
    actions: dict[str, VersionResolutionResult] = Field(default_factory=dict)

    def warnings(self) -> list[tuple[str, str]]:
        """Return ``(level, message)`` pairs for every result that carries one."""
        messages: list[tuple[str, str]] = []
        for result in [*self.packages.values(), *self.actions.values()]:
            if result.warning:
                messages.append((result.level, result.warning))
        if self.node.used_fallback:
            messages.append(
                ("warning", "Could not fetch Node.js LTS versions, using fallback")
            )
        return messages
