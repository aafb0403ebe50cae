"""forge-npm-pkg configuration.

Two typed models live here.  ``ProjectConfiguration`` describes the package
being scaffolded and is built once by the CLI from its flags.
``ForgeSettings`` holds the runtime knobs of the tool itself (registry URLs,
fetch timeout, GitHub token) and can be populated from environment variables.
Both use Pydantic v2 so invalid input is rejected at construction time.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Language(str, Enum):
    """Source language of the generated package."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"


class ModuleType(str, Enum):
    """Module format shipped by the generated package."""

    ESM = "esm"
    COMMONJS = "commonjs"
    DUAL = "dual"


class TestRunner(str, Enum):
    """Test runner wired into the generated package."""

    __test__ = False  # keep pytest from collecting this enum

    VITEST = "vitest"
    JEST = "jest"
    NONE = "none"


PACKAGE_NAME_PATTERN = r"^[a-z0-9\-_@/]+$"


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


class ProjectConfiguration(BaseModel):
    """Answers to every scaffolding question.

    Instances are immutable: the CLI constructs one and hands it to the
    builders, which are pure functions of it.
    """

    model_config = ConfigDict(frozen=True)

    package_name: str = Field(
        ...,
        min_length=1,
        pattern=PACKAGE_NAME_PATTERN,
        description="npm package name (lowercase letters, digits, - _ @ /)",
    )
    language: Language = Field(default=Language.TYPESCRIPT)
    module_type: ModuleType = Field(default=ModuleType.ESM)
    test_runner: TestRunner = Field(default=TestRunner.VITEST)

    use_linting: bool = Field(default=True, description="ESLint + Prettier")
    use_changesets: bool = Field(default=False, description="Changesets release flow")
    init_git: bool = Field(default=True)
    setup_ci: bool = Field(default=True, description="Generate the CI workflow")
    setup_cd: bool = Field(default=False, description="Generate the publish workflow")
    use_codecov: bool = Field(default=False)
    use_dependabot: bool = Field(default=False)

    description: str | None = Field(default=None)
    author: str | None = Field(default=None)
    author_email: str | None = Field(default=None)
    github_username: str | None = Field(default=None)

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        if not v.rsplit("/", 1)[-1]:
            raise ValueError("package name must not end with '/'")
        return v

    @property
    def is_typescript(self) -> bool:
        return self.language is Language.TYPESCRIPT

    @property
    def has_tests(self) -> bool:
        return self.test_runner is not TestRunner.NONE

    @property
    def repo_name(self) -> str:
        """Repository name for GitHub URLs (the npm scope is dropped)."""
        return self.package_name.rsplit("/", 1)[-1]

    @property
    def source_ext(self) -> str:
        return "ts" if self.is_typescript else "js"


# ---------------------------------------------------------------------------
# Tool settings
# ---------------------------------------------------------------------------


class ForgeSettings(BaseModel):
    """Runtime settings for the network fetchers.

    Defaults point at the public npm registry, the GitHub REST API and the
    Node.js distribution index.
    """

    registry_url: str = Field(default="https://registry.npmjs.org")
    github_api_url: str = Field(default="https://api.github.com")
    node_dist_url: str = Field(default="https://nodejs.org/dist/index.json")
    fetch_timeout: float = Field(
        default=5.0, gt=0, description="Per-request deadline in seconds"
    )
    user_agent: str = Field(default="forge-npm-pkg")
    github_token: str | None = Field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> "ForgeSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            FORGE_REGISTRY_URL, FORGE_GITHUB_API_URL, FORGE_NODE_DIST_URL,
            FORGE_FETCH_TIMEOUT, GITHUB_TOKEN.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("FORGE_REGISTRY_URL"):
            kwargs["registry_url"] = os.environ["FORGE_REGISTRY_URL"].rstrip("/")
        if os.environ.get("FORGE_GITHUB_API_URL"):
            kwargs["github_api_url"] = os.environ["FORGE_GITHUB_API_URL"].rstrip("/")
        if os.environ.get("FORGE_NODE_DIST_URL"):
            kwargs["node_dist_url"] = os.environ["FORGE_NODE_DIST_URL"]
        if os.environ.get("FORGE_FETCH_TIMEOUT"):
            kwargs["fetch_timeout"] = float(os.environ["FORGE_FETCH_TIMEOUT"])
        if os.environ.get("GITHUB_TOKEN"):
            kwargs["github_token"] = os.environ["GITHUB_TOKEN"]
        return cls(**kwargs)
