"""Main scaffolding orchestrator.

Takes a ``ProjectConfiguration``, resolves tool versions from the network
(all lookups concurrently), then writes a complete npm package directory:
manifest, TypeScript/tsup config, lint and test config, starter sources,
README and GitHub workflows.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
from pydantic import BaseModel, Field

from forge_npm_pkg.config import ForgeSettings, ProjectConfiguration
from forge_npm_pkg.fetchers import (
    ActionVersionResolver,
    NodeLTSResolver,
    ResolvedVersions,
    VersionResolver,
)
from forge_npm_pkg.utils import dump_json

from .configs import ConfigFileBuilder, generate_prettier_config, generate_tsconfig
from .package_json import generate_package_json, required_packages
from .templates import TemplateRenderer, write_file
from .workflows import WorkflowBuilder


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Raised when the project directory cannot be generated."""


class ProjectExistsError(ScaffoldError):
    """The target directory already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f'Directory "{path}" already exists')


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class ScaffoldResult(BaseModel):
    """Outcome of a scaffold run."""

    project_root: Path
    files: list[str] = Field(default_factory=list, description="Paths relative to the root")
    warnings: list[tuple[str, str]] = Field(
        default_factory=list, description="(level, message) pairs from version resolution"
    )
    versions: ResolvedVersions


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Scaffolds one npm package.

    Given a ``ProjectConfiguration``, generates a directory containing:
    - package.json with entry points, scripts and resolved devDependencies
    - tsconfig.json and tsup.config.ts (TypeScript only)
    - eslint.config.js, .prettierrc, .prettierignore (linting only)
    - vitest/jest config and an example test (when a runner is chosen)
    - README.md, .gitignore, .editorconfig and src/index
    - CI, CD and Dependabot files under .github/ (when requested)
    """

    def __init__(
        self,
        config: ProjectConfiguration,
        settings: ForgeSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.settings = settings or ForgeSettings()
        self.renderer = TemplateRenderer()
        self.configs = ConfigFileBuilder(self.renderer)
        self.workflows = WorkflowBuilder(self.renderer)
        self.package_resolver = VersionResolver(self.settings, transport)
        self.node_resolver = NodeLTSResolver(self.settings, transport)
        self.action_resolver = ActionVersionResolver(self.settings, transport)

    # -- Version resolution ------------------------------------------------

    def _action_keys(self) -> list[str]:
        keys = ["actions/checkout", "actions/setup-node"]
        if self.config.use_codecov:
            keys.append("codecov/codecov-action")
        if self.config.use_dependabot:
            keys.append("dependabot/fetch-metadata")
        if self.config.setup_cd and self.config.use_changesets:
            keys.append("changesets/action")
        return keys

    async def resolve_versions(self) -> ResolvedVersions:
        """Fire every npm, Node and action lookup at once and collect the results.

        Each lookup carries its own deadline, so the total wait is bounded by
        the slowest single request.  Actions are only looked up when a
        workflow that uses them will be written.
        """
        needs_actions = self.config.setup_ci or self.config.setup_cd or self.config.use_dependabot
        action_keys = self._action_keys() if needs_actions else []

        packages, node, actions = await asyncio.gather(
            self.package_resolver.resolve_many(required_packages(self.config)),
            self.node_resolver.resolve(),
            self.action_resolver.resolve_many(action_keys),
        )
        return ResolvedVersions(packages=packages, node=node, actions=actions)

    # -- Public API --------------------------------------------------------

    async def generate(
        self,
        output_dir: str | Path,
        versions: ResolvedVersions | None = None,
    ) -> ScaffoldResult:
        """Generate the project under ``output_dir/<repo name>``.

        Args:
            output_dir: Parent directory for the new project folder.
            versions: Pre-resolved versions; resolved from the network when
                omitted.

        Returns:
            A ``ScaffoldResult`` listing the written files and any
            resolution warnings.

        Raises:
            ProjectExistsError: If the project folder already exists.
        """
        project_root = Path(output_dir) / self.config.repo_name
        if project_root.exists():
            raise ProjectExistsError(project_root)

        if versions is None:
            versions = await self.resolve_versions()

        files = self.render_files(versions)
        await asyncio.to_thread(project_root.mkdir, parents=True)
        for relative, content in files.items():
            await asyncio.to_thread(write_file, project_root / relative, content)

        return ScaffoldResult(
            project_root=project_root,
            files=list(files),
            warnings=versions.warnings(),
            versions=versions,
        )

    def render_files(self, versions: ResolvedVersions) -> dict[str, str]:
        """Render every file of the project in memory.

        Returns:
            Ordered mapping of POSIX path (relative to the project root) to
            file content.  Pure: identical inputs give identical output.
        """
        config = self.config
        files: dict[str, str] = {}

        files["package.json"] = dump_json(
            generate_package_json(config, versions.packages, versions.node)
        )
        files["README.md"] = self.configs.readme(config)
        files[".gitignore"] = self.configs.gitignore()
        files[".editorconfig"] = self.configs.editorconfig()
        files[f"src/index.{config.source_ext}"] = self.configs.index_source(config)

        index_test = self.configs.index_test(config)
        if index_test is not None:
            files[f"src/index.test.{config.source_ext}"] = index_test

        if config.is_typescript:
            files["tsconfig.json"] = dump_json(generate_tsconfig(config))
            files["tsup.config.ts"] = self.configs.tsup_config(config)

        if config.use_linting:
            files[self.configs.eslint_config_filename(config)] = self.configs.eslint_config(config)
            files[".prettierrc"] = dump_json(generate_prettier_config())
            files[".prettierignore"] = self.configs.prettierignore()

        test_config_name = self.configs.test_config_filename(config)
        test_config = self.configs.test_config(config)
        if test_config_name and test_config is not None:
            files[test_config_name] = test_config

        if config.setup_ci:
            files[".github/workflows/ci.yml"] = self.workflows.build_ci(
                config, versions.node, versions.actions
            )
        if config.setup_cd:
            files[f".github/workflows/{self.workflows.cd_filename(config)}"] = (
                self.workflows.build_cd(config, versions.node, versions.actions)
            )
        if config.use_dependabot:
            files[".github/dependabot.yml"] = self.workflows.build_dependabot()
            files[".github/workflows/dependabot-auto-merge.yml"] = (
                self.workflows.build_dependabot_auto_merge(versions.actions)
            )

        return files
