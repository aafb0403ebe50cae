"""GitHub workflow and Dependabot file generation.

Each builder renders one YAML document from the Jinja2 templates under
``templates/workflows/``.  Step inclusion is decided here, in the context
dictionaries, so the templates stay free of configuration logic.

Action references always use the tag resolved for that specific action.
When an action is missing from the resolved map, its own entry in
:data:`~forge_npm_pkg.fetchers.actions.FALLBACK_ACTION_VERSIONS` is used; the
other actions keep their resolved tags.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from forge_npm_pkg.config import ProjectConfiguration
from forge_npm_pkg.fetchers.actions import fallback_tag
from forge_npm_pkg.fetchers.models import NodeVersionConfig, VersionResolutionResult

from .templates import TemplateRenderer

ActionVersions = Mapping[str, VersionResolutionResult]


def action_ref(key: str, actions: ActionVersions) -> str:
    """``owner/repo@vN`` for *key*, using the per-action fallback tag if unresolved."""
    result = actions.get(key)
    tag = result.version if result is not None and result.version else fallback_tag(key)
    return f"{key}@{tag}"


def ci_test_command(config: ProjectConfiguration) -> str | None:
    """Test command for CI: coverage run when CI is set up, plain otherwise."""
    if not config.has_tests:
        return None
    return "npm run test:coverage" if config.setup_ci else "npm test"


class WorkflowBuilder:
    """Renders CI, CD, Dependabot and Dependabot auto-merge files."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def ci_context(
        self,
        config: ProjectConfiguration,
        node: NodeVersionConfig,
        actions: ActionVersions,
    ) -> dict[str, Any]:
        return {
            "node_versions": list(node.ci_matrix),
            "latest_lts": node.latest_lts,
            "checkout": action_ref("actions/checkout", actions),
            "setup_node": action_ref("actions/setup-node", actions),
            "codecov": action_ref("codecov/codecov-action", actions),
            "typecheck": config.is_typescript,
            "lint": config.use_linting,
            "test_command": ci_test_command(config),
            "build": config.is_typescript,
            "codecov_enabled": config.has_tests and config.use_codecov,
        }

    def build_ci(
        self,
        config: ProjectConfiguration,
        node: NodeVersionConfig,
        actions: ActionVersions,
    ) -> str:
        """Render ``.github/workflows/ci.yml``.

        Steps: checkout, setup-node and install always; typecheck for
        TypeScript; lint when linting is on; tests when a runner is chosen;
        build for TypeScript; Codecov upload when tests and Codecov are both
        on.  The upload runs only on the ``latest_lts`` matrix entry and is
        ``continue-on-error`` so a Codecov outage never fails the job.
        """
        return self.renderer.render("workflows/ci.yml.j2", self.ci_context(config, node, actions))

    def build_cd(
        self,
        config: ProjectConfiguration,
        node: NodeVersionConfig,
        actions: ActionVersions,
    ) -> str:
        """Render the publishing workflow.

        With Changesets this is the ``release.yml`` flow driven by
        ``changesets/action``; otherwise a ``publish.yml`` that publishes on
        each GitHub release.
        """
        context = {
            "node_version": node.latest_lts,
            "checkout": action_ref("actions/checkout", actions),
            "setup_node": action_ref("actions/setup-node", actions),
            "changesets": action_ref("changesets/action", actions),
            "build": config.is_typescript,
            "test_command": "npm test" if config.has_tests else None,
        }
        return self.renderer.render(self.cd_template(config), context)

    @staticmethod
    def cd_template(config: ProjectConfiguration) -> str:
        return "workflows/release.yml.j2" if config.use_changesets else "workflows/publish.yml.j2"

    @staticmethod
    def cd_filename(config: ProjectConfiguration) -> str:
        return "release.yml" if config.use_changesets else "publish.yml"

    def build_dependabot(self) -> str:
        """Render ``.github/dependabot.yml`` (npm + github-actions, weekly)."""
        return self.renderer.render("dependabot.yml.j2", {})

    def build_dependabot_auto_merge(self, actions: ActionVersions) -> str:
        """Render the workflow that squash-merges Dependabot patch/minor PRs."""
        context = {"fetch_metadata": action_ref("dependabot/fetch-metadata", actions)}
        return self.renderer.render("workflows/dependabot-auto-merge.yml.j2", context)
