"""package.json generation: scripts, devDependencies and the full manifest.

Versions are never written inline here.  :func:`required_packages` lists
the npm packages a configuration needs; the caller resolves them (see
:class:`~forge_npm_pkg.fetchers.VersionResolver`) and passes the results to
:func:`build_dev_dependencies`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from forge_npm_pkg.config import ProjectConfiguration, TestRunner
from forge_npm_pkg.fetchers.models import NodeVersionConfig, VersionResolutionResult

from .entry_points import build_entry_points, package_type

DEFAULT_DESCRIPTION = "A new npm package"
INITIAL_VERSION = "0.1.0"
UNRESOLVED_VERSION = "latest"

PRETTIER_GLOB = '"src/**/*.{ts,js,json,md}"'

TYPESCRIPT_PACKAGES = ("typescript", "tsup", "@types/node", "@arethetypeswrong/cli")
VITEST_PACKAGES = ("vitest", "@vitest/coverage-v8")
JEST_PACKAGES = ("jest",)
JEST_TYPESCRIPT_PACKAGES = ("ts-jest", "@types/jest", "ts-node")
LINT_PACKAGES = ("eslint", "@eslint/js", "prettier", "eslint-config-prettier")
LINT_TYPESCRIPT_PACKAGES = ("@typescript-eslint/eslint-plugin", "@typescript-eslint/parser")
CHANGESETS_PACKAGES = ("@changesets/cli",)


# ---------------------------------------------------------------------------
# Scripts
# ---------------------------------------------------------------------------


def build_scripts(config: ProjectConfiguration) -> dict[str, str]:
    """npm scripts for *config*, in a stable order."""
    scripts: dict[str, str] = {}

    if config.is_typescript:
        scripts["build"] = "tsup"
        scripts["typecheck"] = "tsc --noEmit"

    if config.test_runner is TestRunner.VITEST:
        scripts["test"] = "vitest run"
        scripts["test:watch"] = "vitest"
        scripts["test:coverage"] = "vitest run --coverage"
    elif config.test_runner is TestRunner.JEST:
        scripts["test"] = "jest"
        scripts["test:watch"] = "jest --watch"
        scripts["test:coverage"] = "jest --coverage"

    if config.use_linting:
        # Flat config: file patterns live in eslint.config.js, so no --ext.
        scripts["lint"] = "eslint ."
        scripts["lint:fix"] = "eslint . --fix"
        scripts["format"] = f"prettier --write {PRETTIER_GLOB}"
        scripts["format:check"] = f"prettier --check {PRETTIER_GLOB}"

    if config.is_typescript:
        scripts["check:exports"] = "attw --pack"
        scripts["prepublishOnly"] = "npm run build"

    if config.use_changesets:
        scripts["release"] = "changeset publish"

    return scripts


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def required_packages(config: ProjectConfiguration) -> list[str]:
    """Every devDependency *config* needs, in declaration order."""
    packages: list[str] = []

    if config.is_typescript:
        packages.extend(TYPESCRIPT_PACKAGES)

    if config.test_runner is TestRunner.VITEST:
        packages.extend(VITEST_PACKAGES)
    elif config.test_runner is TestRunner.JEST:
        packages.extend(JEST_PACKAGES)
        if config.is_typescript:
            packages.extend(JEST_TYPESCRIPT_PACKAGES)

    if config.use_linting:
        packages.extend(LINT_PACKAGES)
        if config.is_typescript:
            packages.extend(LINT_TYPESCRIPT_PACKAGES)

    if config.use_changesets:
        packages.extend(CHANGESETS_PACKAGES)

    return packages


def build_dev_dependencies(
    config: ProjectConfiguration,
    versions: Mapping[str, VersionResolutionResult],
) -> dict[str, str]:
    """Map each required package to its resolved version, sorted by name.

    A package missing from *versions* is pinned to ``"latest"`` so the
    package manager resolves it at install time.
    """
    deps: dict[str, str] = {}
    for name in sorted(required_packages(config)):
        result = versions.get(name)
        deps[name] = result.version if result is not None else UNRESOLVED_VERSION
    return deps


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


def format_author(config: ProjectConfiguration) -> str:
    """npm "person" string: ``Name <email> (https://github.com/user)``."""
    parts: list[str] = []
    if config.author:
        parts.append(config.author)
    if config.author_email:
        parts.append(f"<{config.author_email}>")
    if config.github_username:
        parts.append(f"(https://github.com/{config.github_username})")
    return " ".join(parts)


def repository_fields(config: ProjectConfiguration) -> dict[str, Any]:
    if not config.github_username:
        return {}
    base = f"https://github.com/{config.github_username}/{config.repo_name}"
    return {
        "repository": {"type": "git", "url": f"{base}.git"},
        "bugs": {"url": f"{base}/issues"},
        "homepage": f"{base}#readme",
    }


def generate_package_json(
    config: ProjectConfiguration,
    versions: Mapping[str, VersionResolutionResult],
    node: NodeVersionConfig,
) -> dict[str, Any]:
    """Assemble the complete ``package.json`` document.

    Key order is fixed so repeated calls serialise identically.
    """
    pkg: dict[str, Any] = {
        "name": config.package_name,
        "version": INITIAL_VERSION,
        "description": config.description or DEFAULT_DESCRIPTION,
        "type": package_type(config),
    }
    pkg.update(build_entry_points(config).as_manifest_fields())
    pkg["scripts"] = build_scripts(config)
    pkg["keywords"] = []
    pkg["author"] = format_author(config)
    pkg["license"] = "MIT"
    pkg.update(repository_fields(config))
    pkg["engines"] = {"node": node.engines}
    pkg["devDependencies"] = build_dev_dependencies(config, versions)
    return pkg
