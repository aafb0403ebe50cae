"""Shared pytest fixtures for the forge-npm-pkg test suite.

Provides reusable fixtures for:
- Project configurations (factory plus common presets)
- A frozen clock and ISO timestamps relative to it
- ``httpx.MockTransport`` builders for the npm registry, GitHub API and
  Node.js dist index
- Pre-resolved version bundles so builders can run without any network
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

from forge_npm_pkg.config import ProjectConfiguration
from forge_npm_pkg.fetchers import (
    NodeVersionConfig,
    ResolvedVersions,
    VersionResolutionResult,
)
from forge_npm_pkg.scaffolder import required_packages


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------

@pytest.fixture
def make_config() -> Callable[..., ProjectConfiguration]:
    """Factory for ``ProjectConfiguration`` with test-friendly defaults.

    Usage::

        def test_something(make_config):
            config = make_config(language="javascript", module_type="commonjs")
    """
    def factory(**overrides: Any) -> ProjectConfiguration:
        values: dict[str, Any] = {"package_name": "my-lib"}
        values.update(overrides)
        return ProjectConfiguration(**values)

    return factory


@pytest.fixture
def ts_dual_config(make_config) -> ProjectConfiguration:
    """TypeScript dual package with vitest and linting, no Codecov."""
    return make_config(
        language="typescript",
        module_type="dual",
        test_runner="vitest",
        use_linting=True,
        use_codecov=False,
    )


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

@pytest.fixture
def fixed_now() -> datetime:
    """Frozen 'now' used for every age calculation in the tests."""
    return datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def days_ago(fixed_now) -> Callable[[int], str]:
    """Return a registry-style ISO timestamp *n* days before ``fixed_now``."""
    def factory(days: int) -> str:
        stamp = fixed_now - timedelta(days=days)
        return stamp.strftime("%Y-%m-%dT%H:%M:%S.000Z")

    return factory


# ---------------------------------------------------------------------------
# HTTP transports
# ---------------------------------------------------------------------------

@pytest.fixture
def route_transport() -> Callable[[dict[str, Any]], httpx.MockTransport]:
    """Build a ``MockTransport`` from a ``{url: payload}`` mapping.

    Payload values:
    - ``int``: bare response with that status code
    - ``httpx.Response``: returned as-is
    - anything else: 200 with the value as a JSON body

    Unknown URLs raise ``httpx.ConnectError`` as if the host were unreachable.
    """
    def factory(routes: dict[str, Any]) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            if url not in routes:
                raise httpx.ConnectError("unreachable", request=request)
            payload = routes[url]
            if isinstance(payload, int):
                return httpx.Response(payload)
            if isinstance(payload, httpx.Response):
                return payload
            return httpx.Response(200, json=payload)

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def offline_transport() -> httpx.MockTransport:
    """Transport for which every request fails to connect."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network down", request=request)

    return httpx.MockTransport(handler)


# ---------------------------------------------------------------------------
# Resolved versions
# ---------------------------------------------------------------------------

@pytest.fixture
def node_config() -> NodeVersionConfig:
    return NodeVersionConfig(minimum=22, engines=">=22.0.0", ci_matrix=[24, 22], latest_lts=24)


@pytest.fixture
def resolved_actions() -> dict[str, VersionResolutionResult]:
    return {
        "actions/checkout": VersionResolutionResult(version="v5"),
        "actions/setup-node": VersionResolutionResult(version="v6"),
        "codecov/codecov-action": VersionResolutionResult(version="v5"),
        "dependabot/fetch-metadata": VersionResolutionResult(version="v2"),
        "changesets/action": VersionResolutionResult(version="v1"),
    }


@pytest.fixture
def make_versions(node_config, resolved_actions) -> Callable[[ProjectConfiguration], ResolvedVersions]:
    """Build a ``ResolvedVersions`` pinning every required package to ``^1.0.0``."""
    def factory(config: ProjectConfiguration) -> ResolvedVersions:
        packages = {
            name: VersionResolutionResult(version="^1.0.0")
            for name in required_packages(config)
        }
        return ResolvedVersions(packages=packages, node=node_config, actions=resolved_actions)

    return factory

