"""Network fetchers: npm package versions, GitHub Action tags, Node.js LTS lines.

Each fetcher returns a result object instead of raising; fallbacks are
reported through ``used_fallback`` and ``warning``.
"""

from forge_npm_pkg.fetchers.actions import (
    FALLBACK_ACTION_VERSIONS,
    SUPPORTED_ACTIONS,
    ActionVersionResolver,
)
from forge_npm_pkg.fetchers.http import FetchError
from forge_npm_pkg.fetchers.models import (
    NodeVersionConfig,
    ResolvedVersions,
    VersionResolutionResult,
)
from forge_npm_pkg.fetchers.node import FALLBACK_NODE_CONFIG, NodeLTSResolver
from forge_npm_pkg.fetchers.versions import VersionResolver

__all__ = [
    "ActionVersionResolver",
    "FALLBACK_ACTION_VERSIONS",
    "FALLBACK_NODE_CONFIG",
    "FetchError",
    "NodeLTSResolver",
    "NodeVersionConfig",
    "ResolvedVersions",
    "SUPPORTED_ACTIONS",
    "VersionResolutionResult",
    "VersionResolver",
]
