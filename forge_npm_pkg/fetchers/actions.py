"""GitHub Actions major-version resolver.

Workflows reference actions by major tag (``actions/checkout@v5``).  The
resolver looks up the highest stable major for each supported action:

1. the repository's releases (drafts and pre-releases dropped),
2. the repository's tags (pre-release tags dropped),
3. a fixed default tag, because an action reference must always be concrete.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from types import MappingProxyType
from typing import Any, NamedTuple

from forge_npm_pkg.fetchers.http import FetchError, JsonFetcher
from forge_npm_pkg.fetchers.models import VersionResolutionResult
from forge_npm_pkg.fetchers.semver import extract_major


class ActionSpec(NamedTuple):
    owner: str
    repo: str

    @property
    def key(self) -> str:
        return f"{self.owner}/{self.repo}"


SUPPORTED_ACTIONS: tuple[ActionSpec, ...] = (
    ActionSpec("actions", "checkout"),
    ActionSpec("actions", "setup-node"),
    ActionSpec("codecov", "codecov-action"),
    ActionSpec("dependabot", "fetch-metadata"),
    ActionSpec("changesets", "action"),
)

# Used when an action cannot be resolved at all.
FALLBACK_ACTION_VERSIONS: MappingProxyType[str, str] = MappingProxyType(
    {
        "actions/checkout": "v5",
        "actions/setup-node": "v6",
        "codecov/codecov-action": "v5",
        "dependabot/fetch-metadata": "v2",
        "changesets/action": "v1",
    }
)

DEFAULT_ACTION_TAG = "v5"


def fallback_tag(key: str) -> str:
    return FALLBACK_ACTION_VERSIONS.get(key, DEFAULT_ACTION_TAG)


def highest_major(tags: Iterable[str]) -> int | None:
    """Highest major version among *tags*, ignoring anything unparsable."""
    majors = [m for m in (extract_major(tag) for tag in tags) if m is not None and m > 0]
    return max(majors) if majors else None


class ActionVersionResolver(JsonFetcher):
    """Resolves ``owner/repo`` action identifiers to a ``vN`` tag."""

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/vnd.github.v3+json",
        }
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"
        return headers

    def _repo_url(self, spec: ActionSpec, endpoint: str) -> str:
        base = self.settings.github_api_url.rstrip("/")
        return f"{base}/repos/{spec.owner}/{spec.repo}/{endpoint}"

    async def _from_releases(self, spec: ActionSpec) -> VersionResolutionResult:
        url = self._repo_url(spec, "releases")
        releases: Any = await self._get_json(url)
        if not isinstance(releases, list):
            raise FetchError(url, "unexpected document shape")

        stable = [
            r["tag_name"]
            for r in releases
            if isinstance(r, dict)
            and isinstance(r.get("tag_name"), str)
            and not r.get("draft")
            and not r.get("prerelease")
        ]
        major = highest_major(stable)
        if major is None:
            raise FetchError(url, "no stable releases found")
        return VersionResolutionResult(version=f"v{major}")

    async def _from_tags(self, spec: ActionSpec) -> VersionResolutionResult:
        url = self._repo_url(spec, "tags")
        tags: Any = await self._get_json(url)
        if not isinstance(tags, list):
            raise FetchError(url, "unexpected document shape")

        names = [
            t["name"]
            for t in tags
            if isinstance(t, dict) and isinstance(t.get("name"), str) and "-" not in t["name"]
        ]
        major = highest_major(names)
        if major is None:
            raise FetchError(url, "no stable tags found")
        return VersionResolutionResult(
            version=f"v{major}",
            used_fallback=True,
            level="info",
            warning=f"Resolved {spec.key}@v{major} from tags (no usable releases)",
        )

    async def resolve(self, key: str) -> VersionResolutionResult:
        """Resolve one ``owner/repo`` identifier.  Never raises."""
        owner, _, repo = key.partition("/")
        spec = ActionSpec(owner, repo)
        try:
            return await self._from_releases(spec)
        except FetchError:
            return await self._resolve_fallback(spec)

    async def _resolve_fallback(self, spec: ActionSpec) -> VersionResolutionResult:
        try:
            return await self._from_tags(spec)
        except FetchError:
            tag = fallback_tag(spec.key)
            return VersionResolutionResult(
                version=tag,
                used_fallback=True,
                warning=f"Could not fetch {spec.key} version, using {tag}",
            )

    async def resolve_many(self, keys: Iterable[str]) -> dict[str, VersionResolutionResult]:
        """Resolve several actions concurrently, keyed by ``owner/repo``."""
        names = list(dict.fromkeys(keys))
        results = await asyncio.gather(*(self.resolve(key) for key in names))
        return dict(zip(names, results))

    async def resolve_supported(self) -> dict[str, VersionResolutionResult]:
        """Resolve every action in :data:`SUPPORTED_ACTIONS`."""
        return await self.resolve_many(spec.key for spec in SUPPORTED_ACTIONS)
