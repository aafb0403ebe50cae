"""npm registry version resolver with smart fallbacks.

Resolution runs through three tiers and never raises:

1. ``GET {registry}/{name}/latest``: pin the latest release, attaching a
   warning when it is a fresh major (``x.0.*`` under 30 days) or a fresh
   first minor (``x.1.*`` under 14 days).
2. ``GET {registry}/{name}``: pick the newest stable ``x.y.z`` at least 30
   days old, or the newest stable if none is that old.
3. The literal ``"latest"`` so the package manager resolves it at install time.

Typical usage::

    resolver = VersionResolver()
    results = await resolver.resolve_many(["typescript", "vitest"])
    print(results["typescript"].version)   # "^5.6.3"
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from forge_npm_pkg.config import ForgeSettings
from forge_npm_pkg.fetchers.http import FetchError, JsonFetcher
from forge_npm_pkg.fetchers.models import VersionResolutionResult
from forge_npm_pkg.fetchers.semver import (
    days_between,
    is_stable,
    parse_timestamp,
    sort_descending,
    utcnow,
    version_key,
)

# Age thresholds (days) for the risk warning and the stable fallback.
NEW_MAJOR_DAYS = 30
EARLY_MINOR_DAYS = 14
STABLE_MIN_AGE_DAYS = 30


def _publish_times(document: dict[str, Any]) -> dict[str, Any]:
    """The ``time`` map of a registry document, or ``{}`` when absent or malformed."""
    times = document.get("time")
    return times if isinstance(times, dict) else {}


def _plural_days(days: int) -> str:
    return f"{days} day{'' if days == 1 else 's'} old"


def risk_warning(package: str, version: str, days_old: int) -> str | None:
    """Return a warning for a risky, freshly published *version*, else ``None``."""
    major, minor, _ = version_key(version)

    if minor == 0 and days_old < NEW_MAJOR_DAYS:
        return (
            f"{package}@{version} ({_plural_days(days_old)})\n"
            f"   New major version - may contain breaking changes.\n"
            f"   If issues occur, downgrade: npm install {package}@{major - 1}"
        )

    if minor == 1 and days_old < EARLY_MINOR_DAYS:
        return (
            f"{package}@{version} ({_plural_days(days_old)})\n"
            f"   Recently released - may have early bugs."
        )

    return None


class VersionResolver(JsonFetcher):
    """Resolves the version range to pin for npm packages.

    Args:
        settings: Tool settings; ``registry_url`` and ``fetch_timeout`` are used.
        transport: Optional ``httpx`` transport override.
        now: Clock used for age calculations (defaults to UTC now).
    """

    def __init__(
        self,
        settings: ForgeSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(settings, transport)
        self.registry_url = self.settings.registry_url.rstrip("/")
        self.now = now

    def _package_url(self, package: str, suffix: str = "") -> str:
        # Scoped names keep their "@" but the slash must be encoded.
        encoded = quote(package, safe="@")
        return f"{self.registry_url}/{encoded}{suffix}"

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    async def _latest(self, package: str) -> VersionResolutionResult:
        data = await self._get_json(self._package_url(package, "/latest"))
        version = data.get("version") if isinstance(data, dict) else None
        if not isinstance(version, str) or not version:
            raise FetchError(self._package_url(package, "/latest"), "no version field")

        times = _publish_times(data)
        days_old = days_between(parse_timestamp(times.get(version)), self.now())
        return VersionResolutionResult(
            version=f"^{version}",
            warning=risk_warning(package, version, days_old),
        )

    async def _stable_fallback(self, package: str) -> VersionResolutionResult:
        url = self._package_url(package)
        data = await self._get_json(url)
        if not isinstance(data, dict):
            raise FetchError(url, "unexpected document shape")

        versions = data.get("versions")
        if not isinstance(versions, dict):
            raise FetchError(url, "no versions map")

        stable = sort_descending([v for v in versions if is_stable(v)])
        if not stable:
            raise FetchError(url, "no stable versions found")

        times = _publish_times(data)
        now = self.now()
        for version in stable:
            days_old = days_between(parse_timestamp(times.get(version)), now)
            if days_old >= STABLE_MIN_AGE_DAYS:
                return VersionResolutionResult(
                    version=f"^{version}",
                    used_fallback=True,
                    level="info",
                    warning=(
                        f"Using stable fallback: {package}@{version} "
                        f"({days_old} days old)"
                    ),
                )

        newest = stable[0]
        return VersionResolutionResult(
            version=f"^{newest}",
            used_fallback=True,
            level="info",
            warning=f"Using fallback: {package}@{newest}",
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(self, package: str) -> VersionResolutionResult:
        """Resolve one package through the three tiers.  Never raises."""
        try:
            return await self._latest(package)
        except FetchError:
            return await self._resolve_fallback(package)

    async def _resolve_fallback(self, package: str) -> VersionResolutionResult:
        try:
            return await self._stable_fallback(package)
        except FetchError:
            return VersionResolutionResult(
                version="latest",
                used_fallback=True,
                warning=f'Could not fetch {package} versions, using "latest"',
            )

    async def resolve_many(
        self, packages: Iterable[str]
    ) -> dict[str, VersionResolutionResult]:
        """Resolve several packages concurrently, keyed by package name."""
        names = list(dict.fromkeys(packages))
        results = await asyncio.gather(*(self.resolve(name) for name in names))
        return dict(zip(names, results))
