"""Node.js LTS resolver.

Reads the official distribution index and derives the ``engines`` range and
CI matrix from the LTS lines that are still inside their support window.
Falls back to a static configuration, whole, when anything goes wrong.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from types import MappingProxyType
from typing import Any

import httpx

from forge_npm_pkg.config import ForgeSettings
from forge_npm_pkg.fetchers.http import FetchError, JsonFetcher
from forge_npm_pkg.fetchers.models import NodeVersionConfig
from forge_npm_pkg.fetchers.semver import MAJOR_TAG_RE, utcnow

# End-of-life dates per LTS major.  Majors missing here are assumed active.
NODE_EOL_DATES: MappingProxyType[int, date] = MappingProxyType(
    {
        16: date(2023, 9, 11),
        18: date(2025, 4, 30),
        20: date(2026, 4, 30),
        22: date(2027, 4, 30),
        24: date(2028, 4, 30),
        26: date(2029, 4, 30),
    }
)

FALLBACK_NODE_CONFIG = NodeVersionConfig(
    minimum=20,
    engines=">=20.0.0",
    ci_matrix=[20, 22],
    latest_lts=22,
    used_fallback=True,
)

CI_MATRIX_SIZE = 2


def is_past_eol(major: int, today: date) -> bool:
    """A major is unsupported from the start of its EOL date (UTC)."""
    eol = NODE_EOL_DATES.get(major)
    if eol is None:
        return False
    return today >= eol


def active_lts_majors(releases: list[Any], today: date) -> list[int]:
    """Distinct active LTS majors from a dist index, newest first."""
    majors: set[int] = set()
    for entry in releases:
        if not isinstance(entry, dict) or entry.get("lts") in (False, None):
            continue
        match = MAJOR_TAG_RE.match(str(entry.get("version", "")))
        if not match:
            continue
        major = int(match.group(1))
        if major > 0 and not is_past_eol(major, today):
            majors.add(major)
    return sorted(majors, reverse=True)


def config_from_majors(majors: list[int]) -> NodeVersionConfig:
    """Build the config from active majors sorted newest first."""
    ci_matrix = majors[:CI_MATRIX_SIZE]
    latest = ci_matrix[0]
    minimum = ci_matrix[1] if len(ci_matrix) >= 2 else latest
    return NodeVersionConfig(
        minimum=minimum,
        engines=f">={minimum}.0.0",
        ci_matrix=ci_matrix,
        latest_lts=latest,
    )


class NodeLTSResolver(JsonFetcher):
    """Resolves the supported Node.js LTS matrix."""

    def __init__(
        self,
        settings: ForgeSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(settings, transport)
        self.now = now

    async def resolve(self) -> NodeVersionConfig:
        """Return the live LTS config, or :data:`FALLBACK_NODE_CONFIG`.  Never raises."""
        url = self.settings.node_dist_url
        try:
            releases = await self._get_json(url)
            if not isinstance(releases, list):
                raise FetchError(url, "unexpected document shape")
            majors = active_lts_majors(releases, self.now().date())
            if not majors:
                raise FetchError(url, "no active LTS versions found")
        except FetchError:
            return FALLBACK_NODE_CONFIG
        return config_from_majors(majors)
