"""Small semver and timestamp helpers shared by the version fetchers."""

from __future__ import annotations

import re
from datetime import datetime, timezone

STABLE_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")
MAJOR_TAG_RE = re.compile(r"^v?(\d+)")

_SECONDS_PER_DAY = 60 * 60 * 24


def is_stable(version: str) -> bool:
    """Return ``True`` for plain ``x.y.z`` versions (no pre-release or build tag)."""
    return bool(STABLE_VERSION_RE.match(version))


def version_key(version: str) -> tuple[int, int, int]:
    """Numeric sort key over the first three components of *version*.

    Missing or non-numeric components count as ``0`` so ``"10.2"`` sorts
    above ``"9.12.3"``.
    """
    parts: list[int] = []
    for piece in version.split(".")[:3]:
        match = re.match(r"\d+", piece)
        parts.append(int(match.group()) if match else 0)
    while len(parts) < 3:
        parts.append(0)
    return parts[0], parts[1], parts[2]


def sort_descending(versions: list[str]) -> list[str]:
    return sorted(versions, key=version_key, reverse=True)


def extract_major(tag: object) -> int | None:
    """Major version of a git tag.

    Examples::

        extract_major("v6.0.1") -> 6
        extract_major("5.2")    -> 5
        extract_major("latest") -> None
    """
    if not isinstance(tag, str):
        return None
    match = MAJOR_TAG_RE.match(tag)
    return int(match.group(1)) if match else None


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 registry timestamp into an aware UTC datetime.

    Anything other than a non-empty string yields ``None``.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_between(published: datetime | None, now: datetime) -> int:
    """Whole days from *published* to *now*; an unknown date counts as today."""
    if published is None:
        return 0
    seconds = (now - published).total_seconds()
    return int(seconds // _SECONDS_PER_DAY)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
