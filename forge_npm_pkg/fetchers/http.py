"""Shared async HTTP plumbing for the version fetchers.

Every fetcher talks JSON over ``httpx.AsyncClient`` with one hard deadline
per request.  Connection errors, timeouts, non-2xx responses and unparsable
bodies are all folded into :class:`FetchError` so callers only need one
``except`` clause per fallback tier.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from forge_npm_pkg.config import ForgeSettings


class FetchError(Exception):
    """A single remote lookup failed; the caller moves to its next tier."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class JsonFetcher:
    """Base class for fetchers that GET JSON documents.

    Args:
        settings: Tool settings (URLs, timeout, token).
        transport: Optional ``httpx`` transport, mainly for tests
            (``httpx.MockTransport``).
    """

    def __init__(
        self,
        settings: ForgeSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or ForgeSettings()
        self.timeout = self.settings.fetch_timeout
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self.settings.user_agent, "Accept": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` bounded by the configured timeout."""
        kwargs: dict[str, Any] = {
            "timeout": httpx.Timeout(self.timeout),
            "headers": self._headers(),
            "follow_redirects": True,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.AsyncClient(**kwargs)

    async def _get_json(self, url: str) -> Any:
        """GET *url* and decode the JSON body.

        Raises:
            FetchError: On any network, status, deadline or decoding failure.
        """
        try:
            async with self._client() as client:
                response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
                response.raise_for_status()
                return response.json()
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {self.timeout}s") from exc
        except httpx.TimeoutException as exc:
            raise FetchError(url, f"timed out after {self.timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            raise FetchError(url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(url, f"request failed: {exc}") from exc
        except ValueError as exc:
            raise FetchError(url, f"invalid JSON: {exc}") from exc
