"""
HTTP Provider Base

aiohttp plumbing shared by the JSON-over-HTTP market data adapters.
Transport problems are translated into provider errors here so the
adapters only deal with payload shape.
"""

import logging
from typing import Any, Optional, TypeVar

import aiohttp

from app.services.base import MalformedResponseError, NetworkError, RateLimitError
from app.services.data_ingestion.interface import MarketDataProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_HEADERS = {
    "Accept": "application/json",
    # Yahoo rejects requests without a browser-like agent
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) StockCast/0.1",
}


class HttpMarketDataProvider(MarketDataProvider[T]):
    """Provider that fetches JSON over a lazily opened aiohttp session."""

    def __init__(self):
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=DEFAULT_HEADERS)
        return self._session

    async def _get_json(self, url: str, params: Optional[dict] = None) -> Any:
        """GET a JSON document, raising ProviderError subclasses on failure."""
        session = await self._ensure_session()

        try:
            async with session.get(url, params=params) as resp:
                if resp.status == 429:
                    raise RateLimitError(self.name, "HTTP 429 Too Many Requests")
                if resp.status != 200:
                    raise NetworkError(
                        self.name,
                        f"HTTP {resp.status}",
                        {"url": url, "status": resp.status},
                    )
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError(self.name, f"Invalid JSON: {e}") from e
        except aiohttp.ClientError as e:
            raise NetworkError(self.name, str(e) or type(e).__name__) from e

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug(f"{self.name}: HTTP session closed")
        self._session = None
