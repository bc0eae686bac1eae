"""
Cache Service client

Talks to the backend endpoints that wipe cached search results and the activity log.
Every failure is collapsed into CacheClearFailed; the detail only goes to the log.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from constants import ACTIVITY_CLEAR_ENDPOINT, CACHE_CLEAR_ENDPOINT, CACHE_CLEAR_FAILED_MESSAGE
from exceptions import CacheClearFailed

logger = logging.getLogger(__name__)


class CacheServiceClient:
    """Async client for the backend's clear endpoints"""

    def __init__(self, base_url: str, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session with proper timeout."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def clear_cache(self) -> int:
        """
        Clear all cached search results.

        Returns:
            Number of deleted cache entries
        """
        return await self._post_clear(CACHE_CLEAR_ENDPOINT)

    async def clear_activity(self) -> int:
        """Clear the search activity log, same response contract as the cache"""
        return await self._post_clear(ACTIVITY_CLEAR_ENDPOINT)

    async def _post_clear(self, endpoint: str) -> int:
        url = f"{self.base_url}{endpoint}"
        try:
            session = await self._get_session()
            async with session.post(url) as response:
                if not 200 <= response.status < 300:
                    error_text = await response.text()
                    raise CacheClearFailed(
                        CACHE_CLEAR_FAILED_MESSAGE, detail=f"POST {url} returned {response.status}: {error_text}"
                    )
                data = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise CacheClearFailed(CACHE_CLEAR_FAILED_MESSAGE, detail=f"POST {url} failed: {e}")
        except asyncio.TimeoutError:
            raise CacheClearFailed(CACHE_CLEAR_FAILED_MESSAGE, detail=f"POST {url} timed out")
        except ValueError as e:
            raise CacheClearFailed(CACHE_CLEAR_FAILED_MESSAGE, detail=f"POST {url} returned invalid JSON: {e}")

        deleted = data.get("deleted") if isinstance(data, dict) else None
        if isinstance(deleted, bool) or not isinstance(deleted, int) or deleted < 0:
            raise CacheClearFailed(CACHE_CLEAR_FAILED_MESSAGE, detail=f"POST {url} returned no usable 'deleted' count: {data!r}")

        logger.info(f"POST {endpoint} removed {deleted} entries")
        return deleted

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
