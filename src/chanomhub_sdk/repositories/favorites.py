"""
Favorites repository.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from ..client import FetchClient

logger = logging.getLogger(__name__)

LOG_PREFIX = "[FavoritesRepository]"


def _favorite_path(slug: str) -> str:
    return f"/api/articles/{quote(slug, safe='')}/favorite"


class FavoritesRepository:
    """Add and remove favorites; both need an authenticated client."""

    def __init__(self, client: FetchClient):
        self._client = client

    async def add(self, slug: str) -> Optional[Dict[str, Any]]:
        """Favorite an article. Returns `{"article": ...}` or None."""
        result = await self._client.rest(_favorite_path(slug), method="POST")
        if not result.ok:
            logger.error(f"{LOG_PREFIX} Failed to add favorite: {result.error}")
            return None
        return result.data

    async def remove(self, slug: str) -> Optional[Dict[str, Any]]:
        result = await self._client.rest(_favorite_path(slug), method="DELETE")
        if not result.ok:
            logger.error(f"{LOG_PREFIX} Failed to remove favorite: {result.error}")
            return None
        return result.data
