"""
Users repository.
"""
import logging
from typing import Optional
from urllib.parse import quote

from ..client import FetchClient
from ..types import HttpMethod, Profile, User

logger = logging.getLogger(__name__)

LOG_PREFIX = "[UsersRepository]"


class UsersRepository:
    """Current user and public profiles."""

    def __init__(self, client: FetchClient):
        self._client = client

    async def get_current_user(self) -> Optional[User]:
        """The logged-in user, or None when not authenticated."""
        result = await self._client.rest("/api/user")
        if not result.ok:
            logger.error(f"{LOG_PREFIX} Failed to get current user: {result.error}")
            return None
        return (result.data or {}).get("user")

    async def get_profile(self, username: str) -> Optional[Profile]:
        return await self._profile_call(f"/api/profiles/{quote(username, safe='')}", "GET", "get profile")

    async def follow(self, username: str) -> Optional[Profile]:
        return await self._profile_call(
            f"/api/profiles/{quote(username, safe='')}/follow", "POST", "follow user"
        )

    async def unfollow(self, username: str) -> Optional[Profile]:
        return await self._profile_call(
            f"/api/profiles/{quote(username, safe='')}/follow", "DELETE", "unfollow user"
        )

    async def _profile_call(self, path: str, method: HttpMethod, action: str) -> Optional[Profile]:
        result = await self._client.rest(path, method=method)
        if not result.ok:
            logger.error(f"{LOG_PREFIX} Failed to {action}: {result.error}")
            return None
        return (result.data or {}).get("profile")
