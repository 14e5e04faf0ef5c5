"""Identity provider capability.

The auth repository talks to the identity provider only through
`IdentityProviderClient`, obtained from an `IdentityProviderFactory`.
`SupabaseIdentityProviderFactory` is the real implementation and needs the
optional ``supabase`` distribution; `UnavailableIdentityProviderFactory`
is the explicit "not available" variant.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol

from ..errors import IdentityProviderError, IdentityProviderUnavailableError
from .models import OAuthOptions, OAuthSession, SessionUser

if TYPE_CHECKING:
    from supabase import AsyncClient

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH:identity-provider]"

SUPABASE_MISSING_MESSAGE = (
    "Supabase client not available. Install chanomhub-sdk[oauth] to enable OAuth."
)


class IdentityProviderClient(Protocol):
    """Operations the auth repository needs from an identity provider."""

    async def sign_in_with_oauth(self, provider: str, options: OAuthOptions) -> Optional[str]:
        """Start an OAuth flow.

        Returns:
            The provider authorization URL, or None if none was issued.

        Raises:
            IdentityProviderError: If the provider rejects the request.
        """
        ...

    async def get_session(self) -> Optional[OAuthSession]:
        """Return the session created by the last completed redirect.

        Raises:
            IdentityProviderError: If the session cannot be read.
        """
        ...

    async def sign_out(self) -> None:
        """Clear the identity provider session."""
        ...


class IdentityProviderFactory(Protocol):
    async def create(self, url: str, key: str) -> IdentityProviderClient:
        """Build a client for the given project URL and anon key.

        Raises:
            IdentityProviderUnavailableError: If the client cannot be built.
        """
        ...


class SupabaseIdentityProvider:
    """`IdentityProviderClient` backed by supabase-py's async client."""

    def __init__(self, client: AsyncClient):
        self._client = client

    async def sign_in_with_oauth(self, provider: str, options: OAuthOptions) -> Optional[str]:
        sign_in_options: Dict[str, Any] = {}
        if options.redirect_to:
            sign_in_options["redirect_to"] = options.redirect_to
        if options.scopes:
            sign_in_options["scopes"] = options.scopes
        if options.query_params:
            sign_in_options["query_params"] = dict(options.query_params)

        try:
            response = await self._client.auth.sign_in_with_oauth(
                {"provider": provider, "options": sign_in_options}
            )
        except Exception as e:
            raise IdentityProviderError(f"OAuth sign-in failed ({provider}): {e}") from e
        return getattr(response, "url", None) or None

    async def get_session(self) -> Optional[OAuthSession]:
        try:
            session = await self._client.auth.get_session()
        except Exception as e:
            raise IdentityProviderError(f"Failed to get Supabase session: {e}") from e

        if session is None:
            return None
        user = session.user
        return OAuthSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            user=SessionUser(id=str(user.id), email=user.email) if user else SessionUser(id=""),
        )

    async def sign_out(self) -> None:
        try:
            await self._client.auth.sign_out()
        except Exception as e:
            raise IdentityProviderError(f"Supabase sign-out failed: {e}") from e


class SupabaseIdentityProviderFactory:
    """Creates `SupabaseIdentityProvider` instances via ``acreate_client``."""

    async def create(self, url: str, key: str) -> IdentityProviderClient:
        try:
            from supabase import acreate_client
        except ImportError as e:
            logger.warning(f"{LOG_PREFIX} {SUPABASE_MISSING_MESSAGE}")
            raise IdentityProviderUnavailableError(SUPABASE_MISSING_MESSAGE) from e

        logger.debug(f"{LOG_PREFIX} Creating Supabase client for {url}")
        try:
            client = await acreate_client(url, key)
        except Exception as e:
            raise IdentityProviderUnavailableError(f"Failed to create Supabase client: {e}") from e
        return SupabaseIdentityProvider(client)


class UnavailableIdentityProviderFactory:
    """Factory for environments without an identity provider SDK."""

    def __init__(self, reason: str = "No identity provider is available in this runtime."):
        self._reason = reason

    async def create(self, url: str, key: str) -> IdentityProviderClient:
        raise IdentityProviderUnavailableError(self._reason)
