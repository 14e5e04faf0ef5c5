"""
Client facade wiring the transport, repositories and auth together.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from .auth import AuthRepository
from .auth.identity_provider import IdentityProviderFactory
from .auth.native import NativeAuthorizer
from .auth.repository import RedirectHandler
from .client import FetchClient
from .config import ClientConfig, resolve_config
from .diagnostics import DiagnosticSink
from .repositories import ArticleRepository, FavoritesRepository, SearchRepository, UsersRepository
from .types import GraphQLResponse, HttpMethod, RestResponse

logger = logging.getLogger(__name__)
LOG_PREFIX = "[Chanomhub]"

ConfigInput = Union[ClientConfig, Mapping[str, Any], None]


class ChanomhubClient:
    """
    One SDK instance: a FetchClient plus the repositories built on it.

    Use as an async context manager, or call `close()` when done, to
    release the underlying httpx client.
    """

    def __init__(
        self,
        config: ClientConfig,
        httpx_client: Optional[httpx.AsyncClient] = None,
        diagnostics: Optional[DiagnosticSink] = None,
        identity_provider_factory: Optional[IdentityProviderFactory] = None,
        native_authorizer: Optional[NativeAuthorizer] = None,
        redirect_handler: Optional[RedirectHandler] = None,
    ):
        self.config = config
        self.http = FetchClient(config, httpx_client=httpx_client, diagnostics=diagnostics)

        self.articles = ArticleRepository(self.http)
        self.favorites = FavoritesRepository(self.http)
        self.users = UsersRepository(self.http)
        self.search = SearchRepository(self.http)
        self.auth = AuthRepository(
            self.http,
            config,
            identity_provider_factory=identity_provider_factory,
            native_authorizer=native_authorizer,
            redirect_handler=redirect_handler,
        )

    async def graphql(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        operation_name: Optional[str] = None,
        cache_seconds: Optional[int] = None,
        no_cache: bool = False,
    ) -> GraphQLResponse:
        """Raw GraphQL call for queries the repositories do not cover."""
        return await self.http.graphql(
            query,
            variables,
            operation_name=operation_name,
            cache_seconds=cache_seconds,
            no_cache=no_cache,
        )

    async def rest(
        self, path: str, method: HttpMethod = "GET", body: Optional[Dict[str, Any]] = None
    ) -> RestResponse:
        return await self.http.rest(path, method=method, body=body)

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "ChanomhubClient":
        await self.http.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def create_chanomhub_client(
    config: ConfigInput = None,
    *,
    httpx_client: Optional[httpx.AsyncClient] = None,
    diagnostics: Optional[DiagnosticSink] = None,
    identity_provider_factory: Optional[IdentityProviderFactory] = None,
    native_authorizer: Optional[NativeAuthorizer] = None,
    redirect_handler: Optional[RedirectHandler] = None,
    **overrides: Any,
) -> ChanomhubClient:
    """
    Create an SDK instance.

    Args:
        config: A `ClientConfig` or a mapping of overrides; merged over the defaults.
        httpx_client: Externally managed client; not closed by the SDK.
        diagnostics: Event sink for transport and sign-in events.
        identity_provider_factory: Identity provider used by the web OAuth flow.
        native_authorizer: Authorizer used by the native OAuth flow.
        redirect_handler: Receives authorization URLs for browser redirects.
        **overrides: Individual config fields, e.g. ``token="..."``.

    Example:
        async with create_chanomhub_client(token=token) as sdk:
            articles = await sdk.articles.get_all(limit=10)
    """
    resolved = resolve_config(config, **overrides)
    logger.debug(
        f"{LOG_PREFIX} Creating client: api_url={resolved.api_url} "
        f"authenticated={bool(resolved.token_value)} oauth={resolved.is_oauth_enabled}"
    )
    return ChanomhubClient(
        resolved,
        httpx_client=httpx_client,
        diagnostics=diagnostics,
        identity_provider_factory=identity_provider_factory,
        native_authorizer=native_authorizer,
        redirect_handler=redirect_handler,
    )


def create_authenticated_client(token: str, config: ConfigInput = None, **kwargs: Any) -> ChanomhubClient:
    """
    SDK instance for a logged-in user. Responses are never cached.
    """
    kwargs.setdefault("default_cache_seconds", 0)
    return create_chanomhub_client(config, token=token, **kwargs)
