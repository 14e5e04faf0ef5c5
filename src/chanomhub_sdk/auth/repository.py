"""
OAuth sign-in and backend token exchange.

Web flow: `sign_in_with_provider` asks the identity provider for an
authorization URL, the user completes the redirect, then `handle_callback`
reads the provider session and exchanges it for backend tokens.

Native flow: `sign_in_with_provider_native` runs the injected
`NativeAuthorizer` and exchanges the resulting provider token.

Configuration problems raise `ConfigurationError` subclasses. Backend and
network failures return None and are logged.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union

from ..config import ClientConfig
from ..diagnostics import DiagnosticSink
from ..errors import (
    ConfigurationError,
    IdentityProviderError,
    IdentityProviderUnavailableError,
    MissingClientIdError,
    MissingRedirectUriError,
    NativeAuthorizationError,
    OAuthNotConfiguredError,
)
from ..types import DiagnosticsEvent, LoginResponse, RefreshResponse
from .auth_handler import mask_value
from .identity_provider import (
    IdentityProviderClient,
    IdentityProviderFactory,
    SupabaseIdentityProviderFactory,
)
from .models import (
    AuthorizationRequest,
    NativeOAuthConfig,
    NativeOAuthOptions,
    NativeOAuthResult,
    OAuthOptions,
    OAuthSession,
    SignInState,
)
from .native import (
    OAUTH_PROVIDERS,
    NativeAuthorizer,
    UnavailableNativeAuthorizer,
    get_client_id_for_provider,
)

if TYPE_CHECKING:
    from ..client import FetchClient

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH]"

LOGIN_SUPABASE_PATH = "/api/users/login-supabase"
LOGIN_OAUTH_PATH = "/api/users/login-oauth"
REFRESH_TOKEN_PATH = "/api/users/refresh-token"

RedirectHandler = Callable[[str], Any]


class _IdentityProviderCell:
    """Lazily built identity provider client, created at most once.

    A failed construction is kept too, so later calls fail the same way
    without asking the factory again.
    """

    def __init__(self, factory: IdentityProviderFactory, config: ClientConfig):
        self._factory = factory
        self._config = config
        self._lock = asyncio.Lock()
        self._resolved = False
        self._client: Optional[IdentityProviderClient] = None
        self._error: Optional[ConfigurationError] = None

    async def get(self) -> IdentityProviderClient:
        if not self._resolved:
            async with self._lock:
                if not self._resolved:
                    await self._build()
        if self._client is None:
            raise self._error
        return self._client

    async def _build(self) -> None:
        try:
            if not self._config.is_oauth_enabled:
                raise OAuthNotConfiguredError()
            key = self._config.supabase_anon_key.get_secret_value()
            self._client = await self._factory.create(self._config.supabase_url, key)
        except ConfigurationError as e:
            logger.warning(f"{LOG_PREFIX} Identity provider unavailable: {e.message}")
            self._error = e
        except Exception as e:
            logger.warning(f"{LOG_PREFIX} Identity provider construction failed: {e!r}")
            self._error = IdentityProviderUnavailableError(
                f"Identity provider client could not be created: {e}"
            )
            self._error.__cause__ = e
        self._resolved = True


class AuthRepository:
    """OAuth operations for one SDK instance.

    Args:
        client: Transport used for the backend token endpoints.
        config: Resolved configuration; supplies the identity provider URL and key.
        identity_provider_factory: Builds the identity provider client on first use.
        native_authorizer: Runs the native authorization flow.
        redirect_handler: Called with the authorization URL when a web sign-in
            does not skip the browser redirect (e.g. ``webbrowser.open``).
        diagnostics: Sink for sign-in state events. Defaults to the client's sink.
    """

    def __init__(
        self,
        client: FetchClient,
        config: Optional[ClientConfig] = None,
        identity_provider_factory: Optional[IdentityProviderFactory] = None,
        native_authorizer: Optional[NativeAuthorizer] = None,
        redirect_handler: Optional[RedirectHandler] = None,
        diagnostics: Optional[DiagnosticSink] = None,
    ):
        self._client = client
        self._config = config or client.config
        self._identity = _IdentityProviderCell(
            identity_provider_factory or SupabaseIdentityProviderFactory(), self._config
        )
        self._native_authorizer = native_authorizer or UnavailableNativeAuthorizer()
        self._redirect_handler = redirect_handler
        self._diagnostics = diagnostics or client.diagnostics

    def is_oauth_enabled(self) -> bool:
        """True when both identity provider URL and key are configured."""
        return self._config.is_oauth_enabled

    def _transition(self, state: SignInState, provider: Optional[str], error: Optional[str] = None) -> None:
        details = {"state": state.value}
        if provider:
            details["provider"] = provider
        self._diagnostics.record(
            DiagnosticsEvent(
                name=f"auth:{state.value}",
                timestamp=time.time(),
                error=error,
                details=details,
            )
        )

    def _fail(self, provider: Optional[str], error: Exception) -> None:
        self._transition(SignInState.FAILED, provider, str(error) or type(error).__name__)

    # Web flow

    async def sign_in_with_provider(
        self, provider: str, options: Optional[OAuthOptions] = None
    ) -> Optional[str]:
        """
        Start the identity provider sign-in.

        Returns the authorization URL when ``options.skip_browser_redirect``
        is set; otherwise hands the URL to the redirect handler and returns None.

        Raises:
            OAuthNotConfiguredError: OAuth coordinates missing from config.
            IdentityProviderUnavailableError: No identity provider client can be built.
            IdentityProviderError: The provider rejected the request.
        """
        options = options or OAuthOptions()
        self._transition(SignInState.IDLE, provider)

        try:
            identity = await self._identity.get()
            url = await identity.sign_in_with_oauth(provider, options)
        except (ConfigurationError, IdentityProviderError) as e:
            logger.error(f"{LOG_PREFIX} OAuth sign-in error ({provider}): {e}")
            self._fail(provider, e)
            raise

        self._transition(SignInState.PROVIDER_REDIRECT_ISSUED, provider)
        if options.skip_browser_redirect:
            return url

        if url:
            if self._redirect_handler is None:
                logger.warning(
                    f"{LOG_PREFIX} No redirect handler configured; authorization URL dropped. "
                    f"Use skip_browser_redirect=True or get_oauth_url()."
                )
            else:
                self._redirect_handler(url)
        return None

    async def sign_in_with_google(self, options: Optional[OAuthOptions] = None) -> Optional[str]:
        return await self.sign_in_with_provider("google", options)

    async def get_oauth_url(
        self, provider: str, options: Optional[OAuthOptions] = None
    ) -> Optional[str]:
        """Authorization URL for manual redirect handling (desktop apps, CLIs)."""
        options = replace(options or OAuthOptions(), skip_browser_redirect=True)
        return await self.sign_in_with_provider(provider, options)

    async def handle_callback(self) -> Optional[LoginResponse]:
        """
        Exchange the identity provider session for backend tokens.

        Call after the provider redirected back. Returns None when no
        session exists or the backend exchange fails.
        """
        identity = await self._identity.get()

        try:
            session = await identity.get_session()
        except IdentityProviderError as e:
            logger.error(f"{LOG_PREFIX} {e}")
            self._fail(None, e)
            return None

        if session is None:
            logger.error(
                f"{LOG_PREFIX} No Supabase session found. User may not have completed OAuth flow."
            )
            self._transition(SignInState.FAILED, None, "session not established")
            return None

        self._transition(SignInState.CALLBACK_RECEIVED, None)
        logger.debug(f"{LOG_PREFIX} Exchanging session token {mask_value(session.access_token)}")

        result = await self._client.rest(
            LOGIN_SUPABASE_PATH, method="POST", body={"accessToken": session.access_token}
        )
        if not result.ok:
            logger.error(f"{LOG_PREFIX} Failed to exchange token with backend: {result.error}")
            self._transition(SignInState.FAILED, None, result.error)
            return None

        self._transition(SignInState.BACKEND_TOKEN_EXCHANGED, None)
        return result.data

    async def get_session(self) -> Optional[OAuthSession]:
        """Current identity provider session, or None."""
        if not self.is_oauth_enabled():
            return None
        try:
            identity = await self._identity.get()
            return await identity.get_session()
        except (ConfigurationError, IdentityProviderError) as e:
            logger.error(f"{LOG_PREFIX} Failed to get Supabase session: {e}")
            return None

    async def sign_out(self) -> None:
        """Clear the identity provider session. Backend tokens belong to the caller."""
        if not self.is_oauth_enabled():
            return
        try:
            identity = await self._identity.get()
            await identity.sign_out()
        except (ConfigurationError, IdentityProviderError) as e:
            logger.error(f"{LOG_PREFIX} Supabase sign-out error: {e}")

    async def refresh_token(self, refresh_token: str) -> Optional[RefreshResponse]:
        """New backend tokens, or None if the refresh failed for any reason."""
        result = await self._client.rest(
            REFRESH_TOKEN_PATH, method="POST", body={"refreshToken": refresh_token}
        )
        if not result.ok:
            logger.error(f"{LOG_PREFIX} Failed to refresh token: {result.error}")
            return None
        return result.data

    # Native flow

    async def exchange_oauth_token(
        self, oauth_result: Union[NativeOAuthResult, Mapping[str, Any]]
    ) -> Optional[LoginResponse]:
        """
        Exchange a provider token for backend tokens.

        The identity token is preferred over the access token when both are
        present and the exchange is tagged ``google``; otherwise ``oauth``.
        Returns None without calling the backend when there is no token.
        """
        if not isinstance(oauth_result, NativeOAuthResult):
            oauth_result = NativeOAuthResult.from_dict(oauth_result)

        token = oauth_result.id_token or oauth_result.access_token
        if not token:
            logger.error(f"{LOG_PREFIX} No token available to exchange with backend")
            return None

        provider_tag = "google" if oauth_result.id_token else "oauth"
        logger.debug(f"{LOG_PREFIX} Exchanging {provider_tag} token {mask_value(token)}")

        result = await self._client.rest(
            LOGIN_OAUTH_PATH,
            method="POST",
            body={"accessToken": token, "provider": provider_tag},
        )
        if not result.ok:
            logger.error(f"{LOG_PREFIX} Failed to exchange OAuth token with backend: {result.error}")
            self._transition(SignInState.FAILED, provider_tag, result.error)
            return None

        self._transition(SignInState.BACKEND_TOKEN_EXCHANGED, provider_tag)
        return result.data

    async def sign_in_with_provider_native(
        self,
        provider: str,
        native_config: NativeOAuthConfig,
        options: Optional[NativeOAuthOptions] = None,
    ) -> Optional[LoginResponse]:
        """
        Sign in through the native authorizer, then exchange with the backend.

        Raises:
            MissingClientIdError: No client id configured for `provider`.
            MissingRedirectUriError: ``native_config.redirect_uri`` is empty.
            NativeAuthorizationError: The authorization flow failed.
        """
        options = options or NativeOAuthOptions()

        if provider not in OAUTH_PROVIDERS:
            raise ConfigurationError(f"Unsupported OAuth provider: {provider}", "UNSUPPORTED_PROVIDER")

        client_id = get_client_id_for_provider(provider, native_config)
        if not client_id:
            raise MissingClientIdError(provider)
        if not native_config.redirect_uri:
            raise MissingRedirectUriError()

        endpoints = OAUTH_PROVIDERS[provider]
        request = AuthorizationRequest(
            provider=provider,
            client_id=client_id,
            redirect_uri=native_config.redirect_uri,
            scopes=list(options.scopes or native_config.scopes or endpoints.default_scopes),
            endpoints=endpoints,
            use_pkce=options.use_pkce,
        )

        self._transition(SignInState.IDLE, provider)
        try:
            result = await self._native_authorizer.authorize(request)
        except (ConfigurationError, NativeAuthorizationError) as e:
            logger.error(f"{LOG_PREFIX} Native OAuth error ({provider}): {e}")
            self._fail(provider, e)
            raise

        self._transition(SignInState.CALLBACK_RECEIVED, provider)
        return await self.exchange_oauth_token(result)

    async def sign_in_with_google_native(
        self, native_config: NativeOAuthConfig, options: Optional[NativeOAuthOptions] = None
    ) -> Optional[LoginResponse]:
        return await self.sign_in_with_provider_native("google", native_config, options)
