"""Native (app) OAuth authorization.

`NativeAuthorizer` is the capability the auth repository uses for the
native sign-in path. `PkceNativeAuthorizer` runs the authorization-code
flow with PKCE over httpx; the step that shows the authorization page to
the user is injected, since it depends on the host app (system browser,
embedded web view, loopback server...). `UnavailableNativeAuthorizer` is the
explicit "not available" variant.
"""

import base64
import hashlib
import logging
import secrets
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Protocol, Tuple
from urllib.parse import parse_qs, urlencode, urlsplit

import httpx

from ..errors import ConfigurationError, NativeAuthorizationError
from .models import AuthorizationRequest, NativeOAuthConfig, NativeOAuthResult, ProviderEndpoints

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH:native]"

DISCOVERY_PATH = "/.well-known/openid-configuration"

OAUTH_PROVIDERS: Dict[str, ProviderEndpoints] = {
    "google": ProviderEndpoints(
        issuer="https://accounts.google.com",
        default_scopes=["openid", "email", "profile"],
    ),
    "discord": ProviderEndpoints(
        authorization_endpoint="https://discord.com/api/oauth2/authorize",
        token_endpoint="https://discord.com/api/oauth2/token",
        default_scopes=["identify", "email"],
    ),
    "github": ProviderEndpoints(
        authorization_endpoint="https://github.com/login/oauth/authorize",
        token_endpoint="https://github.com/login/oauth/access_token",
        default_scopes=["read:user", "user:email"],
    ),
    "facebook": ProviderEndpoints(
        authorization_endpoint="https://www.facebook.com/v18.0/dialog/oauth",
        token_endpoint="https://graph.facebook.com/v18.0/oauth/access_token",
        default_scopes=["email", "public_profile"],
    ),
}

PresentAuthorizationUrl = Callable[[str], Awaitable[str]]


def get_client_id_for_provider(provider: str, native_config: NativeOAuthConfig) -> str:
    """Client id configured for `provider`, or "" when there is none."""
    if provider == "google":
        return native_config.google_ios_client_id or native_config.google_client_id or ""
    return getattr(native_config, f"{provider}_client_id", None) or ""


@dataclass(frozen=True)
class PkceCodes:
    code_verifier: str
    code_challenge: str


def generate_pkce() -> PkceCodes:
    """New S256 verifier/challenge pair."""
    verifier = secrets.token_urlsafe(64)
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    challenge = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    return PkceCodes(code_verifier=verifier, code_challenge=challenge)


class NativeAuthorizer(Protocol):
    async def authorize(self, request: AuthorizationRequest) -> NativeOAuthResult:
        """Run the provider flow for `request` and return its tokens.

        Raises:
            NativeAuthorizationError: If the flow fails or is cancelled.
            ConfigurationError: If native authorization is not available.
        """
        ...


class UnavailableNativeAuthorizer:
    def __init__(self, reason: str = "Native OAuth is not available. Provide a native_authorizer."):
        self._reason = reason

    async def authorize(self, request: AuthorizationRequest) -> NativeOAuthResult:
        raise ConfigurationError(self._reason, "NATIVE_AUTH_UNAVAILABLE")


class PkceNativeAuthorizer:
    """Authorization code flow with PKCE.

    Args:
        present_authorization_url: Coroutine that shows the authorization URL
            to the user and returns the URL the provider redirected back to.
        httpx_client: Optional client for discovery and token calls. When
            omitted, a client is opened per authorization.
        timeout: Timeout in seconds for the owned client.
    """

    def __init__(
        self,
        present_authorization_url: PresentAuthorizationUrl,
        httpx_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self._present = present_authorization_url
        self._client = httpx_client
        self._timeout = timeout

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        kwargs: Dict[str, Any] = {}
        if self._timeout is not None:
            kwargs["timeout"] = httpx.Timeout(self._timeout)
        async with httpx.AsyncClient(**kwargs) as client:
            yield client

    async def authorize(self, request: AuthorizationRequest) -> NativeOAuthResult:
        async with self._http() as http:
            try:
                authorization_endpoint, token_endpoint = await self._resolve_endpoints(http, request)
            except httpx.HTTPError as e:
                raise NativeAuthorizationError(
                    f"OpenID discovery failed: {e}", request.provider
                ) from e

            state = secrets.token_urlsafe(16)
            pkce = generate_pkce() if request.use_pkce else None
            params = {
                "response_type": "code",
                "client_id": request.client_id,
                "redirect_uri": request.redirect_uri,
                "scope": " ".join(request.scopes),
                "state": state,
            }
            if pkce:
                params["code_challenge"] = pkce.code_challenge
                params["code_challenge_method"] = "S256"

            url = f"{authorization_endpoint}?{urlencode(params)}"
            logger.debug(f"{LOG_PREFIX} Presenting authorization URL for {request.provider}")
            callback_url = await self._present(url)
            code = self._read_callback(callback_url, state, request.provider)

            form = {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": request.redirect_uri,
                "client_id": request.client_id,
            }
            if pkce:
                form["code_verifier"] = pkce.code_verifier

            try:
                payload = await self._exchange_code(http, token_endpoint, form, request.provider)
            except httpx.HTTPError as e:
                raise NativeAuthorizationError(
                    f"Token request failed: {e}", request.provider
                ) from e

        logger.info(f"{LOG_PREFIX} Authorization completed for {request.provider}")
        return _result_from_token_payload(payload, request.scopes, request.provider)

    async def _resolve_endpoints(
        self, http: httpx.AsyncClient, request: AuthorizationRequest
    ) -> Tuple[str, str]:
        endpoints = request.endpoints
        if endpoints.authorization_endpoint and endpoints.token_endpoint:
            return endpoints.authorization_endpoint, endpoints.token_endpoint
        if not endpoints.issuer:
            raise NativeAuthorizationError(
                f"No issuer or endpoints configured for {request.provider}", request.provider
            )

        discovery_url = endpoints.issuer.rstrip("/") + DISCOVERY_PATH
        logger.debug(f"{LOG_PREFIX} Fetching {discovery_url}")
        response = await http.get(discovery_url, headers={"Accept": "application/json"})
        response.raise_for_status()
        try:
            document = response.json()
        except ValueError as e:
            raise NativeAuthorizationError(
                f"Discovery document for {endpoints.issuer} is not valid JSON", request.provider
            ) from e
        if not isinstance(document, dict):
            raise NativeAuthorizationError(
                f"Discovery document for {endpoints.issuer} is not a JSON object", request.provider
            )

        authorization_endpoint = document.get("authorization_endpoint")
        token_endpoint = document.get("token_endpoint")
        if not authorization_endpoint or not token_endpoint:
            raise NativeAuthorizationError(
                f"Discovery document for {endpoints.issuer} has no authorization or token endpoint",
                request.provider,
            )
        return authorization_endpoint, token_endpoint

    @staticmethod
    def _read_callback(callback_url: str, expected_state: str, provider: str) -> str:
        query = parse_qs(urlsplit(callback_url).query)

        def first(key: str) -> Optional[str]:
            values = query.get(key)
            return values[0] if values else None

        error = first("error")
        if error:
            description = first("error_description")
            message = f"{error}: {description}" if description else error
            raise NativeAuthorizationError(f"Authorization denied ({provider}): {message}", provider)
        if first("state") != expected_state:
            raise NativeAuthorizationError("OAuth state mismatch", provider)

        code = first("code")
        if not code:
            raise NativeAuthorizationError("Authorization response has no code", provider)
        return code

    @staticmethod
    async def _exchange_code(
        http: httpx.AsyncClient, token_endpoint: str, form: Dict[str, str], provider: str
    ) -> Dict[str, Any]:
        response = await http.post(
            token_endpoint, data=form, headers={"Accept": "application/json"}
        )
        if response.is_error:
            raise NativeAuthorizationError(
                f"Token endpoint returned HTTP {response.status_code}: {response.reason_phrase}",
                provider,
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise NativeAuthorizationError("Token endpoint returned invalid JSON", provider) from e

        if not isinstance(payload, dict):
            raise NativeAuthorizationError("Token endpoint returned invalid JSON", provider)
        if payload.get("error"):
            raise NativeAuthorizationError(
                f"Token request rejected: {payload.get('error_description') or payload['error']}",
                provider,
            )
        return payload


def _result_from_token_payload(
    payload: Dict[str, Any], requested_scopes, provider: str
) -> NativeOAuthResult:
    scope = payload.get("scope")
    # github separates granted scopes with commas
    scopes = scope.replace(",", " ").split() if isinstance(scope, str) else list(requested_scopes)

    expires_at = None
    if payload.get("expires_in") is not None:
        try:
            expires_in = int(payload["expires_in"])
        except (TypeError, ValueError) as e:
            raise NativeAuthorizationError(
                f"Token endpoint returned invalid expires_in: {payload['expires_in']!r}", provider
            ) from e
        expiry = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        expires_at = expiry.isoformat()

    return NativeOAuthResult(
        access_token=payload.get("access_token") or "",
        id_token=payload.get("id_token"),
        refresh_token=payload.get("refresh_token"),
        access_token_expiration_date=expires_at,
        token_type=payload.get("token_type"),
        scopes=scopes,
    )
