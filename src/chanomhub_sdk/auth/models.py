"""Data models for OAuth sign-in.

These dataclasses describe the inputs and outcomes of the identity
provider, the native authorization flow and the sign-in state machine.
Backend responses (login, refresh) stay plain dicts; see `types`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional

OAuthProvider = Literal["google", "discord", "github", "facebook"]


class SignInState(str, Enum):
    """States of a single sign-in attempt."""
    IDLE = "idle"
    PROVIDER_REDIRECT_ISSUED = "provider_redirect_issued"
    CALLBACK_RECEIVED = "callback_received"
    BACKEND_TOKEN_EXCHANGED = "backend_token_exchanged"
    FAILED = "failed"


@dataclass(frozen=True)
class OAuthOptions:
    """Options for the redirect-based sign-in.

    Attributes:
        redirect_to: URL the provider sends the user back to.
        scopes: Extra scopes, space separated.
        skip_browser_redirect: Return the authorization URL instead of
            handing it to the repository's redirect handler.
        query_params: Extra query parameters for the authorization URL.
    """

    redirect_to: Optional[str] = None
    scopes: Optional[str] = None
    skip_browser_redirect: bool = False
    query_params: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class OAuthSession:
    """Session issued by the identity provider after the redirect.

    Never stored by the SDK; it is handed to the caller or exchanged for
    backend tokens within one call.
    """

    access_token: str
    user: SessionUser
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


@dataclass(frozen=True)
class NativeOAuthConfig:
    """Per-provider client identifiers for native sign-in.

    Attributes:
        redirect_uri: Custom scheme redirect, e.g. ``com.yourapp://oauth``.
        google_ios_client_id: Used instead of ``google_client_id`` when set.
        scopes: Scopes used when the sign-in call does not pass any.
    """

    redirect_uri: str = ""
    google_client_id: Optional[str] = None
    google_ios_client_id: Optional[str] = None
    discord_client_id: Optional[str] = None
    github_client_id: Optional[str] = None
    facebook_client_id: Optional[str] = None
    scopes: Optional[List[str]] = None


@dataclass(frozen=True)
class NativeOAuthOptions:
    scopes: Optional[List[str]] = None
    use_pkce: bool = True


@dataclass(frozen=True)
class NativeOAuthResult:
    """Tokens returned by the native authorization flow.

    Attributes:
        access_token: Provider access token.
        id_token: OpenID Connect identity token (Google).
        refresh_token: Provider refresh token.
        access_token_expiration_date: ISO 8601 expiry, when known.
        token_type: Usually "Bearer".
        scopes: Scopes granted.
    """

    access_token: str = ""
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    access_token_expiration_date: Optional[str] = None
    token_type: Optional[str] = None
    scopes: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NativeOAuthResult":
        """Accept either snake_case or camelCase keys."""
        def pick(*keys: str) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        scopes = pick("scopes", "scope") or []
        if isinstance(scopes, str):
            scopes = scopes.split()

        return cls(
            access_token=pick("access_token", "accessToken") or "",
            id_token=pick("id_token", "idToken"),
            refresh_token=pick("refresh_token", "refreshToken"),
            access_token_expiration_date=pick(
                "access_token_expiration_date", "accessTokenExpirationDate"
            ),
            token_type=pick("token_type", "tokenType"),
            scopes=list(scopes),
        )


@dataclass(frozen=True)
class ProviderEndpoints:
    """Where to authorize for a provider.

    OpenID Connect providers set ``issuer``; the others set an explicit
    authorization/token endpoint pair.
    """

    default_scopes: List[str]
    issuer: Optional[str] = None
    authorization_endpoint: Optional[str] = None
    token_endpoint: Optional[str] = None


@dataclass(frozen=True)
class AuthorizationRequest:
    """Everything a native authorizer needs for one attempt."""

    provider: str
    client_id: str
    redirect_uri: str
    scopes: List[str]
    endpoints: ProviderEndpoints
    use_pkce: bool = True
