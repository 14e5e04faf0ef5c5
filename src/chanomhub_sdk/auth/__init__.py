"""
OAuth sign-in: identity provider (web) and native authorization flows.
"""
from .auth_handler import AnonymousAuthHandler, AuthHandler, BearerAuthHandler, create_auth_handler
from .identity_provider import (
    IdentityProviderClient,
    IdentityProviderFactory,
    SupabaseIdentityProvider,
    SupabaseIdentityProviderFactory,
    UnavailableIdentityProviderFactory,
)
from .models import (
    AuthorizationRequest,
    NativeOAuthConfig,
    NativeOAuthOptions,
    NativeOAuthResult,
    OAuthOptions,
    OAuthProvider,
    OAuthSession,
    ProviderEndpoints,
    SessionUser,
    SignInState,
)
from .native import (
    OAUTH_PROVIDERS,
    NativeAuthorizer,
    PkceNativeAuthorizer,
    UnavailableNativeAuthorizer,
    generate_pkce,
    get_client_id_for_provider,
)
from .repository import AuthRepository

__all__ = [
    "AuthHandler",
    "BearerAuthHandler",
    "AnonymousAuthHandler",
    "create_auth_handler",
    "IdentityProviderClient",
    "IdentityProviderFactory",
    "SupabaseIdentityProvider",
    "SupabaseIdentityProviderFactory",
    "UnavailableIdentityProviderFactory",
    "AuthorizationRequest",
    "NativeOAuthConfig",
    "NativeOAuthOptions",
    "NativeOAuthResult",
    "OAuthOptions",
    "OAuthProvider",
    "OAuthSession",
    "ProviderEndpoints",
    "SessionUser",
    "SignInState",
    "OAUTH_PROVIDERS",
    "NativeAuthorizer",
    "PkceNativeAuthorizer",
    "UnavailableNativeAuthorizer",
    "generate_pkce",
    "get_client_id_for_provider",
    "AuthRepository",
]
