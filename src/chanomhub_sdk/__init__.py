"""
chanomhub-sdk - async Python client for the Chanomhub API.
"""
from .auth import (
    AuthRepository,
    NativeOAuthConfig,
    NativeOAuthOptions,
    NativeOAuthResult,
    OAuthOptions,
    PkceNativeAuthorizer,
    SupabaseIdentityProviderFactory,
    UnavailableIdentityProviderFactory,
    UnavailableNativeAuthorizer,
)
from .client import FetchClient
from .config import DEFAULT_CONFIG, ClientConfig, resolve_config
from .diagnostics import DiagnosticSink, LoggingDiagnosticSink, NullDiagnosticSink, RecordingDiagnosticSink
from .errors import (
    AuthenticationError,
    AuthorizationError,
    ChanomhubError,
    ConfigurationError,
    IdentityProviderError,
    IdentityProviderUnavailableError,
    MissingClientIdError,
    MissingRedirectUriError,
    NativeAuthorizationError,
    NetworkError,
    NotFoundError,
    OAuthNotConfiguredError,
    RateLimitError,
    ValidationError,
    create_error_from_status,
)
from .fields import DEFAULT_PRESET, FIELD_MAPPINGS, FIELD_PRESETS, build_fields_query
from .repositories import ArticleRepository, FavoritesRepository, SearchRepository, UsersRepository
from .sdk import ChanomhubClient, create_authenticated_client, create_chanomhub_client
from .transforms import resolve_image_url, transform_image_urls_deep
from .types import DiagnosticsEvent, GraphQLResponse, PaginatedResponse, RestResponse

__version__ = "1.0.0"

__all__ = [
    "ChanomhubClient",
    "create_chanomhub_client",
    "create_authenticated_client",
    "FetchClient",
    "ClientConfig",
    "DEFAULT_CONFIG",
    "resolve_config",
    "ArticleRepository",
    "FavoritesRepository",
    "SearchRepository",
    "UsersRepository",
    "AuthRepository",
    "OAuthOptions",
    "NativeOAuthConfig",
    "NativeOAuthOptions",
    "NativeOAuthResult",
    "PkceNativeAuthorizer",
    "SupabaseIdentityProviderFactory",
    "UnavailableIdentityProviderFactory",
    "UnavailableNativeAuthorizer",
    "DiagnosticSink",
    "NullDiagnosticSink",
    "LoggingDiagnosticSink",
    "RecordingDiagnosticSink",
    "DiagnosticsEvent",
    "GraphQLResponse",
    "RestResponse",
    "PaginatedResponse",
    "build_fields_query",
    "DEFAULT_PRESET",
    "FIELD_PRESETS",
    "FIELD_MAPPINGS",
    "resolve_image_url",
    "transform_image_urls_deep",
    "ChanomhubError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ValidationError",
    "NetworkError",
    "RateLimitError",
    "ConfigurationError",
    "OAuthNotConfiguredError",
    "IdentityProviderUnavailableError",
    "IdentityProviderError",
    "MissingClientIdError",
    "MissingRedirectUriError",
    "NativeAuthorizationError",
    "create_error_from_status",
]
