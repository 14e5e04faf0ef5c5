"""
Typed errors for chanomhub-sdk.

Configuration errors are raised immediately. Transport failures are
returned as GraphQLResponse/RestResponse values and only become one of
these exceptions when the caller asks for it (`raise_for_errors`).
"""
from typing import Dict, List, Optional


class ChanomhubError(Exception):
    """Base exception for all SDK errors."""

    def __init__(self, message: str, status_code: int = 500, code: str = "UNKNOWN_ERROR"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class AuthenticationError(ChanomhubError):
    """401 - missing or invalid token."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401, "AUTHENTICATION_ERROR")


class AuthorizationError(ChanomhubError):
    """403 - insufficient permissions."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, 403, "AUTHORIZATION_ERROR")


class NotFoundError(ChanomhubError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, 404, "NOT_FOUND")


class ValidationError(ChanomhubError):
    """400 - invalid request data."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message, 400, "VALIDATION_ERROR")
        self.errors = errors


class NetworkError(ChanomhubError):
    """Connection failures, timeouts, unreadable responses."""

    def __init__(self, message: str = "Network request failed"):
        super().__init__(message, 0, "NETWORK_ERROR")


class RateLimitError(ChanomhubError):
    def __init__(self, message: str = "Rate limit exceeded", retry_after: Optional[int] = None):
        super().__init__(message, 429, "RATE_LIMIT")
        self.retry_after = retry_after


class ConfigurationError(ChanomhubError):
    """Programmer error: the SDK was called without the setup it needs."""

    def __init__(self, message: str, code: str = "CONFIGURATION_ERROR"):
        super().__init__(message, 0, code)


class OAuthNotConfiguredError(ConfigurationError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "Supabase is not configured. Please provide supabase_url and "
            "supabase_anon_key in config.",
            "OAUTH_NOT_CONFIGURED",
        )


class IdentityProviderUnavailableError(ConfigurationError):
    def __init__(self, message: str = "Identity provider client is not available"):
        super().__init__(message, "IDENTITY_PROVIDER_UNAVAILABLE")


class MissingClientIdError(ConfigurationError):
    def __init__(self, provider: str):
        msg = (
            f"Missing client ID for {provider}. "
            f"Please provide {provider}_client_id in native_config."
        )
        super().__init__(msg, "MISSING_CLIENT_ID")
        self.provider = provider


class MissingRedirectUriError(ConfigurationError):
    def __init__(self):
        super().__init__("Missing redirect_uri in native_config.", "MISSING_REDIRECT_URI")


class IdentityProviderError(ChanomhubError):
    """The identity provider rejected or failed a call."""

    def __init__(self, message: str):
        super().__init__(message, 0, "IDENTITY_PROVIDER_ERROR")


class NativeAuthorizationError(ChanomhubError):
    """The native authorization flow did not yield tokens."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message, 0, "NATIVE_AUTHORIZATION_ERROR")
        self.provider = provider


def create_error_from_status(status: int, message: str) -> ChanomhubError:
    """Create the error class matching an HTTP status code."""
    if status == 400:
        return ValidationError(message)
    if status == 401:
        return AuthenticationError(message)
    if status == 403:
        return AuthorizationError(message)
    if status == 404:
        return NotFoundError(message)
    if status == 429:
        return RateLimitError(message)
    return ChanomhubError(message, status)
