"""
Auth header handlers for the transport layer.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..config import ClientConfig

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH]"


def mask_value(val: Optional[str]) -> str:
    """Mask a sensitive value for logging, showing the first 10 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 10:
        return "*" * len(val)
    return val[:10] + "*" * (len(val) - 10)


class AuthHandler(ABC):
    """Auth handler interface."""

    @abstractmethod
    def get_header(self) -> Optional[Dict[str, str]]:
        """Headers to attach to an outgoing request, or None."""
        ...


class BearerAuthHandler(AuthHandler):
    """Attaches `Authorization: Bearer <token>`."""

    def __init__(self, token: Optional[str]):
        self._token = token

    def get_header(self) -> Optional[Dict[str, str]]:
        if not self._token:
            return None
        header = {"Authorization": f"Bearer {self._token}"}
        logger.debug(
            f"{LOG_PREFIX} BearerAuthHandler.get_header: token={mask_value(self._token)}"
        )
        return header


class AnonymousAuthHandler(AuthHandler):
    """No credentials; requests go out unauthenticated."""

    def get_header(self) -> Optional[Dict[str, str]]:
        return None


def create_auth_handler(config: ClientConfig) -> AuthHandler:
    """Pick the handler for a config: bearer when a token is set."""
    token = config.token_value
    if token:
        logger.debug(f"{LOG_PREFIX} create_auth_handler: bearer token={mask_value(token)}")
        return BearerAuthHandler(token)
    logger.debug(f"{LOG_PREFIX} create_auth_handler: anonymous")
    return AnonymousAuthHandler()
