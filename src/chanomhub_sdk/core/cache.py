"""
Caching decision for GraphQL requests.
"""
from dataclasses import dataclass
from typing import Optional

from ..config import ClientConfig

NO_STORE = "no-store"


@dataclass(frozen=True)
class CachePolicy:
    """Whether a response may be stored, and for how long."""
    store: bool
    max_age: int = 0

    @property
    def header_value(self) -> str:
        if not self.store:
            return NO_STORE
        return f"max-age={self.max_age}"


NO_STORE_POLICY = CachePolicy(store=False)


def resolve_cache_policy(
    config: ClientConfig,
    cache_seconds: Optional[int] = None,
    no_cache: bool = False,
) -> CachePolicy:
    """
    Decide the cache policy for one GraphQL request.

    Responses to authenticated requests are user specific and are never
    stored. Anonymous requests are stored for `cache_seconds`, falling back
    to the configured default; a duration of zero means no-store.
    """
    if no_cache or config.token_value:
        return NO_STORE_POLICY

    seconds = cache_seconds if cache_seconds is not None else config.default_cache_seconds
    if seconds <= 0:
        return NO_STORE_POLICY
    return CachePolicy(store=True, max_age=seconds)
