"""
Transport internals: base httpx client, request builder and cache policy.
"""
from .base_client import BaseClient
from .cache import NO_STORE_POLICY, CachePolicy, resolve_cache_policy
from .request import RequestBuilder, RequestOptions

__all__ = [
    "BaseClient",
    "CachePolicy",
    "NO_STORE_POLICY",
    "resolve_cache_policy",
    "RequestBuilder",
    "RequestOptions",
]
