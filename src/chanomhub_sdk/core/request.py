"""
Request builder helper.
"""
from typing import Any, Dict, Optional, TypedDict

from ..types import HttpMethod
from .cache import CachePolicy

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class RequestOptions(TypedDict, total=False):
    """Options for making a request."""
    method: HttpMethod
    url: str  # Path relative to the API base URL
    headers: Dict[str, str]
    json: Any


class RequestBuilder:
    """Fluent builder for RequestOptions with the SDK's default headers."""

    def __init__(self, url: str = "", method: HttpMethod = "GET"):
        self._options: RequestOptions = {
            "url": url,
            "method": method,
            "headers": dict(DEFAULT_HEADERS),
        }

    def method(self, method: HttpMethod) -> "RequestBuilder":
        self._options["method"] = method
        return self

    def header(self, key: str, value: str) -> "RequestBuilder":
        self._options["headers"][key] = value
        return self

    def headers(self, headers: Optional[Dict[str, str]]) -> "RequestBuilder":
        if headers:
            self._options["headers"].update(headers)
        return self

    def json(self, data: Any) -> "RequestBuilder":
        self._options["json"] = data
        return self

    def cache(self, policy: CachePolicy) -> "RequestBuilder":
        """Advertise the cache policy on the outbound request."""
        return self.header("Cache-Control", policy.header_value)

    def build(self) -> RequestOptions:
        """Get the constructed options."""
        return self._options
