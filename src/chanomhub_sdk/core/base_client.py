"""
Core HTTP client implementation based on httpx.
"""
import json
import logging
import time
from typing import Any, Optional

import httpx

from ..auth.auth_handler import AuthHandler, create_auth_handler
from ..config import ClientConfig
from ..diagnostics import DiagnosticSink, NullDiagnosticSink
from ..types import DiagnosticsEvent
from .request import RequestOptions

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[FetchClient]"
MAX_LOGGED_BODY = 5000


def _format_body(body: Any) -> str:
    """
    Format a body for logging; guards against binary data and huge payloads.
    """
    if body is None:
        return "<empty>"
    if isinstance(body, (bytes, bytearray)):
        return f"<binary data: {len(body)} bytes>"
    if isinstance(body, str):
        try:
            if body.strip().startswith(("{", "[")):
                return json.dumps(json.loads(body), indent=2)
        except json.JSONDecodeError:
            pass
        if len(body) > MAX_LOGGED_BODY:
            return body[:MAX_LOGGED_BODY] + "... (truncated)"
        return body
    if isinstance(body, dict):
        return json.dumps(body, indent=2)
    return str(body)


class BaseClient:
    """
    Base HTTP client wrapping httpx.AsyncClient.

    Attaches auth headers, resolves paths against the API base URL and
    records diagnostics for every request.
    """
    def __init__(
        self,
        config: ClientConfig,
        httpx_client: Optional[httpx.AsyncClient] = None,
        diagnostics: Optional[DiagnosticSink] = None,
    ):
        self._config = config
        self._client: Optional[httpx.AsyncClient] = httpx_client
        self._auth_handler: AuthHandler = create_auth_handler(config)
        self._diagnostics: DiagnosticSink = diagnostics or NullDiagnosticSink()

        # We only close clients we created ourselves
        self._own_client = self._client is None

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def diagnostics(self) -> DiagnosticSink:
        return self._diagnostics

    async def connect(self) -> httpx.AsyncClient:
        """Initialize the client if needed."""
        if self._client is None:
            kwargs = {"follow_redirects": True}
            if self._config.timeout is not None:
                kwargs["timeout"] = httpx.Timeout(self._config.timeout)
            self._client = httpx.AsyncClient(**kwargs)
            self._own_client = True
        return self._client

    async def close(self) -> None:
        """Close the client if we own it."""
        if self._own_client and self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def build_url(self, path: str) -> str:
        return f"{self._config.api_url.rstrip('/')}{path}"

    def record(self, name: str, **fields: Any) -> None:
        self._diagnostics.record(DiagnosticsEvent(name=name, timestamp=time.time(), **fields))

    async def send(self, options: RequestOptions) -> httpx.Response:
        """
        Execute a request and return the raw httpx response.

        httpx errors are logged, recorded and re-raised; callers decide how
        to surface them.
        """
        client = await self.connect()

        method = options.get("method", "GET")
        url = self.build_url(options.get("url", ""))
        headers = dict(options.get("headers", {}))

        auth_headers = self._auth_handler.get_header()
        if auth_headers:
            headers.update(auth_headers)

        logger.debug(f"{LOG_PREFIX} Request: {method} {url}")
        self.record("request:start", method=method, url=url)
        start = time.perf_counter()

        try:
            response = await client.request(
                method=method,
                url=url,
                headers=headers,
                json=options.get("json"),
            )
        except httpx.HTTPError as e:
            duration = time.perf_counter() - start
            logger.error(f"{LOG_PREFIX} Request failed: {method} {url}: {e!r}")
            self.record(
                "request:error",
                method=method,
                url=url,
                duration=duration,
                error=str(e) or type(e).__name__,
            )
            raise

        duration = time.perf_counter() - start
        logger.debug(
            f"{LOG_PREFIX} Response: {method} {url} -> {response.status_code} "
            f"({duration * 1000:.1f}ms)"
        )
        self.record(
            "request:end",
            method=method,
            url=url,
            status=response.status_code,
            duration=duration,
        )
        return response
