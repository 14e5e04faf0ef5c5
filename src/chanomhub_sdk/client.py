"""
High-level FetchClient: GraphQL and REST calls against the Chanomhub API.

Neither method raises for transport or protocol failures. Both return a
result object whose error channel is populated instead, and successful
payloads have already had their image URLs resolved.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from .core.base_client import BaseClient, _format_body
from .core.cache import NO_STORE_POLICY, resolve_cache_policy
from .core.request import RequestBuilder
from .transforms import transform_image_urls_deep
from .types import GraphQLResponse, HttpMethod, RestResponse

logger = logging.getLogger(__name__)

LOG_PREFIX = "[FetchClient]"
GRAPHQL_PATH = "/api/graphql"

# Failures converted into result values at the transport boundary
TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError)


def _http_error_message(response: httpx.Response) -> str:
    return f"HTTP {response.status_code}: {response.reason_phrase}"


class FetchClient(BaseClient):
    """
    HTTP client for the Chanomhub GraphQL endpoint and REST endpoints.
    """

    async def graphql(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        operation_name: Optional[str] = None,
        cache_seconds: Optional[int] = None,
        no_cache: bool = False,
    ) -> GraphQLResponse:
        """Execute a GraphQL operation."""
        body: Dict[str, Any] = {"query": query, "variables": variables or {}}
        if operation_name:
            body["operationName"] = operation_name

        policy = resolve_cache_policy(self.config, cache_seconds, no_cache)
        opts = RequestBuilder(GRAPHQL_PATH, "POST").cache(policy).json(body).build()

        try:
            response = await self.send(opts)

            if not response.is_success:
                logger.error(
                    f"{LOG_PREFIX} GraphQL fetch error: {response.status_code} "
                    f"{_format_body(response.text)}"
                )
                return GraphQLResponse(
                    data=None,
                    errors=[{"message": _http_error_message(response)}],
                    status=response.status_code,
                )

            payload = response.json()
        except TRANSPORT_ERRORS as e:
            message = str(e) or type(e).__name__
            logger.error(f"{LOG_PREFIX} GraphQL fetch exception ({operation_name}): {message}")
            return GraphQLResponse(data=None, errors=[{"message": message}])

        if not isinstance(payload, dict):
            logger.error(f"{LOG_PREFIX} GraphQL response is not an object: {_format_body(payload)}")
            return GraphQLResponse(
                data=None,
                errors=[{"message": "Malformed GraphQL response"}],
                status=response.status_code,
            )

        if payload.get("errors") is not None:
            logger.error(f"{LOG_PREFIX} GraphQL errors ({operation_name}): {payload['errors']}")
            return GraphQLResponse(data=None, errors=payload["errors"], status=response.status_code)

        data = transform_image_urls_deep(payload.get("data"), self.config.cdn_url)
        return GraphQLResponse(data=data, status=response.status_code)

    async def rest(
        self,
        path: str,
        method: HttpMethod = "GET",
        body: Optional[Dict[str, Any]] = None,
    ) -> RestResponse:
        """
        Call a REST endpoint. REST calls are never cached.
        """
        builder = RequestBuilder(path, method).cache(NO_STORE_POLICY)
        if body is not None:
            builder.json(body)

        try:
            response = await self.send(builder.build())

            if not response.is_success:
                logger.error(
                    f"{LOG_PREFIX} REST fetch error: {method} {path} {response.status_code} "
                    f"{_format_body(response.text)}"
                )
                return RestResponse(
                    data=None,
                    error=_http_error_message(response),
                    status=response.status_code,
                )

            # Some endpoints return an empty body
            if response.status_code == 204 or not response.content:
                return RestResponse(data=None, status=response.status_code)

            payload = response.json()
        except TRANSPORT_ERRORS as e:
            message = str(e) or type(e).__name__
            logger.error(f"{LOG_PREFIX} REST fetch exception: {method} {path}: {message}")
            return RestResponse(data=None, error=message)

        data = transform_image_urls_deep(payload, self.config.cdn_url)
        return RestResponse(data=data, status=response.status_code)
