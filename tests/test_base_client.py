"""
Tests for BaseClient, the request builder and auth handlers.
"""
import httpx
import pytest
import respx

from chanomhub_sdk.auth.auth_handler import (
    AnonymousAuthHandler,
    BearerAuthHandler,
    create_auth_handler,
    mask_value,
)
from chanomhub_sdk.config import resolve_config
from chanomhub_sdk.core.base_client import BaseClient, _format_body
from chanomhub_sdk.core.cache import CachePolicy
from chanomhub_sdk.core.request import RequestBuilder


def test_build_url_joins_base_and_path():
    client = BaseClient(resolve_config(api_url="https://api.test/"))
    assert client.build_url("/api/user") == "https://api.test/api/user"


@pytest.mark.asyncio
async def test_connect_applies_timeout():
    client = BaseClient(resolve_config(timeout=2.5))
    http = await client.connect()
    assert http.timeout == httpx.Timeout(2.5)
    assert await client.connect() is http
    await client.close()


@pytest.mark.asyncio
async def test_send_injects_bearer_header():
    async with BaseClient(resolve_config(api_url="https://api.test", token="tok")) as client:
        with respx.mock(base_url="https://api.test") as mock:
            route = mock.get("/api/user").respond(200)

            response = await client.send(RequestBuilder("/api/user").build())

            assert response.status_code == 200
            assert route.calls.last.request.headers["Authorization"] == "Bearer tok"


@pytest.mark.asyncio
async def test_send_reraises_transport_errors():
    async with BaseClient(resolve_config(api_url="https://api.test")) as client:
        with respx.mock(base_url="https://api.test") as mock:
            mock.get("/api/user").mock(side_effect=httpx.ConnectError("down"))
            with pytest.raises(httpx.ConnectError):
                await client.send(RequestBuilder("/api/user").build())


def test_request_builder():
    options = (
        RequestBuilder("/api/graphql")
        .method("POST")
        .header("X-Trace", "1")
        .headers({"X-Other": "2"})
        .cache(CachePolicy(store=True, max_age=30))
        .json({"query": "{ ok }"})
        .build()
    )
    assert options["method"] == "POST"
    assert options["url"] == "/api/graphql"
    assert options["json"] == {"query": "{ ok }"}
    assert options["headers"] == {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "X-Trace": "1",
        "X-Other": "2",
        "Cache-Control": "max-age=30",
    }


def test_create_auth_handler():
    bearer = create_auth_handler(resolve_config(token="tok"))
    assert isinstance(bearer, BearerAuthHandler)
    assert bearer.get_header() == {"Authorization": "Bearer tok"}

    anonymous = create_auth_handler(resolve_config())
    assert isinstance(anonymous, AnonymousAuthHandler)
    assert anonymous.get_header() is None


def test_mask_value():
    assert mask_value(None) == "<empty>"
    assert mask_value("short") == "*****"
    assert mask_value("abcdefghijklmnop") == "abcdefghij******"


def test_format_body_safety():
    assert _format_body(None) == "<empty>"
    assert _format_body("hello") == "hello"
    assert _format_body('{"a": 1}') == '{\n  "a": 1\n}'
    assert _format_body(b"1234") == "<binary data: 4 bytes>"

    formatted = _format_body("a" * 6000)
    assert len(formatted) < 6000
    assert "... (truncated)" in formatted
