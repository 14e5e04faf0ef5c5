"""
Tests for FetchClient (GraphQL and REST transport).
"""
import json

import httpx
import pytest
import respx

from chanomhub_sdk.client import FetchClient
from chanomhub_sdk.config import resolve_config
from chanomhub_sdk.diagnostics import RecordingDiagnosticSink
from chanomhub_sdk.errors import NetworkError, NotFoundError

API = "https://api.test"
CDN = "https://cdn.test"


def make_client(**overrides):
    config = resolve_config(api_url=API, cdn_url=CDN, **overrides)
    return FetchClient(config, diagnostics=RecordingDiagnosticSink())


@pytest.mark.asyncio
async def test_client_lifecycle():
    async with make_client() as client:
        assert client._client is not None
        assert not client._client.is_closed
    assert client._client is None


@pytest.mark.asyncio
async def test_injected_httpx_client_is_not_closed():
    http = httpx.AsyncClient()
    client = FetchClient(resolve_config(api_url=API), httpx_client=http)
    await client.close()
    assert not http.is_closed
    await http.aclose()


@pytest.mark.asyncio
async def test_graphql_anonymous_request_is_cacheable():
    async with make_client(default_cache_seconds=300) as client:
        with respx.mock(base_url=API) as mock:
            route = mock.post("/api/graphql").respond(200, json={"data": {"ok": True}})

            result = await client.graphql("query Q { ok }", {"a": 1}, operation_name="Q")

            assert result.ok is True
            assert result.data == {"ok": True}
            request = route.calls.last.request
            assert request.headers["Cache-Control"] == "max-age=300"
            assert request.headers["Content-Type"] == "application/json"
            assert "Authorization" not in request.headers
            assert json.loads(request.content) == {
                "query": "query Q { ok }",
                "variables": {"a": 1},
                "operationName": "Q",
            }


@pytest.mark.asyncio
async def test_graphql_per_call_cache_seconds():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            route = mock.post("/api/graphql").respond(200, json={"data": {}})
            await client.graphql("{ ok }", cache_seconds=120)
            assert route.calls.last.request.headers["Cache-Control"] == "max-age=120"
            assert "operationName" not in json.loads(route.calls.last.request.content)


@pytest.mark.asyncio
async def test_graphql_with_token_sends_bearer_and_no_store():
    async with make_client(token="user-token") as client:
        with respx.mock(base_url=API) as mock:
            route = mock.post("/api/graphql").respond(200, json={"data": {}})

            await client.graphql("{ ok }", cache_seconds=120)

            request = route.calls.last.request
            assert request.headers["Authorization"] == "Bearer user-token"
            assert request.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_graphql_no_cache_flag():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            route = mock.post("/api/graphql").respond(200, json={"data": {}})
            await client.graphql("{ ok }", no_cache=True)
            assert route.calls.last.request.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_graphql_http_error_status():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.post("/api/graphql").respond(500, text="boom")

            result = await client.graphql("{ ok }")

            assert result.data is None
            assert result.status == 500
            assert len(result.errors) == 1
            assert "HTTP 500" in result.errors[0]["message"]


@pytest.mark.asyncio
async def test_graphql_errors_passed_through():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.post("/api/graphql").respond(200, json={"errors": [{"message": "X"}]})

            result = await client.graphql("{ ok }")

            assert result.data is None
            assert result.errors == [{"message": "X"}]


@pytest.mark.asyncio
async def test_graphql_network_error_is_returned_not_raised():
    client = make_client()
    with respx.mock(base_url=API) as mock:
        mock.post("/api/graphql").mock(side_effect=httpx.ConnectError("connection refused"))

        result = await client.graphql("{ ok }")

    assert result.data is None
    assert result.status is None
    assert result.errors == [{"message": "connection refused"}]
    assert client.diagnostics.names() == ["request:start", "request:error"]
    with pytest.raises(NetworkError):
        result.raise_for_errors()
    await client.close()


@pytest.mark.asyncio
async def test_graphql_invalid_json_is_returned_not_raised():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.post("/api/graphql").respond(200, text="<html>")
            result = await client.graphql("{ ok }")
            assert result.data is None
            assert result.errors


@pytest.mark.asyncio
async def test_graphql_resolves_image_urls():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.post("/api/graphql").respond(
                200, json={"data": {"article": {"mainImage": "a.jpg", "images": [{"url": "b.jpg"}]}}}
            )

            result = await client.graphql("{ article { mainImage } }")

            assert result.data["article"]["mainImage"] == "https://cdn.test/a.jpg"
            assert result.data["article"]["images"][0]["url"] == "https://cdn.test/b.jpg"


@pytest.mark.asyncio
async def test_graphql_records_diagnostics():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.post("/api/graphql").respond(200, json={"data": {}})
            await client.graphql("{ ok }")

        events = client.diagnostics.events
        assert [e.name for e in events] == ["request:start", "request:end"]
        assert events[1].status == 200
        assert events[1].url == "https://api.test/api/graphql"
        assert events[1].duration is not None


@pytest.mark.asyncio
async def test_rest_is_never_cached():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            route = mock.post("/api/users/refresh-token").respond(200, json={"token": "t"})

            result = await client.rest("/api/users/refresh-token", method="POST", body={"refreshToken": "r"})

            assert result.ok is True
            assert result.data == {"token": "t"}
            request = route.calls.last.request
            assert request.headers["Cache-Control"] == "no-store"
            assert json.loads(request.content) == {"refreshToken": "r"}


@pytest.mark.asyncio
async def test_rest_no_content():
    async with make_client(token="t") as client:
        with respx.mock(base_url=API) as mock:
            mock.delete("/api/articles/x/favorite").respond(204)

            result = await client.rest("/api/articles/x/favorite", method="DELETE")

            assert result.data is None
            assert result.error is None
            assert result.status == 204


@pytest.mark.asyncio
async def test_rest_http_error():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.get("/api/user").respond(404)

            result = await client.rest("/api/user")

            assert result.ok is False
            assert result.error == "HTTP 404: Not Found"
            with pytest.raises(NotFoundError):
                result.raise_for_error()


@pytest.mark.asyncio
async def test_rest_resolves_image_urls():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.get("/api/user").respond(200, json={"user": {"image": "me.png"}})
            result = await client.rest("/api/user")
            assert result.data == {"user": {"image": "https://cdn.test/me.png"}}


@pytest.mark.asyncio
async def test_rest_network_error():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.get("/api/user").mock(side_effect=httpx.ReadTimeout("timed out"))
            result = await client.rest("/api/user")
            assert result.data is None
            assert result.error == "timed out"
            assert result.status is None


@pytest.mark.asyncio
async def test_graphql_empty_errors_array_is_a_failure():
    async with make_client() as client:
        with respx.mock(base_url=API) as mock:
            mock.post("/api/graphql").respond(200, json={"data": {"x": 1}, "errors": []})

            result = await client.graphql("{ x }")

            assert result.data is None
            assert result.errors == []
            assert not result.ok
