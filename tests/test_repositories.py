"""
Tests for the article, search, favorites and users repositories.
"""
import json

import httpx
import pytest
import respx

from chanomhub_sdk.client import FetchClient
from chanomhub_sdk.config import resolve_config
from chanomhub_sdk.repositories import (
    ArticleRepository,
    FavoritesRepository,
    SearchRepository,
    UsersRepository,
)
from chanomhub_sdk.repositories.favorites import _favorite_path
from chanomhub_sdk.repositories.query import build_article_query_parts, page_number

API = "https://api.test"


@pytest.fixture
def client():
    return FetchClient(resolve_config(api_url=API, cdn_url="https://cdn.test"))


def sent_body(route, index=-1):
    return json.loads(route.calls[index].request.content)


def test_query_parts_bind_every_value_to_a_variable():
    parts = build_article_query_parts(
        {"q": "elf", "tag": "RPG", "platform": "", "favorited": False},
        {"limit": 5, "offset": 0},
    )
    assert parts.signature == "($q: String, $tag: String, $favorited: Boolean, $limit: Int, $offset: Int)"
    assert parts.filter_arg == "filter: { q: $q, tag: $tag, favorited: $favorited }"
    assert parts.variables == {"q": "elf", "tag": "RPG", "favorited": False, "limit": 5, "offset": 0}
    assert parts.list_args({"limit": 5, "offset": 0}) == (
        "filter: { q: $q, tag: $tag, favorited: $favorited }, limit: $limit, offset: $offset"
    )
    assert parts.count_args() == "(filter: { q: $q, tag: $tag, favorited: $favorited })"


def test_query_parts_without_filter():
    parts = build_article_query_parts(None, None)
    assert parts.signature == ""
    assert parts.count_args() == ""
    assert parts.variables == {}


def test_page_number():
    assert page_number(0, 12) == 1
    assert page_number(24, 12) == 3
    assert page_number(5, 0) == 1


@pytest.mark.asyncio
async def test_get_all_uses_variables(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(
            200, json={"data": {"articles": [{"id": "1", "mainImage": "a.jpg"}]}}
        )

        articles = await repo.get_all(limit=10, preset="minimal")

        body = sent_body(route)
        assert body["operationName"] == "GetArticles"
        assert body["variables"] == {"limit": 10, "offset": 0, "status": "PUBLISHED"}
        assert "$limit: Int" in body["query"]
        assert "articles(limit: $limit, offset: $offset, status: $status)" in body["query"]
        assert "description" not in body["query"]
        assert articles == [{"id": "1", "mainImage": "https://cdn.test/a.jpg"}]
    await client.close()


@pytest.mark.asyncio
async def test_filter_values_never_appear_in_query_text(client):
    repo = ArticleRepository(client)
    hostile = 'x" }) { id } mutation { deleteAll(where: "'
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(200, json={"data": {"articles": []}})

        await repo.get_all(filter={"tag": hostile, "author": "someone"})

        body = sent_body(route)
        assert hostile not in body["query"]
        assert "someone" not in body["query"]
        assert body["variables"]["tag"] == hostile
        assert body["variables"]["author"] == "someone"
        assert "filter: { tag: $tag, author: $author }" in body["query"]
    await client.close()


@pytest.mark.asyncio
async def test_get_all_failure_returns_empty_list(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        mock.post("/api/graphql").respond(500)
        assert await repo.get_all() == []
    await client.close()


@pytest.mark.asyncio
async def test_get_all_paginated(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(
            200, json={"data": {"articles": [{"id": "13"}], "articlesCount": 30}}
        )

        page = await repo.get_all_paginated(limit=12, offset=12, filter={"platform": "Windows"})

        assert page.items == [{"id": "13"}]
        assert page.total == 30
        assert page.page == 2
        assert page.page_size == 12
        body = sent_body(route)
        assert "articlesCount(filter: { platform: $platform })" in body["query"]
        assert body["variables"]["platform"] == "Windows"
    await client.close()


@pytest.mark.asyncio
async def test_get_all_paginated_failure(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        mock.post("/api/graphql").respond(200, json={"errors": [{"message": "bad"}]})
        page = await repo.get_all_paginated(limit=5)
        assert page.items == []
        assert page.total == 0
        assert page.page == 1
        assert page.page_size == 5
    await client.close()


@pytest.mark.asyncio
async def test_get_by_tag(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(200, json={"data": {"articles": []}})

        await repo.get_by_tag("RPG")

        body = sent_body(route)
        assert body["operationName"] == "GetArticlesByTag"
        assert body["variables"] == {"tag": "RPG", "limit": 50, "status": "PUBLISHED"}
        assert "RPG" not in body["query"]
    await client.close()


@pytest.mark.asyncio
async def test_get_by_platform_and_category(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(200, json={"data": {"articles": []}})

        await repo.get_by_platform("Android", limit=5)
        await repo.get_by_category("Visual Novel")

        assert sent_body(route, 0)["variables"] == {"platform": "Android", "limit": 5, "status": "PUBLISHED"}
        assert sent_body(route, 1)["operationName"] == "GetArticlesByCategory"
        assert sent_body(route, 1)["variables"]["category"] == "Visual Novel"
    await client.close()


@pytest.mark.asyncio
async def test_get_by_slug(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(
            200, json={"data": {"article": {"id": "7", "slug": "my-game", "body": "text"}}}
        )

        article = await repo.get_by_slug("my-game", language="th")

        assert article["slug"] == "my-game"
        body = sent_body(route)
        assert body["variables"] == {"slug": "my-game", "language": "th"}
        assert "my-game" not in body["query"]
        assert "body" in body["query"].split("\n")
    await client.close()


@pytest.mark.asyncio
async def test_get_by_slug_missing(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        mock.post("/api/graphql").respond(200, json={"data": {"article": None}})
        assert await repo.get_by_slug("nope") is None
    await client.close()


@pytest.mark.asyncio
async def test_get_with_downloads(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").mock(
            side_effect=[
                httpx.Response(200, json={"data": {"article": {"id": "7", "slug": "my-game"}}}),
                httpx.Response(
                    200,
                    json={
                        "data": {
                            "article": {"id": "7", "slug": "my-game"},
                            "downloads": [{"id": "d1", "url": "https://dl.test/1"}],
                            "officialDownloadSources": [{"id": "s1", "name": "Steam"}],
                        }
                    },
                ),
            ]
        )

        result = await repo.get_with_downloads("my-game")

        second = sent_body(route, 1)
        assert second["operationName"] == "GetArticleWithDownloads"
        assert second["variables"]["downloadsArticleId"] == 7
        assert "$downloadsArticleId: Int!" in second["query"]
        assert result.downloads == [{"id": "d1", "url": "https://dl.test/1"}]
        assert result.article["downloads"] == result.downloads
        assert result.article["officialDownloadSources"] == [{"id": "s1", "name": "Steam"}]
    await client.close()


@pytest.mark.asyncio
async def test_get_with_downloads_unknown_article(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(200, json={"data": {"article": None}})
        result = await repo.get_with_downloads("nope")
        assert result.article is None
        assert result.downloads is None
        assert route.call_count == 1
    await client.close()


@pytest.mark.asyncio
async def test_search_articles(client):
    repo = SearchRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(
            200, json={"data": {"articles": [{"id": "1"}], "articlesCount": 1}}
        )

        page = await repo.articles("elf", tag="RPG", sequential_code="CH-1", offset=0, limit=20)

        body = sent_body(route)
        assert body["operationName"] == "SearchArticles"
        assert body["variables"] == {
            "q": "elf",
            "tag": "RPG",
            "sequentialCode": "CH-1",
            "limit": 20,
            "offset": 0,
            "status": "PUBLISHED",
        }
        assert "elf" not in body["query"]
        assert "$platform" not in body["query"]
        assert page.total == 1
        assert page.page == 1
    await client.close()


def test_favorite_path_encodes_slug():
    assert _favorite_path("a/b c") == "/api/articles/a%2Fb%20c/favorite"


@pytest.mark.asyncio
async def test_favorites_add_and_remove(client):
    repo = FavoritesRepository(client)
    with respx.mock(base_url=API) as mock:
        add = mock.post("/api/articles/my-game/favorite").respond(
            200, json={"article": {"slug": "my-game", "favorited": True}}
        )
        remove = mock.delete("/api/articles/my-game/favorite").respond(500)

        assert await repo.add("my-game") == {"article": {"slug": "my-game", "favorited": True}}
        assert await repo.remove("my-game") is None
        assert add.called and remove.called
    await client.close()


@pytest.mark.asyncio
async def test_users_current_user(client):
    repo = UsersRepository(client)
    with respx.mock(base_url=API) as mock:
        mock.get("/api/user").respond(200, json={"user": {"id": 1, "username": "neo"}})
        assert await repo.get_current_user() == {"id": 1, "username": "neo"}
    await client.close()


@pytest.mark.asyncio
async def test_users_current_user_unauthenticated(client):
    repo = UsersRepository(client)
    with respx.mock(base_url=API) as mock:
        mock.get("/api/user").respond(401)
        assert await repo.get_current_user() is None
    await client.close()


@pytest.mark.asyncio
async def test_users_profiles(client):
    repo = UsersRepository(client)
    with respx.mock(base_url=API) as mock:
        mock.get("/api/profiles/neo").respond(200, json={"profile": {"username": "neo", "following": False}})
        follow = mock.post("/api/profiles/neo/follow").respond(
            200, json={"profile": {"username": "neo", "following": True}}
        )
        mock.delete("/api/profiles/neo/follow").respond(404)

        assert (await repo.get_profile("neo"))["following"] is False
        assert (await repo.follow("neo"))["following"] is True
        assert await repo.unfollow("neo") is None
        assert follow.call_count == 1
    await client.close()


@pytest.mark.asyncio
async def test_get_with_downloads_non_numeric_id(client):
    repo = ArticleRepository(client)
    with respx.mock(base_url=API) as mock:
        route = mock.post("/api/graphql").respond(
            200, json={"data": {"article": {"id": "abc", "slug": "my-game"}}}
        )
        result = await repo.get_with_downloads("my-game")
        assert result.article == {"id": "abc", "slug": "my-game"}
        assert result.downloads is None
        assert route.call_count == 1
    await client.close()
