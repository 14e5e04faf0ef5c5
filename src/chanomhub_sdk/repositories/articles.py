"""
Article repository.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..client import FetchClient
from ..fields import build_fields_query
from ..types import (
    ArticleField,
    ArticleFilter,
    ArticlePreset,
    ArticleStatus,
    ArticleWithDownloads,
    PaginatedResponse,
)
from .query import build_article_query_parts, page_number

logger = logging.getLogger(__name__)

LOG_PREFIX = "[ArticleRepository]"
DEFAULT_LIMIT = 12
DEFAULT_LOOKUP_LIMIT = 50
DEFAULT_STATUS: ArticleStatus = "PUBLISHED"

DOWNLOADS_SELECTION = """downloads(articleId: $downloadsArticleId) {
  id
  name
  url
  isActive
  vipOnly
}
officialDownloadSources(articleId: $downloadsArticleId) {
  id
  name
  url
  status
}"""


class ArticleRepository:
    """Read access to articles through the GraphQL endpoint."""

    def __init__(self, client: FetchClient):
        self._client = client

    async def get_all(
        self,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        status: ArticleStatus = DEFAULT_STATUS,
        filter: Optional[ArticleFilter] = None,
        preset: Optional[ArticlePreset] = None,
        fields: Optional[Sequence[ArticleField]] = None,
    ) -> List[Dict[str, Any]]:
        """Get a list of articles; empty on failure."""
        return await self._fetch_list(
            "GetArticles",
            filter=filter,
            paging={"limit": limit, "offset": offset, "status": status},
            fields_query=build_fields_query(preset, fields),
        )

    async def get_all_paginated(
        self,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        status: ArticleStatus = DEFAULT_STATUS,
        filter: Optional[ArticleFilter] = None,
        preset: Optional[ArticlePreset] = None,
        fields: Optional[Sequence[ArticleField]] = None,
    ) -> PaginatedResponse:
        """Get a page of articles together with the total count."""
        paging = {"limit": limit, "offset": offset, "status": status}
        parts = build_article_query_parts(filter, paging)
        query = f"""query GetArticlesPaginated{parts.signature} {{
  articles({parts.list_args(paging)}) {{
{build_fields_query(preset, fields)}
  }}
  articlesCount{parts.count_args()}
}}"""

        result = await self._client.graphql(
            query, parts.variables, operation_name="GetArticlesPaginated"
        )
        if not result.ok or not result.data:
            logger.error(f"{LOG_PREFIX} Failed to fetch paginated articles: {result.errors}")
            return PaginatedResponse(items=[], total=0, page=1, page_size=limit)

        return PaginatedResponse(
            items=result.data.get("articles") or [],
            total=result.data.get("articlesCount") or 0,
            page=page_number(offset, limit),
            page_size=limit,
        )

    async def get_by_tag(self, tag: str, limit: int = DEFAULT_LOOKUP_LIMIT) -> List[Dict[str, Any]]:
        return await self._lookup("GetArticlesByTag", {"tag": tag}, limit)

    async def get_by_platform(
        self, platform: str, limit: int = DEFAULT_LOOKUP_LIMIT
    ) -> List[Dict[str, Any]]:
        return await self._lookup("GetArticlesByPlatform", {"platform": platform}, limit)

    async def get_by_category(
        self, category: str, limit: int = DEFAULT_LOOKUP_LIMIT
    ) -> List[Dict[str, Any]]:
        return await self._lookup("GetArticlesByCategory", {"category": category}, limit)

    async def get_by_slug(self, slug: str, language: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Get a single article with every field; None when missing."""
        query = f"""query GetArticleBySlug($slug: String!, $language: String) {{
  article(slug: $slug, language: $language) {{
{build_fields_query("full")}
  }}
}}"""
        result = await self._client.graphql(
            query, {"slug": slug, "language": language}, operation_name="GetArticleBySlug"
        )
        if not result.ok or not result.data:
            logger.error(f"{LOG_PREFIX} Failed to fetch article by slug: {result.errors}")
            return None
        return result.data.get("article") or None

    async def get_with_downloads(
        self, slug: str, language: Optional[str] = None
    ) -> ArticleWithDownloads:
        """
        Get an article plus its download links.

        Resolves the article first to learn its numeric id, then fetches
        downloads and official sources and folds them into the article.
        """
        article = await self.get_by_slug(slug, language)
        if not article:
            return ArticleWithDownloads(article=None, downloads=None)

        try:
            article_id = int(article["id"])
        except (KeyError, TypeError, ValueError):
            logger.error(f"{LOG_PREFIX} Article {slug!r} has no numeric id: {article.get('id')!r}")
            return ArticleWithDownloads(article=article, downloads=None)

        query = f"""query GetArticleWithDownloads($slug: String!, $language: String, $downloadsArticleId: Int!) {{
  article(slug: $slug, language: $language) {{
{build_fields_query("full")}
  }}
{DOWNLOADS_SELECTION}
}}"""
        variables = {
            "slug": slug,
            "language": language,
            "downloadsArticleId": article_id,
        }
        result = await self._client.graphql(
            query, variables, operation_name="GetArticleWithDownloads"
        )
        if not result.ok or not result.data:
            logger.error(f"{LOG_PREFIX} Failed to fetch article with downloads: {result.errors}")
            return ArticleWithDownloads(article=article, downloads=None)

        downloads = result.data.get("downloads")
        merged = result.data.get("article")
        if merged:
            merged = {
                **merged,
                "downloads": downloads or [],
                "officialDownloadSources": result.data.get("officialDownloadSources") or [],
            }

        return ArticleWithDownloads(article=merged or article, downloads=downloads or None)

    async def _lookup(self, operation_name: str, filter: ArticleFilter, limit: int) -> List[Dict[str, Any]]:
        return await self._fetch_list(
            operation_name,
            filter=filter,
            paging={"limit": limit, "status": DEFAULT_STATUS},
            fields_query=build_fields_query(),
        )

    async def _fetch_list(
        self,
        operation_name: str,
        filter: Optional[ArticleFilter],
        paging: Dict[str, Any],
        fields_query: str,
    ) -> List[Dict[str, Any]]:
        parts = build_article_query_parts(filter, paging)
        query = f"""query {operation_name}{parts.signature} {{
  articles({parts.list_args(paging)}) {{
{fields_query}
  }}
}}"""

        result = await self._client.graphql(query, parts.variables, operation_name=operation_name)
        if not result.ok or not result.data:
            logger.error(f"{LOG_PREFIX} {operation_name} failed: {result.errors}")
            return []
        return result.data.get("articles") or []
