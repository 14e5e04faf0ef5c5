"""
Search repository.
"""
import logging
from typing import Optional, Sequence

from ..client import FetchClient
from ..fields import build_fields_query
from ..types import ArticleField, ArticlePreset, PaginatedResponse
from .query import build_article_query_parts, page_number

logger = logging.getLogger(__name__)

LOG_PREFIX = "[SearchRepository]"


class SearchRepository:
    """Full-text article search."""

    def __init__(self, client: FetchClient):
        self._client = client

    async def articles(
        self,
        query: str,
        tag: Optional[str] = None,
        platform: Optional[str] = None,
        category: Optional[str] = None,
        engine: Optional[str] = None,
        sequential_code: Optional[str] = None,
        author: Optional[str] = None,
        limit: int = 12,
        offset: int = 0,
        preset: ArticlePreset = "standard",
        fields: Optional[Sequence[ArticleField]] = None,
    ) -> PaginatedResponse:
        """Search published articles; an empty page on failure."""
        paging = {"limit": limit, "offset": offset, "status": "PUBLISHED"}
        parts = build_article_query_parts(
            {
                "q": query,
                "tag": tag,
                "platform": platform,
                "category": category,
                "engine": engine,
                "sequentialCode": sequential_code,
                "author": author,
            },
            paging,
        )

        graphql_query = f"""query SearchArticles{parts.signature} {{
  articles({parts.list_args(paging)}) {{
{build_fields_query(preset, fields)}
  }}
  articlesCount{parts.count_args()}
}}"""

        result = await self._client.graphql(
            graphql_query, parts.variables, operation_name="SearchArticles"
        )
        if not result.ok or not result.data:
            logger.error(f"{LOG_PREFIX} Failed to search articles: {result.errors}")
            return PaginatedResponse(items=[], total=0, page=1, page_size=limit)

        return PaginatedResponse(
            items=result.data.get("articles") or [],
            total=result.data.get("articlesCount") or 0,
            page=page_number(offset, limit),
            page_size=limit,
        )
