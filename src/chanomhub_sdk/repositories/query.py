"""
Helpers for assembling parameterized article queries.

Caller-supplied values never appear in query text; every filter value is
bound to a declared GraphQL variable.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

# Filter key -> GraphQL variable type
FILTER_VARIABLES: Dict[str, str] = {
    "q": "String",
    "tag": "String",
    "platform": "String",
    "category": "String",
    "author": "String",
    "favorited": "Boolean",
    "engine": "String",
    "sequentialCode": "String",
}

PAGING_VARIABLES: Dict[str, str] = {
    "limit": "Int",
    "offset": "Int",
    "status": "ArticleStatus",
}


@dataclass
class ArticleQueryParts:
    """Variable declarations, argument text and variable values."""
    declarations: List[str] = field(default_factory=list)
    filter_arg: str = ""
    variables: Dict[str, Any] = field(default_factory=dict)

    @property
    def signature(self) -> str:
        if not self.declarations:
            return ""
        return "(" + ", ".join(self.declarations) + ")"

    def list_args(self, paging: Mapping[str, Any]) -> str:
        """Arguments for the `articles` field."""
        args = [self.filter_arg] if self.filter_arg else []
        args.extend(f"{name}: ${name}" for name in PAGING_VARIABLES if name in paging)
        return ", ".join(args)

    def count_args(self) -> str:
        """Arguments for the `articlesCount` field, parenthesised or empty."""
        return f"({self.filter_arg})" if self.filter_arg else ""


def build_article_query_parts(
    filter: Optional[Mapping[str, Any]] = None,
    paging: Optional[Mapping[str, Any]] = None,
) -> ArticleQueryParts:
    """
    Bind filter and paging values to variables.

    Empty filter values are skipped; `favorited` is kept whenever it is
    not None so that False still filters.
    """
    parts = ArticleQueryParts()
    filter = filter or {}
    paging = paging or {}

    filter_fields = []
    for key, gql_type in FILTER_VARIABLES.items():
        value = filter.get(key)
        if value is None or (key != "favorited" and value == ""):
            continue
        parts.declarations.append(f"${key}: {gql_type}")
        parts.variables[key] = value
        filter_fields.append(f"{key}: ${key}")

    if filter_fields:
        parts.filter_arg = "filter: { " + ", ".join(filter_fields) + " }"

    for key, gql_type in PAGING_VARIABLES.items():
        if key in paging:
            parts.declarations.append(f"${key}: {gql_type}")
            parts.variables[key] = paging[key]

    return parts


def page_number(offset: int, limit: int) -> int:
    if limit <= 0:
        return 1
    return offset // limit + 1
