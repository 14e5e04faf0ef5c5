"""
Core type definitions for chanomhub-sdk.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, TypedDict

# HTTP Methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Field preset levels for article queries
# - minimal: id, title, slug, mainImage (cards/thumbnails)
# - standard: common fields for list views (default)
# - full: everything, including body content
ArticlePreset = Literal["minimal", "standard", "full"]

ArticleField = Literal[
    "id",
    "title",
    "slug",
    "description",
    "body",
    "ver",
    "mainImage",
    "coverImage",
    "backgroundImage",
    "author",
    "tags",
    "platforms",
    "categories",
    "creators",
    "engine",
    "images",
    "mods",
    "favoritesCount",
    "favorited",
    "createdAt",
    "updatedAt",
    "status",
    "sequentialCode",
]

# Backend ArticleStatus enum value, e.g. "PUBLISHED"
ArticleStatus = str


class GraphQLErrorDetail(TypedDict, total=False):
    """Single entry of a GraphQL `errors` array."""
    message: str
    path: List[Any]
    locations: List[Dict[str, int]]
    extensions: Dict[str, Any]


@dataclass
class GraphQLResponse:
    """Result of a GraphQL call. Exactly one of data/errors is populated."""
    data: Any = None
    errors: Optional[List[GraphQLErrorDetail]] = None
    status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.errors is None

    def raise_for_errors(self) -> None:
        """Raise the typed SDK error matching this failed result."""
        if self.errors is None:
            return
        from .errors import NetworkError, create_error_from_status

        message = "; ".join(e.get("message", "") for e in self.errors) or "GraphQL request failed"
        if self.status is None:
            raise NetworkError(message)
        raise create_error_from_status(self.status, message)


@dataclass
class RestResponse:
    """Result of a REST call. `error` is set only on failure."""
    data: Any = None
    error: Optional[str] = None
    status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the typed SDK error matching this failed result."""
        if self.error is None:
            return
        from .errors import NetworkError, create_error_from_status

        if self.status is None:
            raise NetworkError(self.error)
        raise create_error_from_status(self.status, self.error)


@dataclass
class DiagnosticsEvent:
    """Event for diagnostics/observability."""
    name: str  # 'request:start', 'request:end', 'request:error', 'auth:*'
    timestamp: float
    method: Optional[str] = None
    url: Optional[str] = None
    status: Optional[int] = None
    duration: Optional[float] = None
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Domain payloads. Responses stay plain dicts; these describe their shape.
# ---------------------------------------------------------------------------

class NamedEntity(TypedDict):
    id: str
    name: str


class ImageObject(TypedDict, total=False):
    id: str
    url: str


class Author(TypedDict, total=False):
    id: int
    name: str
    bio: Optional[str]
    image: Optional[str]
    backgroundImage: Optional[str]
    following: bool


class Download(TypedDict, total=False):
    id: int
    name: str
    url: str
    isActive: bool
    vipOnly: bool


class OfficialDownloadSource(TypedDict):
    id: str
    name: str
    url: str
    status: str


class ArticleListItem(TypedDict, total=False):
    id: int
    title: str
    slug: str
    description: str
    ver: Optional[str]
    createdAt: str
    updatedAt: str
    mainImage: Optional[str]
    coverImage: Optional[str]
    favoritesCount: int
    favorited: bool
    status: str
    engine: NamedEntity
    sequentialCode: Optional[str]
    author: Author
    tags: List[NamedEntity]
    platforms: List[NamedEntity]
    categories: List[NamedEntity]
    creators: List[NamedEntity]
    images: List[ImageObject]


class Article(ArticleListItem, total=False):
    body: str
    backgroundImage: Optional[str]
    mods: List[Dict[str, Any]]
    downloads: List[Download]
    officialDownloadSources: List[OfficialDownloadSource]


class ArticleFilter(TypedDict, total=False):
    tag: str
    platform: str
    category: str
    author: str
    favorited: bool
    engine: str
    sequentialCode: str
    q: str


@dataclass
class PaginatedResponse:
    """A page of results with the total count across all pages."""
    items: List[Any]
    total: int
    page: int
    page_size: int


@dataclass
class ArticleWithDownloads:
    article: Optional[Dict[str, Any]]
    downloads: Optional[List[Download]]


class User(TypedDict, total=False):
    id: int
    email: str
    username: str
    bio: Optional[str]
    image: Optional[str]


class Profile(TypedDict):
    username: str
    bio: Optional[str]
    image: Optional[str]
    following: bool


class LoginResponse(TypedDict):
    """Backend credential pair issued after a token exchange."""
    user: User
    token: str
    refreshToken: str


class RefreshResponse(TypedDict, total=False):
    token: str
    refreshToken: str
