"""
Domain repositories built on FetchClient.
"""
from .articles import ArticleRepository
from .favorites import FavoritesRepository
from .search import SearchRepository
from .users import UsersRepository

__all__ = [
    "ArticleRepository",
    "FavoritesRepository",
    "SearchRepository",
    "UsersRepository",
]
