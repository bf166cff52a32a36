"""Façade that re-exports the article service functions.

Routers import this module so reads, writes and comments can live in
focused modules without changing call sites.
"""

from .articles_read import get_article, get_breaking_news, list_articles  # noqa: F401
from .articles_write import create_article, delete_article, update_article_votes  # noqa: F401
from .comments import create_comment, delete_comment, list_comments  # noqa: F401

__all__ = [
    "get_article",
    "get_breaking_news",
    "list_articles",
    "create_article",
    "delete_article",
    "update_article_votes",
    "create_comment",
    "delete_comment",
    "list_comments",
]
