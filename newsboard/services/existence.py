from __future__ import annotations

from typing import Any, Sequence

import asyncpg

from newsboard.core.errors import NotFound
from newsboard.services.validation import ArticleQuery


ARTICLE = "article"
COMMENT = "comment"
TOPIC = "topic"
USER = "user"

_LOOKUPS = {
    ARTICLE: "SELECT 1 FROM articles WHERE article_id = $1",
    COMMENT: "SELECT 1 FROM comments WHERE comment_id = $1",
    TOPIC: "SELECT 1 FROM topics WHERE slug = $1",
    USER: "SELECT 1 FROM users WHERE username = $1",
}


async def exists(conn: asyncpg.Connection, kind: str, key: Any) -> bool:
    return await conn.fetchval(_LOOKUPS[kind], key) is not None


async def ensure_exists(conn: asyncpg.Connection, kind: str, key: Any) -> None:
    if not await exists(conn, kind, key):
        raise NotFound(kind)


def single_row(rows: Sequence[asyncpg.Record], kind: str) -> asyncpg.Record:
    """Exactly one row or NotFound; more than one means a uniqueness constraint is gone."""
    if not rows:
        raise NotFound(kind)
    if len(rows) > 1:
        raise RuntimeError(f"{len(rows)} rows matched a unique {kind} lookup")
    return rows[0]


async def resolve_filter_targets(conn: asyncpg.Connection, query: ArticleQuery) -> None:
    """Called only when a filtered listing matched nothing.

    An existing topic or author with no articles is a valid empty result;
    a filter value that names nothing at all is a client error.
    """
    if query.topic is not None:
        await ensure_exists(conn, TOPIC, query.topic)
    if query.author is not None:
        await ensure_exists(conn, USER, query.author)


# Foreign keys whose violation means the referenced row is missing.
# Names are fixed in newsboard.models.tables.
_FOREIGN_KEY_TARGETS = {
    "articles_author_fkey": USER,
    "articles_topic_fkey": TOPIC,
    "comments_article_id_fkey": ARTICLE,
    "comments_author_fkey": USER,
}


def missing_reference(exc: asyncpg.ForeignKeyViolationError) -> NotFound | None:
    kind = _FOREIGN_KEY_TARGETS.get(getattr(exc, "constraint_name", None) or "")
    return NotFound(kind) if kind is not None else None
