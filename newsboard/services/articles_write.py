from __future__ import annotations

import logging

import asyncpg

from newsboard.core.errors import NotFound, storage_errors
from newsboard.models.schemas import ArticleOut
from newsboard.services.articles_read import article_from_row
from newsboard.services.existence import ARTICLE, TOPIC, USER, ensure_exists, missing_reference
from newsboard.services.query_builder import ARTICLE_COLUMNS
from newsboard.services.validation import NewArticle


logger = logging.getLogger("newsboard.articles")


INSERT_ARTICLE_SQL = f"""
    INSERT INTO articles AS a (author, title, body, topic)
    VALUES ($1, $2, $3, $4)
    RETURNING {ARTICLE_COLUMNS}, 0 AS comment_count
"""

# Conditional update: a missing article simply updates nothing, no separate existence check.
UPDATE_VOTES_SQL = f"""
    UPDATE articles AS a
    SET votes = a.votes + $2
    WHERE a.article_id = $1
    RETURNING {ARTICLE_COLUMNS},
              (SELECT COUNT(*) FROM comments c WHERE c.article_id = a.article_id)::int AS comment_count
"""

# comments go with it through ON DELETE CASCADE
DELETE_ARTICLE_SQL = "DELETE FROM articles WHERE article_id = $1 RETURNING article_id"


async def create_article(conn: asyncpg.Connection, payload: NewArticle) -> ArticleOut:
    async with storage_errors("create_article"):
        try:
            async with conn.transaction():
                await ensure_exists(conn, USER, payload.author)
                await ensure_exists(conn, TOPIC, payload.topic)
                row = await conn.fetchrow(
                    INSERT_ARTICLE_SQL, payload.author, payload.title, payload.body, payload.topic
                )
        except asyncpg.ForeignKeyViolationError as exc:
            # the user or topic vanished between the check and the insert
            not_found = missing_reference(exc)
            if not_found is None:
                raise
            raise not_found from exc
    article = article_from_row(row)
    logger.info(
        "Article created",
        extra={"event": "article_created", "article_id": article.article_id},
    )
    return article


async def update_article_votes(
    conn: asyncpg.Connection, article_id: int, inc_votes: int
) -> ArticleOut:
    async with storage_errors("update_article_votes"):
        row = await conn.fetchrow(UPDATE_VOTES_SQL, article_id, inc_votes)
    if row is None:
        raise NotFound(ARTICLE)
    return article_from_row(row)


async def delete_article(conn: asyncpg.Connection, article_id: int) -> None:
    async with storage_errors("delete_article"):
        deleted = await conn.fetchval(DELETE_ARTICLE_SQL, article_id)
    if deleted is None:
        raise NotFound(ARTICLE)
    logger.info(
        "Article deleted",
        extra={"event": "article_deleted", "article_id": article_id},
    )
