from __future__ import annotations

import logging

import asyncpg

from newsboard.core.errors import NotFound, storage_errors
from newsboard.models.schemas import CommentOut, CommentPage
from newsboard.services.existence import ARTICLE, COMMENT, USER, ensure_exists, missing_reference
from newsboard.services.query_builder import build_comment_count, build_comment_page
from newsboard.services.validation import NewComment, Pagination


logger = logging.getLogger("newsboard.comments")


INSERT_COMMENT_SQL = """
    INSERT INTO comments (article_id, author, body)
    VALUES ($1, $2, $3)
    RETURNING comment_id, article_id, author, body, created_at, votes
"""

DELETE_COMMENT_SQL = "DELETE FROM comments WHERE comment_id = $1 RETURNING comment_id"


async def list_comments(
    conn: asyncpg.Connection, article_id: int, pagination: Pagination
) -> CommentPage:
    page_query = build_comment_page(article_id, pagination)
    count_query = build_comment_count(article_id)
    async with storage_errors("list_comments"):
        async with conn.transaction(isolation="repeatable_read", readonly=True):
            rows = await conn.fetch(page_query.sql, *page_query.args)
            total_count = await conn.fetchval(count_query.sql, *count_query.args)
            if not total_count:
                # no comments, or no such article
                await ensure_exists(conn, ARTICLE, article_id)
    return CommentPage(
        comments=[CommentOut(**dict(r)) for r in rows],
        total_count=int(total_count or 0),
    )


async def create_comment(
    conn: asyncpg.Connection, article_id: int, payload: NewComment
) -> CommentOut:
    async with storage_errors("create_comment"):
        try:
            async with conn.transaction():
                await ensure_exists(conn, ARTICLE, article_id)
                await ensure_exists(conn, USER, payload.username)
                row = await conn.fetchrow(INSERT_COMMENT_SQL, article_id, payload.username, payload.body)
        except asyncpg.ForeignKeyViolationError as exc:
            not_found = missing_reference(exc)
            if not_found is None:
                raise
            raise not_found from exc
    comment = CommentOut(**dict(row))
    logger.info(
        "Comment created",
        extra={"event": "comment_created", "comment_id": comment.comment_id, "article_id": article_id},
    )
    return comment


async def delete_comment(conn: asyncpg.Connection, comment_id: int) -> None:
    async with storage_errors("delete_comment"):
        deleted = await conn.fetchval(DELETE_COMMENT_SQL, comment_id)
    if deleted is None:
        raise NotFound(COMMENT)
