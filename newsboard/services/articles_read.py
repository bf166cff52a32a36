from __future__ import annotations

from typing import Any, List, Mapping

import asyncpg

from newsboard.core.errors import storage_errors
from newsboard.models.schemas import ArticleOut, ArticlePage, BreakingNewsItem
from newsboard.services.existence import ARTICLE, resolve_filter_targets, single_row
from newsboard.services.query_builder import (
    build_article_count,
    build_article_detail,
    build_article_page,
)
from newsboard.services.validation import ArticleQuery


BREAKING_NEWS_SQL = """
    SELECT a.article_id, a.title
    FROM articles a
    WHERE a.created_at >= NOW() - INTERVAL '24 hours'
    ORDER BY a.created_at DESC
"""


def article_from_row(row: Mapping[str, Any]) -> ArticleOut:
    article = dict(row)
    # aggregates can arrive as bigint/numeric/text depending on the query shape
    article["comment_count"] = int(article.get("comment_count") or 0)
    return ArticleOut(**article)


async def get_article(conn: asyncpg.Connection, article_id: int) -> ArticleOut:
    query = build_article_detail(article_id)
    async with storage_errors("get_article"):
        rows = await conn.fetch(query.sql, *query.args)
    return article_from_row(single_row(rows, ARTICLE))


async def list_articles(conn: asyncpg.Connection, query: ArticleQuery) -> ArticlePage:
    page_query = build_article_page(query)
    count_query = build_article_count(query)
    async with storage_errors("list_articles"):
        # one snapshot for the page and the total so they cannot disagree
        async with conn.transaction(isolation="repeatable_read", readonly=True):
            rows = await conn.fetch(page_query.sql, *page_query.args)
            total_count = await conn.fetchval(count_query.sql, *count_query.args)
            if not total_count:
                await resolve_filter_targets(conn, query)
    return ArticlePage(
        articles=[article_from_row(r) for r in rows],
        total_count=int(total_count or 0),
    )


async def get_breaking_news(conn: asyncpg.Connection) -> List[BreakingNewsItem]:
    async with storage_errors("get_breaking_news"):
        rows = await conn.fetch(BREAKING_NEWS_SQL)
    return [BreakingNewsItem(article_id=r["article_id"], title=r["title"]) for r in rows]
