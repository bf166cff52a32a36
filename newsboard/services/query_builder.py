from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from newsboard.services.validation import ArticleQuery, Pagination, SortColumn, SortOrder


# The only strings from a request that ever reach ORDER BY come from these two maps.
_SORT_EXPRESSIONS = {
    SortColumn.article_id: "a.article_id",
    SortColumn.title: "a.title",
    SortColumn.topic: "a.topic",
    SortColumn.author: "a.author",
    SortColumn.created_at: "a.created_at",
    SortColumn.votes: "a.votes",
    SortColumn.comment_count: "comment_count",
}

_ORDER_KEYWORDS = {
    SortOrder.asc: "ASC",
    SortOrder.desc: "DESC",
}

ARTICLE_COLUMNS = "a.article_id, a.author, a.title, a.body, a.topic, a.created_at, a.votes"

# COUNT over the left-joined side yields 0 for articles without comments;
# the ::int cast keeps asyncpg from handing back a bigint-typed aggregate.
ARTICLE_WITH_COUNT_SELECT = f"""
    SELECT {ARTICLE_COLUMNS},
           COUNT(c.comment_id)::int AS comment_count
    FROM articles a
    LEFT JOIN comments c ON c.article_id = a.article_id
"""


@dataclass(frozen=True)
class BuiltQuery:
    sql: str
    args: Tuple[Any, ...]


def build_filters(query: ArticleQuery) -> Tuple[str, List[Any]]:
    """Return the WHERE clause for the topic/author predicates and its arguments."""
    filters: List[str] = []
    args: List[Any] = []
    if query.topic is not None:
        args.append(query.topic)
        filters.append("a.topic = $%d" % len(args))
    if query.author is not None:
        args.append(query.author)
        filters.append("a.author = $%d" % len(args))
    where_sql = ("WHERE " + " AND ".join(filters)) if filters else ""
    return where_sql, args


def order_clause(sort_by: SortColumn, order: SortOrder) -> str:
    return f"ORDER BY {_SORT_EXPRESSIONS[sort_by]} {_ORDER_KEYWORDS[order]}"


def pagination_clause(pagination: Pagination, first_index: int) -> Tuple[str, List[Any]]:
    sql = "LIMIT $%d OFFSET $%d" % (first_index, first_index + 1)
    return sql, [pagination.limit, pagination.offset]


def build_article_page(query: ArticleQuery) -> BuiltQuery:
    where_sql, args = build_filters(query)
    window_sql, window_args = pagination_clause(query.pagination, len(args) + 1)
    sql = f"""
    {ARTICLE_WITH_COUNT_SELECT}
    {where_sql}
    GROUP BY a.article_id
    {order_clause(query.sort_by, query.order)}
    {window_sql}
    """
    return BuiltQuery(sql=sql, args=tuple(args + window_args))


def build_article_count(query: ArticleQuery) -> BuiltQuery:
    # Same predicates as build_article_page, no join needed to count articles.
    where_sql, args = build_filters(query)
    sql = f"""
    SELECT COUNT(*)::int
    FROM articles a
    {where_sql}
    """
    return BuiltQuery(sql=sql, args=tuple(args))


def build_article_detail(article_id: int) -> BuiltQuery:
    sql = f"""
    {ARTICLE_WITH_COUNT_SELECT}
    WHERE a.article_id = $1
    GROUP BY a.article_id
    """
    return BuiltQuery(sql=sql, args=(article_id,))


def build_comment_page(article_id: int, pagination: Pagination) -> BuiltQuery:
    window_sql, window_args = pagination_clause(pagination, 2)
    sql = f"""
    SELECT c.comment_id, c.article_id, c.author, c.body, c.created_at, c.votes
    FROM comments c
    WHERE c.article_id = $1
    ORDER BY c.created_at DESC
    {window_sql}
    """
    return BuiltQuery(sql=sql, args=(article_id, *window_args))


def build_comment_count(article_id: int) -> BuiltQuery:
    return BuiltQuery(
        sql="SELECT COUNT(*)::int FROM comments c WHERE c.article_id = $1",
        args=(article_id,),
    )
