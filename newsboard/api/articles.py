# newsboard/api/articles.py
from typing import Any, Optional

import asyncpg
from fastapi import APIRouter, Body, Depends, Response

from newsboard.db.pool import get_conn
from newsboard.models.schemas import (
    ArticleEnvelope,
    ArticlePage,
    BreakingNews,
    CommentEnvelope,
    CommentPage,
)
from newsboard.services import articles as svc
from newsboard.services.validation import (
    NewArticle,
    NewComment,
    VoteUpdate,
    parse_article_query,
    parse_identifier,
    parse_pagination,
    parse_payload,
)

router = APIRouter(prefix="/api/articles", tags=["articles"])

# -----------------------
#  Lists and derived views
# -----------------------

@router.get("", response_model=ArticlePage,
            summary="List articles with comment counts; filter by topic/author, sort, paginate")
async def api_list_articles(
    limit: Optional[str] = None,
    page: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: Optional[str] = None,
    topic: Optional[str] = None,
    author: Optional[str] = None,
    conn: asyncpg.Connection = Depends(get_conn),
):
    # query params stay raw strings so every malformed value maps to one 400 message
    query = parse_article_query(
        limit=limit, page=page, sort_by=sort_by, order=order, topic=topic, author=author
    )
    return await svc.list_articles(conn, query)


@router.post("", response_model=ArticleEnvelope, status_code=201,
             summary="Create an article")
async def api_create_article(
    payload: Any = Body(None),
    conn: asyncpg.Connection = Depends(get_conn),
):
    new_article = parse_payload(NewArticle, payload)
    article = await svc.create_article(conn, new_article)
    return {"article": article}


# Must be declared before /{article_id}
@router.get("/breaking-news", response_model=BreakingNews,
            summary="Articles created in the last 24 hours (article_id, title)")
async def api_breaking_news(conn: asyncpg.Connection = Depends(get_conn)):
    items = await svc.get_breaking_news(conn)
    return {"breaking_news": items}

# -----------------------
#  Single article
# -----------------------

@router.get("/{article_id}", response_model=ArticleEnvelope,
            summary="Article by id with comment count")
async def api_get_article(article_id: str, conn: asyncpg.Connection = Depends(get_conn)):
    article = await svc.get_article(conn, parse_identifier(article_id))
    return {"article": article}


@router.patch("/{article_id}", response_model=ArticleEnvelope,
              summary="Add inc_votes to an article's votes")
async def api_update_article_votes(
    article_id: str,
    payload: Any = Body(None),
    conn: asyncpg.Connection = Depends(get_conn),
):
    identifier = parse_identifier(article_id)
    update = parse_payload(VoteUpdate, payload)
    article = await svc.update_article_votes(conn, identifier, update.inc_votes)
    return {"article": article}


@router.delete("/{article_id}", status_code=204, response_class=Response,
               summary="Delete an article and its comments")
async def api_delete_article(article_id: str, conn: asyncpg.Connection = Depends(get_conn)):
    await svc.delete_article(conn, parse_identifier(article_id))
    return Response(status_code=204)

# -----------------------
#  Comments of an article
# -----------------------

@router.get("/{article_id}/comments", response_model=CommentPage,
            summary="Comments of an article, newest first, paginated")
async def api_list_comments(
    article_id: str,
    limit: Optional[str] = None,
    page: Optional[str] = None,
    conn: asyncpg.Connection = Depends(get_conn),
):
    identifier = parse_identifier(article_id)
    pagination = parse_pagination(limit, page)
    return await svc.list_comments(conn, identifier, pagination)


@router.post("/{article_id}/comments", response_model=CommentEnvelope, status_code=201,
             summary="Add a comment to an article")
async def api_create_comment(
    article_id: str,
    payload: Any = Body(None),
    conn: asyncpg.Connection = Depends(get_conn),
):
    identifier = parse_identifier(article_id)
    new_comment = parse_payload(NewComment, payload)
    comment = await svc.create_comment(conn, identifier, new_comment)
    return {"comment": comment}
