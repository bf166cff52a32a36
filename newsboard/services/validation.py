"""Normalization of untrusted request input.

Everything here is a pure function of its arguments: raw query strings,
path segments and decoded JSON bodies go in, normalized values come out,
or one of the 400-class errors from ``newsboard.core.errors`` is raised.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from newsboard.core.errors import InvalidIdentifier, InvalidParameter, InvalidPayload


DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_PAGE = 1
MAX_TITLE_LENGTH = 100
MAX_COMMENT_LENGTH = 500
# article_id / comment_id are int4 columns
MAX_IDENTIFIER = 2**31 - 1
# OFFSET is bound as int8
MAX_OFFSET = 2**63 - 1

_DIGITS = re.compile(r"[0-9]+")


class SortColumn(str, Enum):
    article_id = "article_id"
    title = "title"
    topic = "topic"
    author = "author"
    created_at = "created_at"
    votes = "votes"
    comment_count = "comment_count"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = DEFAULT_LIMIT
    page: int = DEFAULT_PAGE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class ArticleQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    pagination: Pagination = Pagination()
    sort_by: SortColumn = SortColumn.created_at
    order: SortOrder = SortOrder.desc
    topic: Optional[str] = None
    author: Optional[str] = None


def _parse_positive_int(raw: str) -> Optional[int]:
    if not _DIGITS.fullmatch(raw):
        return None
    try:
        value = int(raw)
    except ValueError:
        # more digits than int() will convert
        return None
    return value if value >= 1 else None


def parse_limit(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_LIMIT
    value = _parse_positive_int(raw)
    if value is None or value > MAX_LIMIT:
        raise InvalidParameter()
    return value


def parse_page(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_PAGE
    value = _parse_positive_int(raw)
    if value is None or value > MAX_OFFSET:
        raise InvalidParameter()
    return value


def parse_pagination(limit: Optional[str] = None, page: Optional[str] = None) -> Pagination:
    pagination = Pagination(limit=parse_limit(limit), page=parse_page(page))
    if pagination.offset > MAX_OFFSET:
        raise InvalidParameter()
    return pagination


def parse_sort_by(raw: Optional[str]) -> SortColumn:
    if raw is None:
        return SortColumn.created_at
    try:
        return SortColumn(raw)
    except ValueError:
        raise InvalidParameter() from None


def parse_order(raw: Optional[str]) -> SortOrder:
    if raw is None:
        return SortOrder.desc
    try:
        return SortOrder(raw.lower())
    except ValueError:
        raise InvalidParameter() from None


def _filter_value(raw: Optional[str]) -> Optional[str]:
    # ?topic= with nothing after it means "no filter"
    return raw if raw else None


def parse_article_query(
    limit: Optional[str] = None,
    page: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: Optional[str] = None,
    topic: Optional[str] = None,
    author: Optional[str] = None,
) -> ArticleQuery:
    return ArticleQuery(
        pagination=parse_pagination(limit, page),
        sort_by=parse_sort_by(sort_by),
        order=parse_order(order),
        topic=_filter_value(topic),
        author=_filter_value(author),
    )


def parse_identifier(raw: str) -> int:
    value = _parse_positive_int(raw)
    if value is None or value > MAX_IDENTIFIER:
        raise InvalidIdentifier()
    return value


# --- Request bodies ---
# Unknown keys are ignored (pydantic's default), missing or mistyped ones are rejected.

class NewArticle(BaseModel):
    author: StrictStr = Field(min_length=1)
    title: StrictStr = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    body: StrictStr = Field(min_length=1)
    topic: StrictStr = Field(min_length=1)


class NewComment(BaseModel):
    username: StrictStr = Field(min_length=1)
    body: StrictStr = Field(min_length=1, max_length=MAX_COMMENT_LENGTH)


class VoteUpdate(BaseModel):
    inc_votes: StrictInt = Field(ge=-MAX_IDENTIFIER, le=MAX_IDENTIFIER)


class NewTopic(BaseModel):
    slug: StrictStr = Field(min_length=1, max_length=100)
    description: StrictStr = Field(min_length=1, max_length=255)


PayloadT = TypeVar("PayloadT", bound=BaseModel)


def parse_payload(model: Type[PayloadT], raw: Any) -> PayloadT:
    if not isinstance(raw, dict):
        raise InvalidPayload()
    try:
        return model.model_validate(raw)
    except ValidationError:
        raise InvalidPayload() from None
