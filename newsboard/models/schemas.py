# newsboard/models/schemas.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict


# --- Articles ---
# Every article leaving the API carries its comment_count, 0 when nothing is attached
class ArticleOut(BaseModel):
    article_id: int
    author: str
    title: str
    body: str
    topic: str
    created_at: datetime
    votes: int
    comment_count: int


class ArticleEnvelope(BaseModel):
    article: ArticleOut


# total_count counts the filtered set before limit/page are applied
class ArticlePage(BaseModel):
    articles: List[ArticleOut]
    total_count: int


class BreakingNewsItem(BaseModel):
    article_id: int
    title: str


class BreakingNews(BaseModel):
    breaking_news: List[BreakingNewsItem]


# --- Comments ---
class CommentOut(BaseModel):
    comment_id: int
    article_id: int
    author: str
    body: str
    created_at: datetime
    votes: int


class CommentEnvelope(BaseModel):
    comment: CommentOut


class CommentPage(BaseModel):
    comments: List[CommentOut]
    total_count: int


# --- Topics / users ---
class TopicOut(BaseModel):
    slug: str
    description: str

    model_config = ConfigDict(from_attributes=True)


class TopicEnvelope(BaseModel):
    topic: TopicOut


class TopicList(BaseModel):
    topics: List[TopicOut]


class UserOut(BaseModel):
    username: str

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    user: UserOut


class UserList(BaseModel):
    users: List[UserOut]
