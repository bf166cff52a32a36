from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from newsboard.db.base import Base


class Topic(Base):
    __tablename__ = "topics"

    slug: Mapped[str] = mapped_column(String(100), primary_key=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)


class User(Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), primary_key=True)


class Article(Base):
    __tablename__ = "articles"

    article_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    topic: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("topics.slug", ondelete="CASCADE", name="articles_topic_fkey"),
        nullable=False,
        index=True,
    )
    author: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.username", ondelete="CASCADE", name="articles_author_fkey"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    votes: Mapped[int] = mapped_column(Integer, server_default=text("0"), nullable=False)

    comments: Mapped[list[Comment]] = relationship(
        back_populates="article", cascade="all, delete-orphan", passive_deletes=True
    )


class Comment(Base):
    __tablename__ = "comments"

    comment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    article_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("articles.article_id", ondelete="CASCADE", name="comments_article_id_fkey"),
        nullable=False,
        index=True,
    )
    author: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.username", ondelete="CASCADE", name="comments_author_fkey"),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    votes: Mapped[int] = mapped_column(Integer, server_default=text("0"), nullable=False)

    article: Mapped[Optional[Article]] = relationship(back_populates="comments")
