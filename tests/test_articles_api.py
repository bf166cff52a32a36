from __future__ import annotations

from datetime import datetime, timezone

from newsboard.core.errors import NotFound, StorageError
from newsboard.models.schemas import (
    ArticleOut,
    ArticlePage,
    BreakingNewsItem,
    CommentOut,
    CommentPage,
)


def make_article(article_id: int = 1, **overrides) -> ArticleOut:
    data = {
        "article_id": article_id,
        "author": "butter_bridge",
        "title": "Living in the shadow of a great man",
        "body": "I find this existence challenging",
        "topic": "mitch",
        "created_at": datetime(2020, 7, 9, 20, 11, tzinfo=timezone.utc),
        "votes": 100,
        "comment_count": 13,
    }
    data.update(overrides)
    return ArticleOut(**data)


def make_comment(comment_id: int = 1, **overrides) -> CommentOut:
    data = {
        "comment_id": comment_id,
        "article_id": 1,
        "author": "lurker",
        "body": "Living his best pug life",
        "created_at": datetime(2020, 11, 3, 21, 0, tzinfo=timezone.utc),
        "votes": 0,
    }
    data.update(overrides)
    return CommentOut(**data)


def test_get_article_200(client, monkeypatch):
    async def fake_get_article(conn, article_id):
        return make_article(article_id)

    monkeypatch.setattr("newsboard.api.articles.svc.get_article", fake_get_article)
    resp = client.get("/api/articles/1")
    assert resp.status_code == 200
    article = resp.json()["article"]
    assert article["article_id"] == 1
    assert article["comment_count"] == 13
    assert isinstance(article["created_at"], str)


def test_get_article_400_and_404(client, monkeypatch):
    async def fake_get_article(conn, article_id):
        raise NotFound("article")

    monkeypatch.setattr("newsboard.api.articles.svc.get_article", fake_get_article)
    resp = client.get("/api/articles/invalid_id")
    assert resp.status_code == 400
    assert resp.json() == {"msg": "Bad request"}

    resp2 = client.get("/api/articles/50")
    assert resp2.status_code == 404
    assert resp2.json() == {"msg": "Article not found"}


def test_list_articles_passes_normalized_query(client, monkeypatch):
    seen = {}

    async def fake_list_articles(conn, query):
        seen["query"] = query
        return ArticlePage(articles=[make_article(i) for i in range(1, 5)], total_count=12)

    monkeypatch.setattr("newsboard.api.articles.svc.list_articles", fake_list_articles)
    resp = client.get("/api/articles?limit=4&page=2&sort_by=votes&order=ASC&topic=mitch&author=rogersop")
    assert resp.status_code == 200
    body = resp.json()
    assert set(body.keys()) == {"articles", "total_count"}
    assert len(body["articles"]) == 4
    assert body["total_count"] == 12

    query = seen["query"]
    assert query.pagination.limit == 4
    assert query.pagination.page == 2
    assert query.sort_by.value == "votes"
    assert query.order.value == "asc"
    assert query.topic == "mitch"
    assert query.author == "rogersop"


def test_list_articles_bad_parameters(client, monkeypatch):
    async def fake_list_articles(conn, query):  # pragma: no cover - must not be reached
        raise AssertionError("validation should fail first")

    monkeypatch.setattr("newsboard.api.articles.svc.list_articles", fake_list_articles)
    for qs in ("page=0", "page=invalid_page", "limit=-2", "limit=invalid_limit", "limit=101",
               "sort_by=not_a_column", "order=diagonal", "limit=100&page=1000000000000000000",
               "limit=%205%20"):
        resp = client.get(f"/api/articles?{qs}")
        assert resp.status_code == 400, qs
        assert resp.json() == {"msg": "Bad request"}


def test_list_articles_unknown_topic(client, monkeypatch):
    async def fake_list_articles(conn, query):
        raise NotFound("topic")

    monkeypatch.setattr("newsboard.api.articles.svc.list_articles", fake_list_articles)
    resp = client.get("/api/articles?topic=not_a_topic")
    assert resp.status_code == 404
    assert resp.json() == {"msg": "Topic not found"}


def test_patch_article_votes(client, monkeypatch):
    calls = []

    async def fake_update(conn, article_id, inc_votes):
        calls.append((article_id, inc_votes))
        return make_article(article_id, votes=100 + inc_votes)

    monkeypatch.setattr("newsboard.api.articles.svc.update_article_votes", fake_update)
    resp = client.patch("/api/articles/1", json={"inc_votes": -40, "another_property": "x"})
    assert resp.status_code == 200
    assert resp.json()["article"]["votes"] == 60
    assert "another_property" not in resp.json()["article"]
    assert calls == [(1, -40)]

    for body in ({}, {"inc_votes": "invalid string"}):
        bad = client.patch("/api/articles/4", json=body)
        assert bad.status_code == 400
        assert bad.json() == {"msg": "Bad request"}

    bad_id = client.patch("/api/articles/invalid_id", json={"inc_votes": 10})
    assert bad_id.status_code == 400
    assert calls == [(1, -40)]


def test_patch_missing_article(client, monkeypatch):
    async def fake_update(conn, article_id, inc_votes):
        raise NotFound("article")

    monkeypatch.setattr("newsboard.api.articles.svc.update_article_votes", fake_update)
    resp = client.patch("/api/articles/50", json={"inc_votes": 1})
    assert resp.status_code == 404
    assert resp.json() == {"msg": "Article not found"}


def test_post_article(client, monkeypatch):
    async def fake_create(conn, payload):
        return make_article(13, author=payload.author, title=payload.title, body=payload.body,
                            topic=payload.topic, votes=0, comment_count=0)

    monkeypatch.setattr("newsboard.api.articles.svc.create_article", fake_create)
    resp = client.post("/api/articles", json={
        "author": "lurker", "title": "My New Article", "body": "Text of the new article...",
        "topic": "cats", "extra_key": "ignored",
    })
    assert resp.status_code == 201
    article = resp.json()["article"]
    assert article["comment_count"] == 0
    assert "extra_key" not in article

    missing = client.post("/api/articles", json={"author": "lurker", "body": "b", "topic": "cats"})
    assert missing.status_code == 400
    too_long = client.post("/api/articles", json={"author": "lurker", "title": "x" * 101, "body": "b", "topic": "cats"})
    assert too_long.status_code == 400


def test_post_article_unknown_author(client, monkeypatch):
    async def fake_create(conn, payload):
        raise NotFound("user")

    monkeypatch.setattr("newsboard.api.articles.svc.create_article", fake_create)
    resp = client.post("/api/articles", json={"author": "not_a_user", "title": "T", "body": "B", "topic": "cats"})
    assert resp.status_code == 404
    assert resp.json() == {"msg": "User not found"}


def test_malformed_json_body(client):
    resp = client.post("/api/articles", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"msg": "Bad request"}


def test_delete_article(client, monkeypatch):
    deleted = []

    async def fake_delete(conn, article_id):
        deleted.append(article_id)

    monkeypatch.setattr("newsboard.api.articles.svc.delete_article", fake_delete)
    resp = client.delete("/api/articles/1")
    assert resp.status_code == 204
    assert resp.text == ""
    assert deleted == [1]

    bad = client.delete("/api/articles/not_a_valid_id")
    assert bad.status_code == 400
    assert bad.json() == {"msg": "Bad request"}


def test_breaking_news_route_is_not_an_article_id(client, monkeypatch):
    async def fake_breaking(conn):
        return [BreakingNewsItem(article_id=13, title="My New Article")]

    monkeypatch.setattr("newsboard.api.articles.svc.get_breaking_news", fake_breaking)
    resp = client.get("/api/articles/breaking-news")
    assert resp.status_code == 200
    assert resp.json() == {"breaking_news": [{"article_id": 13, "title": "My New Article"}]}


def test_list_comments(client, monkeypatch):
    seen = {}

    async def fake_list_comments(conn, article_id, pagination):
        seen["args"] = (article_id, pagination.limit, pagination.page)
        return CommentPage(comments=[make_comment(i) for i in range(1, 4)], total_count=13)

    monkeypatch.setattr("newsboard.api.articles.svc.list_comments", fake_list_comments)
    resp = client.get("/api/articles/1/comments?limit=5&page=3")
    assert resp.status_code == 200
    assert resp.json()["total_count"] == 13
    assert len(resp.json()["comments"]) == 3
    assert seen["args"] == (1, 5, 3)

    assert client.get("/api/articles/1/comments?limit=101").status_code == 400
    assert client.get("/api/articles/invalid/comments").status_code == 400


def test_post_comment(client, monkeypatch):
    async def fake_create_comment(conn, article_id, payload):
        return make_comment(19, article_id=article_id, author=payload.username, body=payload.body)

    monkeypatch.setattr("newsboard.api.articles.svc.create_comment", fake_create_comment)
    resp = client.post("/api/articles/2/comments", json={"username": "lurker", "body": "Living his best pug life", "extra": 1})
    assert resp.status_code == 201
    comment = resp.json()["comment"]
    assert comment["votes"] == 0
    assert comment["author"] == "lurker"
    assert "extra" not in comment

    missing_body = client.post("/api/articles/2/comments", json={"username": "ghost"})
    assert missing_body.status_code == 400
    assert missing_body.json() == {"msg": "Bad request"}

    too_long = client.post("/api/articles/2/comments", json={"username": "lurker", "body": "x" * 501})
    assert too_long.status_code == 400


def test_post_comment_unknown_user(client, monkeypatch):
    async def fake_create_comment(conn, article_id, payload):
        raise NotFound("user")

    monkeypatch.setattr("newsboard.api.articles.svc.create_comment", fake_create_comment)
    resp = client.post("/api/articles/2/comments", json={"username": "alex", "body": "never posted"})
    assert resp.status_code == 404
    assert resp.json() == {"msg": "User not found"}


def test_storage_error_is_500_without_details(client, monkeypatch):
    async def fake_get_article(conn, article_id):
        raise StorageError()

    monkeypatch.setattr("newsboard.api.articles.svc.get_article", fake_get_article)
    resp = client.get("/api/articles/1")
    assert resp.status_code == 500
    assert resp.json() == {"msg": "Internal server error"}
