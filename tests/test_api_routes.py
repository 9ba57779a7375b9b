"""
tests/test_api_routes.py — FastAPI Route Integration Tests
============================================================
Exercises the HTTP surface through the FastAPI TestClient against an
in-memory forum, including the domain-error → status-code mapping.
"""

from __future__ import annotations

import pytest


@pytest.fixture
def user_id(client) -> str:
    resp = client.post("/api/users", json={"username": "alice"})
    assert resp.status_code == 201
    return resp.json()["id"]


@pytest.fixture
def thread_id(client, user_id) -> str:
    resp = client.post(
        "/api/threads",
        json={
            "category_id": "GAMES",
            "subcategory_id": "oracle",
            "author_id": user_id,
            "title": "Oracle guide",
            "content": "Read the signs",
            "tags": ["guide"],
        },
    )
    assert resp.status_code == 201
    return resp.json()["id"]


# ===========================================================================
# Health
# ===========================================================================
class TestHealthEndpoint:
    def test_health_returns_ok(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# ===========================================================================
# Users
# ===========================================================================
class TestUsers:
    def test_register_returns_profile(self, client):
        resp = client.post("/api/users", json={"username": "bob", "display_name": "Bobby"})
        assert resp.status_code == 201
        body = resp.json()
        assert body["display_name"] == "Bobby"
        assert body["rank"] == "OBSERVER"

    def test_get_profile(self, client, user_id):
        resp = client.get(f"/api/users/{user_id}")
        assert resp.status_code == 200
        assert resp.json()["username"] == "alice"

    def test_unknown_user_404(self, client):
        resp = client.get("/api/users/user-missing")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NotFound"

    def test_register_with_explicit_id(self, client):
        first = client.post("/api/users", json={"id": "user-x", "username": "x"})
        again = client.post("/api/users", json={"id": "user-x", "username": "y"})
        assert first.status_code == 201
        assert first.json()["id"] == "user-x"
        assert again.status_code == 409
        assert again.json()["error"] == "DuplicateUserId"

    def test_blank_username_422(self, client):
        assert client.post("/api/users", json={"username": "   "}).status_code == 422

    def test_badges(self, client, user_id):
        first = client.post(f"/api/users/{user_id}/badges", json={"badge": "pioneer"})
        again = client.post(f"/api/users/{user_id}/badges", json={"badge": "pioneer"})
        assert first.json() == {"added": True, "badges": ["pioneer"]}
        assert again.json()["added"] is False


# ===========================================================================
# Threads
# ===========================================================================
class TestThreads:
    def test_get_thread_counts_views(self, client, thread_id):
        client.get(f"/api/threads/{thread_id}")
        body = client.get(f"/api/threads/{thread_id}").json()
        assert body["views"] == 2
        assert body["tags"] == ["guide"]
        assert body["replies"] == []

    def test_invalid_category_422(self, client, user_id):
        resp = client.post(
            "/api/threads",
            json={"category_id": "GENERAL", "subcategory_id": "oracle",
                  "author_id": user_id, "title": "t", "content": "c"},
        )
        assert resp.status_code == 422
        assert resp.json()["error"] == "InvalidCategory"

    def test_unknown_thread_404(self, client):
        assert client.get("/api/threads/thread-missing").status_code == 404

    def test_reply_and_answer(self, client, user_id, thread_id):
        reply = client.post(
            f"/api/threads/{thread_id}/replies",
            json={"author_id": user_id, "content": "answer"},
        )
        assert reply.status_code == 201
        reply_id = reply.json()["id"]

        resp = client.post(f"/api/threads/{thread_id}/replies/{reply_id}/answer")
        assert resp.status_code == 200
        assert resp.json()["is_answer"] is True

    def test_locked_thread_409(self, client, user_id, thread_id):
        assert client.post(f"/api/threads/{thread_id}/lock", json={}).json()["is_locked"] is True
        resp = client.post(
            f"/api/threads/{thread_id}/replies",
            json={"author_id": user_id, "content": "late"},
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "ThreadLocked"

    def test_reactions(self, client, thread_id):
        ok = client.post(f"/api/threads/{thread_id}/reactions", json={"reaction": "fire"})
        noop = client.post(f"/api/threads/{thread_id}/reactions", json={"reaction": "like"})
        assert ok.json() == {"applied": True, "reaction": "fire"}
        assert noop.json() == {"applied": False, "reaction": None}
        assert client.get(f"/api/threads/{thread_id}").json()["reactions"]["fire"] == 1

    def test_pin_and_delete(self, client, thread_id):
        pinned = client.post(f"/api/threads/{thread_id}/pin", json={"pinned": True})
        assert pinned.json()["is_pinned"] is True

        removed = client.delete(f"/api/threads/{thread_id}")
        assert removed.json()["status"] == "REMOVED"
        listing = client.get("/api/categories/GAMES/threads").json()
        assert listing["total"] == 0


# ===========================================================================
# Discovery
# ===========================================================================
class TestDiscovery:
    def test_categories(self, client, thread_id):
        body = client.get("/api/categories").json()
        assert len(body) == 9
        games = next(c for c in body if c["id"] == "GAMES")
        assert games["stats"]["thread_count"] == 1

    def test_category_threads(self, client, thread_id):
        body = client.get("/api/categories/GAMES/threads", params={"subcategory": "oracle"}).json()
        assert body["total"] == 1
        assert body["threads"][0]["id"] == thread_id
        assert "content" not in body["threads"][0]

    def test_category_threads_unknown_category(self, client):
        assert client.get("/api/categories/NOPE/threads").status_code == 422

    def test_category_threads_bad_page(self, client):
        assert client.get("/api/categories/GAMES/threads", params={"page": 0}).status_code == 422

    def test_category_stats(self, client, thread_id):
        body = client.get("/api/categories/GAMES/stats").json()
        assert body["thread_count"] == 1
        assert body["latest_thread"]["id"] == thread_id

    def test_search(self, client, thread_id):
        hits = client.get("/api/search", params={"q": "ORACLE"}).json()
        assert [h["id"] for h in hits] == [thread_id]

    def test_search_requires_query(self, client):
        assert client.get("/api/search").status_code == 422

    def test_trending_and_latest(self, client, thread_id):
        assert [t["id"] for t in client.get("/api/trending").json()] == [thread_id]
        assert [t["id"] for t in client.get("/api/latest").json()] == [thread_id]

    @pytest.mark.parametrize("board", ["reputation", "posts"])
    def test_leaderboards(self, client, thread_id, board):
        body = client.get(f"/api/leaderboard/{board}").json()
        assert body["board"] == board
        assert body["users"][0]["username"] == "alice"

    def test_unknown_leaderboard_falls_back(self, client, user_id):
        assert client.get("/api/leaderboard/gold").json()["board"] == "reputation"

    def test_stats(self, client, thread_id):
        body = client.get("/api/stats").json()
        assert body["total_threads"] == 1
        assert body["total_users"] == 1
        assert body["categories_count"] == 9
