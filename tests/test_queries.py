"""
tests/test_queries.py — Discovery Queries
===========================================
Trending, latest, leaderboards, category stats and forum statistics.
"""

from __future__ import annotations

import pytest

from agora.errors import InvalidCategory


class TestTrending:
    def test_window_excludes_stale_threads(self, forum, alice, clock):
        stale = forum.create_thread("GENERAL", alice.id, "stale", "c")
        for _ in range(100):
            forum.get_thread(stale.id)
        clock.advance(hours=25)
        fresh = forum.create_thread("GENERAL", alice.id, "fresh", "c")

        trending = forum.get_trending_threads()
        assert [t.id for t in trending] == [fresh.id]

    def test_exact_window_edge_is_excluded(self, forum, alice, clock):
        forum.create_thread("GENERAL", alice.id, "edge", "c")
        clock.advance(hours=24)
        assert forum.get_trending_threads() == []

    def test_reply_refreshes_window(self, forum, alice, bob, clock):
        thread = forum.create_thread("GENERAL", alice.id, "revived", "c")
        clock.advance(hours=30)
        forum.add_reply(thread.id, bob.id, "necro")
        assert [t.title for t in forum.get_trending_threads()] == ["revived"]

    def test_score_ordering(self, forum, alice, bob):
        viewed = forum.create_thread("GENERAL", alice.id, "viewed", "c")
        replied = forum.create_thread("GENERAL", alice.id, "replied", "c")
        reacted = forum.create_thread("GENERAL", alice.id, "reacted", "c")

        for _ in range(4):
            forum.get_thread(viewed.id)            # score 4
        forum.add_reply(replied.id, bob.id, "r")   # score 3
        forum.add_reaction(reacted.id, "fire")     # score 2
        forum.add_reaction(reacted.id, "fire")     # score 4, ties with viewed

        titles = [t.title for t in forum.get_trending_threads()]
        assert titles == ["viewed", "reacted", "replied"]

    def test_removed_threads_excluded(self, forum, alice):
        thread = forum.create_thread("GENERAL", alice.id, "gone", "c")
        forum.remove_thread(thread.id)
        assert forum.get_trending_threads() == []

    def test_limit(self, forum, alice):
        for i in range(15):
            forum.create_thread("GENERAL", alice.id, f"t{i}", "c")
        assert len(forum.get_trending_threads(limit=5)) == 5


class TestLatest:
    def test_newest_first(self, forum, alice, clock):
        for title in ("a", "b", "c"):
            forum.create_thread("GENERAL", alice.id, title, "x")
            clock.advance(minutes=1)
        assert [t.title for t in forum.get_latest_threads(limit=2)] == ["c", "b"]


class TestLeaderboards:
    def test_top_contributors_by_reputation(self, forum, alice, bob):
        forum.add_reputation(bob.id, 50)
        forum.add_reputation(alice.id, 10)
        board = forum.get_top_contributors()
        assert [p["username"] for p in board] == ["bob", "alice"]
        assert board[0]["stats"]["reputation"] == 50

    def test_most_active_by_posts(self, forum, alice, bob):
        thread = forum.create_thread("GENERAL", alice.id, "t", "c")
        for _ in range(3):
            forum.add_reply(thread.id, bob.id, "r")
        board = forum.get_most_active_users(limit=1)
        assert [p["username"] for p in board] == ["bob"]


class TestCategoryStats:
    def test_aggregates(self, forum, alice, bob, clock):
        first = forum.create_thread("MODDING", alice.id, "first", "c")
        clock.advance(minutes=1)
        second = forum.create_thread("MODDING", alice.id, "second", "c")
        forum.add_reply(first.id, bob.id, "r")
        forum.get_thread(first.id)
        forum.get_thread(second.id)
        forum.create_thread("LORE", alice.id, "elsewhere", "c")

        stats = forum.get_category_stats("MODDING")
        assert stats.thread_count == 2
        assert stats.reply_count == 1
        assert stats.view_count == 2
        assert stats.latest_thread.id == second.id

    def test_empty_category(self, forum):
        stats = forum.get_category_stats("CRYPTO")
        assert stats.to_dict() == {
            "thread_count": 0, "reply_count": 0, "view_count": 0, "latest_thread": None,
        }

    def test_unknown_category(self, forum):
        with pytest.raises(InvalidCategory):
            forum.get_category_stats("NOPE")

    def test_categories_with_stats(self, forum, alice):
        forum.create_thread("AGENTS", alice.id, "t", "c")
        listing = forum.get_categories_with_stats()
        assert len(listing) == 9
        by_id = {c["id"]: c for c in listing}
        assert by_id["AGENTS"]["stats"]["thread_count"] == 1
        assert by_id["GENERAL"]["stats"]["thread_count"] == 0


class TestStatistics:
    def test_counters(self, forum, alice, bob):
        thread = forum.create_thread("GENERAL", alice.id, "t", "c")
        forum.add_reply(thread.id, bob.id, "r")
        stats = forum.get_statistics()
        assert stats["total_threads"] == 1
        assert stats["total_replies"] == 1
        assert stats["total_users"] == 2
        assert stats["categories_count"] == 9

    def test_online_users_window(self, forum, alice, bob, clock):
        clock.advance(minutes=30)
        forum.create_thread("GENERAL", alice.id, "t", "c")  # alice active now
        assert forum.get_statistics()["online_users"] == 1
