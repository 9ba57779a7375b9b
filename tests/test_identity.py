"""
tests/test_identity.py — Identity Registry
============================================
Registration, lookup, reputation, badges and rank transitions.
"""

from __future__ import annotations

import pytest

from agora.config import AgoraConfig
from agora.constants import Rank
from agora.engine.events import EventName
from agora.errors import DuplicateUserId, DuplicateUsername, NotFound
from agora.services.forum_service import ForumService


class TestRegister:
    def test_new_user_defaults(self, forum):
        user = forum.register_user("alice")
        assert user.username == "alice"
        assert user.display_name == "alice"
        assert user.stats.to_dict() == {
            "posts": 0, "threads": 0, "reactions_given": 0, "reputation": 0,
        }
        assert user.rank == Rank.OBSERVER
        assert user.badges == []

    def test_display_name_and_profile_fields(self, forum, clock):
        user = forum.register_user("bob", display_name="Bobby", avatar="b.png", bio="hi")
        profile = forum.get_user_profile(user.id)
        assert profile["display_name"] == "Bobby"
        assert profile["avatar"] == "b.png"
        assert profile["bio"] == "hi"
        assert profile["joined_at"] == clock.now.isoformat()
        assert profile["rank"] == "OBSERVER"
        assert profile["rank_info"]["name"] == "Observer"

    def test_ids_are_unique(self, forum):
        ids = {forum.register_user(f"u{i}").id for i in range(50)}
        assert len(ids) == 50

    def test_blank_username_rejected(self, forum):
        with pytest.raises(ValueError):
            forum.register_user("   ")
        assert forum.get_statistics()["total_users"] == 0

    def test_duplicates_allowed_by_default(self, forum):
        forum.register_user("alice")
        forum.register_user("alice")
        assert forum.get_statistics()["total_users"] == 2

    def test_unique_usernames_case_insensitive(self, clock):
        forum = ForumService(AgoraConfig(unique_usernames=True), clock=clock)
        forum.register_user("Alice")
        with pytest.raises(DuplicateUsername):
            forum.register_user("alice")
        assert forum.get_statistics()["total_users"] == 1

    def test_find_by_username(self, forum, alice):
        assert forum.identity.find_by_username("ALICE").id == alice.id
        assert forum.identity.find_by_username("nobody") is None

    def test_explicit_user_id(self, forum):
        user = forum.register_user("dave", user_id="user-dave")
        assert user.id == "user-dave"
        assert forum.get_user("user-dave").username == "dave"

    def test_user_id_collision_rejected(self, forum):
        forum.register_user("dave", user_id="user-dave")
        with pytest.raises(DuplicateUserId):
            forum.register_user("other", user_id="user-dave")
        assert forum.get_user("user-dave").username == "dave"
        assert forum.get_statistics()["total_users"] == 1

    def test_blank_user_id_rejected(self, forum):
        with pytest.raises(ValueError):
            forum.register_user("dave", user_id="  ")

    def test_registered_event(self, forum):
        events = []
        forum.notifier.register(EventName.USER_REGISTERED, events.append)
        user = forum.register_user("carol")
        assert len(events) == 1
        assert events[0].payload == {"userId": user.id, "username": "carol"}

    def test_event_timestamps_follow_clock(self, forum, clock):
        events = []
        forum.notifier.register("*", events.append)
        clock.advance(days=3)
        user = forum.register_user("erin")
        thread = forum.create_thread("GENERAL", user.id, "t", "c")
        clock.advance(minutes=5)
        forum.set_pinned(thread.id)
        assert events[0].timestamp == user.joined_at
        assert events[1].timestamp == thread.created_at
        assert events[-1].timestamp == clock.now


class TestLookup:
    def test_unknown_user(self, forum):
        with pytest.raises(NotFound) as exc_info:
            forum.get_user("user-missing")
        assert exc_info.value.kind == "user"

    def test_returned_user_is_a_copy(self, forum, alice):
        copy = forum.get_user(alice.id)
        copy.stats.reputation = 999
        copy.badges.append("hacked")
        fresh = forum.get_user(alice.id)
        assert fresh.stats.reputation == 0
        assert fresh.badges == []


class TestReputationAndBadges:
    def test_add_reputation_returns_total(self, forum, alice):
        assert forum.add_reputation(alice.id, 10) == 10
        assert forum.add_reputation(alice.id, -3) == 7
        assert forum.get_user(alice.id).stats.reputation == 7

    def test_add_reputation_unknown_user(self, forum):
        with pytest.raises(NotFound):
            forum.add_reputation("user-missing", 1)

    def test_add_badge_once(self, forum, alice):
        assert forum.add_badge(alice.id, "pioneer") is True
        assert forum.add_badge(alice.id, "pioneer") is False
        assert forum.add_badge(alice.id, "helper") is True
        assert forum.get_user(alice.id).badges == ["pioneer", "helper"]


class TestRankChanges:
    def test_rank_follows_posts(self, forum, alice):
        for i in range(5):
            forum.create_thread("GENERAL", alice.id, f"t{i}", "body")
        assert forum.get_user(alice.id).rank == Rank.INITIATE

    def test_rank_changed_event_emitted_once(self, forum, alice):
        events = []
        forum.notifier.register(EventName.USER_RANK_CHANGED, events.append)
        for i in range(6):
            forum.create_thread("GENERAL", alice.id, f"t{i}", "body")
        assert len(events) == 1
        assert events[0].payload == {
            "userId": alice.id, "oldRank": "OBSERVER", "newRank": "INITIATE",
        }

    def test_reputation_does_not_affect_rank(self, forum, alice):
        forum.add_reputation(alice.id, 10_000)
        assert forum.get_user(alice.id).rank == Rank.OBSERVER
