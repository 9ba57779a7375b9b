"""
agora.engine.identity — Identity Registry
===========================================

Owns user records, reputation, and rank derivation.  Every public
method runs under the shared :class:`~agora.engine.store.ForumStore`
lock and returns detached copies; the ``credit_*`` helpers mutate live
records and are meant for the content store, which already holds the
lock when it calls them.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from datetime import datetime

from agora.constants import (
    ENGAGEMENT_REPUTATION,
    REPLY_REPUTATION,
    THREAD_REPUTATION,
    Rank,
    rank_for_posts,
)
from agora.engine.entities import User, new_id, utcnow
from agora.engine.events import EventName, ForumEvent, MutationResult
from agora.engine.store import ForumStore
from agora.errors import DuplicateUserId, DuplicateUsername, NotFound

logger = logging.getLogger(__name__)

__all__ = ["IdentityRegistry", "recompute_rank"]


def recompute_rank(user: User) -> Rank:
    """Pure function of ``user.stats.posts`` against the rank table."""
    return rank_for_posts(user.stats.posts)


class IdentityRegistry:
    """User registration, lookup, reputation, badges."""

    def __init__(
        self,
        store: ForumStore,
        *,
        unique_usernames: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._unique_usernames = unique_usernames
        self._clock = clock

    # -------------------------------------------------------------------
    # Registration & lookup
    # -------------------------------------------------------------------
    def register(
        self,
        username: str,
        *,
        display_name: str | None = None,
        avatar: str | None = None,
        bio: str = "",
        user_id: str | None = None,
    ) -> MutationResult[User]:
        """Create a user with zero stats and rank ``OBSERVER``.

        *user_id* keeps an id issued elsewhere; otherwise one is generated.

        Raises
        ------
        ValueError
            If *username* or an explicit *user_id* is blank.
        DuplicateUserId
            If *user_id* is already registered.
        DuplicateUsername
            If uniqueness is enforced and the name (case-insensitive) exists.
        """
        username = username.strip()
        if not username:
            raise ValueError("username must not be blank")
        if user_id is not None and not user_id.strip():
            raise ValueError("user_id must not be blank")

        with self._store.lock:
            if user_id is not None and user_id in self._store.users:
                raise DuplicateUserId(user_id)
            if self._unique_usernames and self.find_by_username(username) is not None:
                raise DuplicateUsername(username)

            now = self._clock()
            user = User(
                id=user_id or new_id("user"),
                username=username,
                display_name=display_name or username,
                avatar=avatar,
                bio=bio,
                joined_at=now,
                last_active=now,
            )
            self._store.users[user.id] = user
            self._store.counters.total_users += 1
            result = copy.deepcopy(user)

        logger.info("User registered: %s (%s)", username, user.id)
        event = ForumEvent(
            EventName.USER_REGISTERED,
            {"userId": user.id, "username": user.username},
            timestamp=now,
        )
        return MutationResult(result, (event,))

    def find_by_username(self, username: str) -> User | None:
        """Case-insensitive username lookup (first match in store order)."""
        wanted = username.strip().casefold()
        with self._store.lock:
            for user in self._store.users.values():
                if user.username.casefold() == wanted:
                    return copy.deepcopy(user)
        return None

    def get_user(self, user_id: str) -> User:
        with self._store.lock:
            return copy.deepcopy(self.live_user(user_id))

    def get_profile(self, user_id: str) -> dict:
        with self._store.lock:
            return self.live_user(user_id).profile()

    def live_user(self, user_id: str) -> User:
        """The stored record itself.  Caller must hold the store lock."""
        user = self._store.users.get(user_id)
        if user is None:
            raise NotFound("user", user_id)
        return user

    # -------------------------------------------------------------------
    # Reputation & badges
    # -------------------------------------------------------------------
    def add_reputation(self, user_id: str, amount: int) -> MutationResult[int]:
        """Add *amount* to the user's reputation; returns the new total."""
        with self._store.lock:
            user = self.live_user(user_id)
            user.stats.reputation += amount
            return MutationResult(user.stats.reputation)

    def add_badge(self, user_id: str, badge: str) -> MutationResult[bool]:
        """Attach *badge*; returns False when the user already had it."""
        with self._store.lock:
            user = self.live_user(user_id)
            if badge in user.badges:
                return MutationResult(False)
            user.badges.append(badge)
        logger.info("Badge %r added to %s", badge, user_id)
        return MutationResult(True)

    # -------------------------------------------------------------------
    # Activity credit (called by the content store under the lock)
    # -------------------------------------------------------------------
    def _credit_post(self, user: User, reputation: int, *, thread: bool) -> list[ForumEvent]:
        old_rank = recompute_rank(user)
        user.stats.posts += 1
        if thread:
            user.stats.threads += 1
        user.stats.reputation += reputation
        user.last_active = self._clock()

        new_rank = recompute_rank(user)
        if new_rank == old_rank:
            return []
        logger.info("Rank change for %s: %s → %s", user.id, old_rank, new_rank)
        return [
            ForumEvent(
                EventName.USER_RANK_CHANGED,
                {"userId": user.id, "oldRank": old_rank.value, "newRank": new_rank.value},
                timestamp=user.last_active,
            )
        ]

    def credit_thread(self, user: User) -> list[ForumEvent]:
        return self._credit_post(user, THREAD_REPUTATION, thread=True)

    def credit_reply(self, user: User) -> list[ForumEvent]:
        return self._credit_post(user, REPLY_REPUTATION, thread=False)

    def credit_engagement(self, user: User) -> None:
        user.stats.reputation += ENGAGEMENT_REPUTATION

    def credit_reaction(self, user: User) -> None:
        user.stats.reactions_given += 1
        user.last_active = self._clock()
