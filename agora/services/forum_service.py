"""
agora.services.forum_service — Forum Facade
=============================================

The single object outer layers (API, CLI, tests) talk to.  It wires the
shared :class:`ForumStore` into the identity registry, content store and
query engine, and relays the events each mutation returns to the
:class:`EventNotifier` *after* the mutation has committed.

Every mutation follows the pattern:
  1. Engine operation runs under the store lock
  2. Lock released; (value, events) returned
  3. Events dispatched to listeners
  4. Value returned to the caller

Usage::

    forum = ForumService(load_config())
    forum.notifier.register("*", relay_to_websockets)

    alice = forum.register_user("alice")
    thread = forum.create_thread("GAMES", alice.id, "Oracle strategy guide", "…")
    forum.add_reply(thread.id, alice.id, "bump")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import TypeVar

from agora.config import AgoraConfig
from agora.constants import ReactionKind
from agora.engine.content import ContentStore, ThreadPage
from agora.engine.entities import Reply, Thread, User, utcnow
from agora.engine.events import MutationResult
from agora.engine.identity import IdentityRegistry
from agora.engine.queries import (
    CategoryStats,
    categories_with_stats,
    category_stats,
    forum_statistics,
    latest_threads,
    most_active_users,
    top_contributors,
    trending_threads,
)
from agora.engine.store import ForumStore
from agora.engine.taxonomy import Taxonomy
from agora.services.notifier import EventNotifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = ["ForumService"]


class ForumService:
    """Mutations, lookups and discovery queries for one forum."""

    def __init__(
        self,
        config: AgoraConfig | None = None,
        *,
        store: ForumStore | None = None,
        taxonomy: Taxonomy | None = None,
        notifier: EventNotifier | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.config = config or AgoraConfig()
        self.store = store or ForumStore()
        self.taxonomy = taxonomy or Taxonomy()
        self.notifier = notifier or EventNotifier()
        self._clock = clock

        self.identity = IdentityRegistry(
            self.store,
            unique_usernames=self.config.unique_usernames,
            clock=clock,
        )
        self.content = ContentStore(
            self.store,
            self.identity,
            self.taxonomy,
            clock=clock,
            default_page_size=self.config.default_page_size,
            search_limit=self.config.search_result_limit,
        )

    def _commit(self, result: MutationResult[T]) -> T:
        self.notifier.dispatch(result.events)
        return result.value

    # -------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------
    def register_user(
        self,
        username: str,
        *,
        display_name: str | None = None,
        avatar: str | None = None,
        bio: str = "",
        user_id: str | None = None,
    ) -> User:
        return self._commit(
            self.identity.register(
                username, display_name=display_name, avatar=avatar, bio=bio, user_id=user_id,
            )
        )

    def get_user(self, user_id: str) -> User:
        return self.identity.get_user(user_id)

    def get_user_profile(self, user_id: str) -> dict:
        return self.identity.get_profile(user_id)

    def add_reputation(self, user_id: str, amount: int) -> int:
        return self._commit(self.identity.add_reputation(user_id, amount))

    def add_badge(self, user_id: str, badge: str) -> bool:
        return self._commit(self.identity.add_badge(user_id, badge))

    # -------------------------------------------------------------------
    # Threads, replies, reactions
    # -------------------------------------------------------------------
    def create_thread(
        self,
        category_id: str,
        author_id: str,
        title: str,
        content: str,
        *,
        subcategory_id: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> Thread:
        return self._commit(
            self.content.create_thread(
                category_id, author_id, title, content,
                subcategory_id=subcategory_id, tags=tags,
            )
        )

    def get_thread(self, thread_id: str) -> Thread:
        """Fetch a thread.  Counts as a view."""
        return self._commit(self.content.get_thread(thread_id))

    def add_reply(self, thread_id: str, author_id: str, content: str) -> Reply:
        return self._commit(self.content.add_reply(thread_id, author_id, content))

    def add_reaction(
        self,
        thread_id: str,
        reaction_kind: str,
        *,
        reply_id: str | None = None,
        user_id: str | None = None,
    ) -> ReactionKind | None:
        return self._commit(
            self.content.add_reaction(thread_id, reaction_kind, reply_id=reply_id, user_id=user_id)
        )

    def set_pinned(self, thread_id: str, pinned: bool = True) -> Thread:
        return self._commit(self.content.set_pinned(thread_id, pinned))

    def set_locked(self, thread_id: str, locked: bool = True) -> Thread:
        return self._commit(self.content.set_locked(thread_id, locked))

    def remove_thread(self, thread_id: str) -> Thread:
        return self._commit(self.content.remove_thread(thread_id))

    def mark_answer(self, thread_id: str, reply_id: str) -> Reply:
        return self._commit(self.content.mark_answer(thread_id, reply_id))

    # -------------------------------------------------------------------
    # Listing & search
    # -------------------------------------------------------------------
    def list_by_category(
        self,
        category_id: str,
        subcategory_id: str | None = None,
        *,
        sort: str = "active",
        page: int = 1,
        limit: int | None = None,
    ) -> ThreadPage:
        return self.content.list_by_category(
            category_id, subcategory_id, sort=sort, page=page, limit=limit,
        )

    def search(self, query: str) -> list[Thread]:
        return self.content.search(query)

    # -------------------------------------------------------------------
    # Discovery (snapshot-based)
    # -------------------------------------------------------------------
    def get_trending_threads(self, limit: int = 10) -> list[Thread]:
        return trending_threads(
            self.store.snapshot().threads,
            self._clock(),
            limit=limit,
            window=timedelta(hours=self.config.trending_window_hours),
        )

    def get_latest_threads(self, limit: int = 10) -> list[Thread]:
        return latest_threads(self.store.snapshot().threads, limit=limit)

    def get_top_contributors(self, limit: int = 10) -> list[dict]:
        return top_contributors(self.store.snapshot().users, limit=limit)

    def get_most_active_users(self, limit: int = 10) -> list[dict]:
        return most_active_users(self.store.snapshot().users, limit=limit)

    def get_category_stats(self, category_id: str) -> CategoryStats:
        self.taxonomy.validate(category_id)
        return category_stats(self.store.snapshot().threads, category_id)

    def get_categories_with_stats(self) -> list[dict]:
        return categories_with_stats(self.store.snapshot(), self.taxonomy)

    def get_statistics(self) -> dict[str, int]:
        return forum_statistics(
            self.store.snapshot(),
            self.taxonomy,
            self._clock(),
            online_window=timedelta(minutes=self.config.online_window_minutes),
        )
