"""
agora.engine.store — ForumStore (the single owner of live state)
==================================================================

Holds the two keyed collections (threads by id, users by id), the
running counters, and the one lock every mutation runs under.  The
identity registry, content store, and query engine all receive the same
``ForumStore`` handle; there is no module-level state.

Concurrency model:
    * Every mutating operation (including the view-counting read) holds
      :attr:`ForumStore.lock` for its whole duration, so nobody observes a
      reply appended without the matching stat updates.
    * Aggregating reads call :meth:`ForumStore.snapshot`, which deep-copies
      the collections under the lock and lets the caller compute outside it.

The lock is re-entrant so a content-store operation can call into the
identity registry while already holding it.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field

from agora.engine.entities import Thread, User

__all__ = ["ForumCounters", "ForumSnapshot", "ForumStore"]


@dataclass(slots=True)
class ForumCounters:
    """Running totals.  They count creations and never decrease."""

    total_threads: int = 0
    total_replies: int = 0
    total_users: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_threads": self.total_threads,
            "total_replies": self.total_replies,
            "total_users": self.total_users,
        }


@dataclass(frozen=True, slots=True)
class ForumSnapshot:
    """Point-in-time, detached copy of the store contents.

    Thread and user sequences are in store (insertion) order.
    """

    threads: tuple[Thread, ...] = ()
    users: tuple[User, ...] = ()
    counters: ForumCounters = field(default_factory=ForumCounters)


class ForumStore:
    """In-memory state for one forum instance."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.threads: dict[str, Thread] = {}
        self.users: dict[str, User] = {}
        self.counters = ForumCounters()

    def snapshot(self) -> ForumSnapshot:
        """Deep copy of everything, taken atomically under the lock."""
        with self.lock:
            return ForumSnapshot(
                threads=tuple(copy.deepcopy(list(self.threads.values()))),
                users=tuple(copy.deepcopy(list(self.users.values()))),
                counters=copy.copy(self.counters),
            )

    def replace(
        self,
        threads: list[Thread],
        users: list[User],
        counters: ForumCounters,
    ) -> None:
        """Swap in a full set of contents (used when loading a snapshot)."""
        with self.lock:
            self.threads = {t.id: t for t in threads}
            self.users = {u.id: u for u in users}
            self.counters = counters

    def clear(self) -> None:
        self.replace([], [], ForumCounters())

    def __len__(self) -> int:
        return len(self.threads)
