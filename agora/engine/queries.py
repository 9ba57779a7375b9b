"""
agora.engine.queries — Query Engine (read side)
=================================================

Stateless computations over a :class:`~agora.engine.store.ForumSnapshot`:
trending, latest, leaderboards, per-category and global statistics.
Nothing here takes the store lock or mutates anything; callers take one
snapshot and pass it in, so a single answer is internally consistent.

Trending score::

    score = views + 3 × reply_count + 2 × Σ(reaction counts)

Only threads whose ``updated_at`` falls strictly inside the trailing
window are eligible; the rest are excluded outright, however popular.
All sorts are stable, so ties keep store order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from agora.constants import ONLINE_WINDOW_MINUTES, TRENDING_WINDOW_HOURS
from agora.engine.entities import Thread, User
from agora.engine.store import ForumSnapshot
from agora.engine.taxonomy import Taxonomy

__all__ = [
    "REPLY_WEIGHT",
    "REACTION_WEIGHT",
    "CategoryStats",
    "categories_with_stats",
    "category_stats",
    "forum_statistics",
    "latest_threads",
    "most_active_users",
    "top_contributors",
    "trending_score",
    "trending_threads",
]

REPLY_WEIGHT = 3
REACTION_WEIGHT = 2


# ---------------------------------------------------------------------------
# Threads
# ---------------------------------------------------------------------------
def trending_score(thread: Thread) -> int:
    return thread.views + REPLY_WEIGHT * thread.reply_count + REACTION_WEIGHT * thread.reaction_total


def trending_threads(
    threads: Iterable[Thread],
    now: datetime,
    *,
    limit: int = 10,
    window: timedelta = timedelta(hours=TRENDING_WINDOW_HOURS),
) -> list[Thread]:
    """ACTIVE threads updated inside the window, highest score first."""
    cutoff = now - window
    eligible = [t for t in threads if t.is_active and t.updated_at > cutoff]
    return sorted(eligible, key=trending_score, reverse=True)[:limit]


def latest_threads(threads: Iterable[Thread], *, limit: int = 10) -> list[Thread]:
    active = [t for t in threads if t.is_active]
    return sorted(active, key=lambda t: t.created_at, reverse=True)[:limit]


# ---------------------------------------------------------------------------
# Leaderboards
# ---------------------------------------------------------------------------
def top_contributors(users: Iterable[User], *, limit: int = 10) -> list[dict]:
    """Public profiles ordered by reputation."""
    ranked = sorted(users, key=lambda u: u.stats.reputation, reverse=True)
    return [u.profile() for u in ranked[:limit]]


def most_active_users(users: Iterable[User], *, limit: int = 10) -> list[dict]:
    """Public profiles ordered by post count."""
    ranked = sorted(users, key=lambda u: u.stats.posts, reverse=True)
    return [u.profile() for u in ranked[:limit]]


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CategoryStats:
    thread_count: int = 0
    reply_count: int = 0
    view_count: int = 0
    latest_thread: Thread | None = None

    def to_dict(self) -> dict:
        return {
            "thread_count": self.thread_count,
            "reply_count": self.reply_count,
            "view_count": self.view_count,
            "latest_thread": self.latest_thread.summary() if self.latest_thread else None,
        }


def category_stats(threads: Iterable[Thread], category_id: str) -> CategoryStats:
    """Aggregates over every thread filed under *category_id* (any status)."""
    in_category = [t for t in threads if t.category_id == category_id]
    latest = max(in_category, key=lambda t: t.created_at, default=None)
    return CategoryStats(
        thread_count=len(in_category),
        reply_count=sum(t.reply_count for t in in_category),
        view_count=sum(t.views for t in in_category),
        latest_thread=latest,
    )


def categories_with_stats(snapshot: ForumSnapshot, taxonomy: Taxonomy) -> list[dict]:
    return [
        {**category.to_dict(), "stats": category_stats(snapshot.threads, category.id).to_dict()}
        for category in taxonomy
    ]


def forum_statistics(
    snapshot: ForumSnapshot,
    taxonomy: Taxonomy,
    now: datetime,
    *,
    online_window: timedelta = timedelta(minutes=ONLINE_WINDOW_MINUTES),
) -> dict[str, int]:
    """Running counters plus users active within *online_window*."""
    cutoff = now - online_window
    online = sum(1 for u in snapshot.users if u.last_active >= cutoff)
    return {
        **snapshot.counters.to_dict(),
        "categories_count": len(taxonomy),
        "online_users": online,
    }
