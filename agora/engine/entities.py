"""
agora.engine.entities — In-Memory Forum Entities
==================================================

Plain dataclasses for the live forum state.  The engine owns and
mutates these under the :class:`~agora.engine.store.ForumStore` lock;
everything handed to callers is a deep copy.

Rank is *not* a field: it is derived from ``stats.posts`` through
:func:`agora.constants.rank_for_posts` every time it is read.
"""

from __future__ import annotations

import enum
import secrets
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime

from agora.constants import (
    RANKS,
    Rank,
    RankInfo,
    ReactionKind,
    empty_reactions,
    rank_for_posts,
)

__all__ = [
    "Reply",
    "Thread",
    "ThreadStatus",
    "User",
    "UserStats",
    "new_id",
    "utcnow",
]


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id(prefix: str) -> str:
    """Collision-resistant id: ``<prefix>-<epoch millis>-<8 hex chars>``."""
    return f"{prefix}-{time.time_ns() // 1_000_000}-{secrets.token_hex(4)}"


class ThreadStatus(enum.StrEnum):
    ACTIVE = "ACTIVE"
    REMOVED = "REMOVED"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class UserStats:
    """Per-user engagement counters.  All values are non-negative."""

    posts: int = 0
    threads: int = 0
    reactions_given: int = 0
    reputation: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "posts": self.posts,
            "threads": self.threads,
            "reactions_given": self.reactions_given,
            "reputation": self.reputation,
        }


@dataclass(slots=True)
class User:
    id: str
    username: str
    display_name: str
    avatar: str | None = None
    bio: str = ""
    joined_at: datetime = field(default_factory=utcnow)
    last_active: datetime = field(default_factory=utcnow)
    stats: UserStats = field(default_factory=UserStats)
    badges: list[str] = field(default_factory=list)

    @property
    def rank(self) -> Rank:
        return rank_for_posts(self.stats.posts)

    @property
    def rank_info(self) -> RankInfo:
        return RANKS[self.rank]

    def profile(self) -> dict:
        """Public profile shape.  Stats and rank are read-only to consumers."""
        return {
            "id": self.id,
            "username": self.username,
            "display_name": self.display_name,
            "avatar": self.avatar,
            "bio": self.bio,
            "joined_at": self.joined_at.isoformat(),
            "stats": self.stats.to_dict(),
            "rank": self.rank.value,
            "rank_info": self.rank_info.to_dict(),
            "badges": list(self.badges),
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.username!r} rank={self.rank}>"


# ---------------------------------------------------------------------------
# Threads & replies
# ---------------------------------------------------------------------------
def _reactions_dict(reactions: dict[ReactionKind, int]) -> dict[str, int]:
    return {kind.value: count for kind, count in reactions.items()}


@dataclass(slots=True)
class Reply:
    id: str
    author_id: str
    content: str
    created_at: datetime = field(default_factory=utcnow)
    reactions: dict[ReactionKind, int] = field(default_factory=empty_reactions)
    is_answer: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "author_id": self.author_id,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "reactions": _reactions_dict(self.reactions),
            "is_answer": self.is_answer,
        }


@dataclass(slots=True)
class Thread:
    id: str
    title: str
    category_id: str
    author_id: str
    content: str
    subcategory_id: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    views: int = 0
    replies: list[Reply] = field(default_factory=list)
    reactions: dict[ReactionKind, int] = field(default_factory=empty_reactions)
    is_pinned: bool = False
    is_locked: bool = False
    status: ThreadStatus = ThreadStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == ThreadStatus.ACTIVE

    @property
    def reply_count(self) -> int:
        return len(self.replies)

    @property
    def reaction_total(self) -> int:
        return sum(self.reactions.values())

    def find_reply(self, reply_id: str) -> Reply | None:
        for reply in self.replies:
            if reply.id == reply_id:
                return reply
        return None

    def summary(self) -> dict:
        """Compact listing shape (no reply bodies)."""
        return {
            "id": self.id,
            "title": self.title,
            "category_id": self.category_id,
            "subcategory_id": self.subcategory_id,
            "author_id": self.author_id,
            "tags": list(self.tags),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "views": self.views,
            "reply_count": self.reply_count,
            "reactions": _reactions_dict(self.reactions),
            "is_pinned": self.is_pinned,
            "is_locked": self.is_locked,
            "status": self.status.value,
        }

    def to_dict(self) -> dict:
        return {
            **self.summary(),
            "content": self.content,
            "replies": [r.to_dict() for r in self.replies],
        }

    def __repr__(self) -> str:
        return f"<Thread id={self.id} title={self.title!r} status={self.status}>"
