"""
agora.services.snapshot_service — Save / Load the Forum Store
===============================================================

Durable storage is a snapshot, not a live backend: the whole
:class:`~agora.engine.store.ForumStore` is written in one transaction
and read back in one pass.

* :func:`save_snapshot` replaces every stored row.  Either the new
  snapshot commits in full or the previous one stays untouched.
* :func:`load_snapshot` rebuilds users, threads, replies and counters
  and swaps them into the store atomically.  Store order (which the
  listing and trending tie-breaks depend on) survives the round trip
  through the ``position`` columns.

Both are synchronous; async hosts call them through
:func:`agora.database.engine.run_db`.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Engine, delete, select
from sqlalchemy.orm import Session

from agora.constants import ReactionKind
from agora.database.engine import get_session
from agora.database.models import (
    ForumCounter,
    ReplyRecord,
    ThreadRecord,
    UserBadge,
    UserRecord,
)
from agora.engine.entities import Reply, Thread, ThreadStatus, User, UserStats
from agora.engine.store import ForumCounters, ForumStore

logger = logging.getLogger(__name__)

__all__ = ["load_snapshot", "save_snapshot"]


def _aware(value: datetime) -> datetime:
    """SQLite drops tzinfo on the way back; everything stored is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _reactions_from_json(raw: dict | None) -> dict[ReactionKind, int]:
    raw = raw or {}
    return {kind: int(raw.get(kind.value, 0)) for kind in ReactionKind}


def _reactions_to_json(reactions: dict[ReactionKind, int]) -> dict[str, int]:
    return {kind.value: count for kind, count in reactions.items()}


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------
def save_snapshot(engine: Engine, store: ForumStore) -> dict[str, int]:
    """Persist a point-in-time copy of *store*.  Returns row counts."""
    snap = store.snapshot()

    with get_session(engine) as session:
        # Children first so FK constraints hold on backends that enforce them
        for model in (ReplyRecord, UserBadge, ThreadRecord, UserRecord, ForumCounter):
            session.execute(delete(model))

        for pos, user in enumerate(snap.users):
            record = UserRecord(
                id=user.id,
                username=user.username,
                display_name=user.display_name,
                avatar=user.avatar,
                bio=user.bio,
                joined_at=user.joined_at,
                last_active=user.last_active,
                posts=user.stats.posts,
                threads=user.stats.threads,
                reactions_given=user.stats.reactions_given,
                reputation=user.stats.reputation,
                position=pos,
            )
            record.badges = [
                UserBadge(badge=badge, position=i) for i, badge in enumerate(user.badges)
            ]
            session.add(record)

        reply_count = 0
        for pos, thread in enumerate(snap.threads):
            record = ThreadRecord(
                id=thread.id,
                title=thread.title,
                category_id=thread.category_id,
                subcategory_id=thread.subcategory_id,
                author_id=thread.author_id,
                content=thread.content,
                tags=list(thread.tags),
                created_at=thread.created_at,
                updated_at=thread.updated_at,
                views=thread.views,
                reactions=_reactions_to_json(thread.reactions),
                is_pinned=thread.is_pinned,
                is_locked=thread.is_locked,
                status=thread.status.value,
                position=pos,
            )
            record.replies = [
                ReplyRecord(
                    id=reply.id,
                    position=i,
                    author_id=reply.author_id,
                    content=reply.content,
                    created_at=reply.created_at,
                    reactions=_reactions_to_json(reply.reactions),
                    is_answer=reply.is_answer,
                )
                for i, reply in enumerate(thread.replies)
            ]
            reply_count += len(thread.replies)
            session.add(record)

        for key, value in snap.counters.to_dict().items():
            session.add(ForumCounter(key=key, value=value))

    counts = {"users": len(snap.users), "threads": len(snap.threads), "replies": reply_count}
    logger.info(
        "Snapshot saved: %d users, %d threads, %d replies",
        counts["users"], counts["threads"], counts["replies"],
    )
    return counts


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------
def _user_from_record(record: UserRecord) -> User:
    return User(
        id=record.id,
        username=record.username,
        display_name=record.display_name,
        avatar=record.avatar,
        bio=record.bio or "",
        joined_at=_aware(record.joined_at),
        last_active=_aware(record.last_active),
        stats=UserStats(
            posts=record.posts,
            threads=record.threads,
            reactions_given=record.reactions_given,
            reputation=record.reputation,
        ),
        badges=[b.badge for b in record.badges],
    )


def _thread_from_record(record: ThreadRecord) -> Thread:
    return Thread(
        id=record.id,
        title=record.title,
        category_id=record.category_id,
        subcategory_id=record.subcategory_id,
        author_id=record.author_id,
        content=record.content,
        tags=list(record.tags or []),
        created_at=_aware(record.created_at),
        updated_at=_aware(record.updated_at),
        views=record.views,
        replies=[
            Reply(
                id=r.id,
                author_id=r.author_id,
                content=r.content,
                created_at=_aware(r.created_at),
                reactions=_reactions_from_json(r.reactions),
                is_answer=r.is_answer,
            )
            for r in record.replies
        ],
        reactions=_reactions_from_json(record.reactions),
        is_pinned=record.is_pinned,
        is_locked=record.is_locked,
        status=ThreadStatus(record.status),
    )


def load_snapshot(engine: Engine, store: ForumStore) -> bool:
    """Replace *store* contents with the persisted snapshot.

    Returns False (store untouched) when the database holds no snapshot.
    """
    with Session(engine) as session:
        user_rows = session.scalars(select(UserRecord).order_by(UserRecord.position)).all()
        thread_rows = session.scalars(select(ThreadRecord).order_by(ThreadRecord.position)).all()
        counter_rows = {c.key: c.value for c in session.scalars(select(ForumCounter)).all()}

        if not user_rows and not thread_rows and not counter_rows:
            logger.info("No snapshot found — starting with an empty forum")
            return False

        users = [_user_from_record(r) for r in user_rows]
        threads = [_thread_from_record(r) for r in thread_rows]

    counters = ForumCounters(
        total_threads=counter_rows.get("total_threads", len(threads)),
        total_replies=counter_rows.get("total_replies", sum(t.reply_count for t in threads)),
        total_users=counter_rows.get("total_users", len(users)),
    )
    store.replace(threads, users, counters)
    logger.info("Snapshot loaded: %d users, %d threads", len(users), len(threads))
    return True
