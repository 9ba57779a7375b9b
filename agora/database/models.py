"""
agora.database.models — SQLAlchemy 2.0 Snapshot Tables
========================================================

Durable mirror of the in-memory forum state.  These rows are written
and read only by :mod:`agora.services.snapshot_service`; the live engine
never queries them.

Tables:
- users           — Member profiles and engagement counters
- user_badges     — Earned badge tags, in award order
- threads         — Discussion threads (tags + reaction counts as JSON)
- replies         — Replies, ordered by position within their thread
- forum_counters  — Running totals (threads / replies / users created)

Rank is derived from ``users.posts`` and deliberately not stored.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Agora ORM models."""


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class UserRecord(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(500), default=None)
    bio: Mapped[str] = mapped_column(Text, default="")
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_active: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    posts: Mapped[int] = mapped_column(Integer, default=0)
    threads: Mapped[int] = mapped_column(Integer, default=0)
    reactions_given: Mapped[int] = mapped_column(Integer, default=0)
    reputation: Mapped[int] = mapped_column(Integer, default=0)
    position: Mapped[int] = mapped_column(Integer, nullable=False)  # store order

    badges: Mapped[list[UserBadge]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserBadge.position",
    )

    __table_args__ = (
        Index("ix_users_username", "username"),
    )

    def __repr__(self) -> str:
        return f"<UserRecord id={self.id} name={self.username!r}>"


class UserBadge(Base):
    __tablename__ = "user_badges"

    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    badge: Mapped[str] = mapped_column(String(100), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    user: Mapped[UserRecord] = relationship(back_populates="badges")


# ---------------------------------------------------------------------------
# Threads & replies
# ---------------------------------------------------------------------------
class ThreadRecord(Base):
    __tablename__ = "threads"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    category_id: Mapped[str] = mapped_column(String(50), nullable=False)
    subcategory_id: Mapped[str | None] = mapped_column(String(50), default=None)
    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0)
    reactions: Mapped[dict] = mapped_column(JSON, default=dict)
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    position: Mapped[int] = mapped_column(Integer, nullable=False)  # store order

    replies: Mapped[list[ReplyRecord]] = relationship(
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="ReplyRecord.position",
    )

    __table_args__ = (
        Index("ix_threads_category", "category_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<ThreadRecord id={self.id} title={self.title!r}>"


class ReplyRecord(Base):
    __tablename__ = "replies"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    thread_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("threads.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    reactions: Mapped[dict] = mapped_column(JSON, default=dict)
    is_answer: Mapped[bool] = mapped_column(Boolean, default=False)

    thread: Mapped[ThreadRecord] = relationship(back_populates="replies")

    __table_args__ = (
        Index("ix_replies_thread_position", "thread_id", "position"),
    )


# ---------------------------------------------------------------------------
# Counters — key/value running totals
# ---------------------------------------------------------------------------
class ForumCounter(Base):
    __tablename__ = "forum_counters"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, default=0)
