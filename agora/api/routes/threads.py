"""
agora.api.routes.threads — Threads, replies, reactions, moderation
====================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from agora.api.deps import get_forum
from agora.services.forum_service import ForumService

router = APIRouter(tags=["threads"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class ThreadCreate(BaseModel):
    category_id: str
    subcategory_id: str | None = None
    author_id: str
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)


class ReplyCreate(BaseModel):
    author_id: str
    content: str = Field(min_length=1)


class ReactionCreate(BaseModel):
    reaction: str
    reply_id: str | None = None
    user_id: str | None = None


class PinUpdate(BaseModel):
    pinned: bool = True


class LockUpdate(BaseModel):
    locked: bool = True


# ---------------------------------------------------------------------------
# Threads
# ---------------------------------------------------------------------------
@router.post("/threads", status_code=201)
def create_thread(body: ThreadCreate, forum: ForumService = Depends(get_forum)):
    thread = forum.create_thread(
        body.category_id,
        body.author_id,
        body.title,
        body.content,
        subcategory_id=body.subcategory_id,
        tags=body.tags,
    )
    return thread.to_dict()


@router.get("/threads/{thread_id}")
def get_thread(thread_id: str, forum: ForumService = Depends(get_forum)):
    """Full thread with replies.  Every call counts as a view."""
    return forum.get_thread(thread_id).to_dict()


@router.delete("/threads/{thread_id}")
def remove_thread(thread_id: str, forum: ForumService = Depends(get_forum)):
    return forum.remove_thread(thread_id).summary()


# ---------------------------------------------------------------------------
# Replies & reactions
# ---------------------------------------------------------------------------
@router.post("/threads/{thread_id}/replies", status_code=201)
def add_reply(thread_id: str, body: ReplyCreate, forum: ForumService = Depends(get_forum)):
    return forum.add_reply(thread_id, body.author_id, body.content).to_dict()


@router.post("/threads/{thread_id}/reactions")
def add_reaction(thread_id: str, body: ReactionCreate, forum: ForumService = Depends(get_forum)):
    """Unknown reaction names are accepted and ignored (``applied: false``)."""
    kind = forum.add_reaction(
        thread_id, body.reaction, reply_id=body.reply_id, user_id=body.user_id,
    )
    return {"applied": kind is not None, "reaction": kind.value if kind else None}


@router.post("/threads/{thread_id}/replies/{reply_id}/answer")
def mark_answer(thread_id: str, reply_id: str, forum: ForumService = Depends(get_forum)):
    return forum.mark_answer(thread_id, reply_id).to_dict()


# ---------------------------------------------------------------------------
# Moderation flags
# ---------------------------------------------------------------------------
@router.post("/threads/{thread_id}/pin")
def set_pinned(thread_id: str, body: PinUpdate, forum: ForumService = Depends(get_forum)):
    return forum.set_pinned(thread_id, body.pinned).summary()


@router.post("/threads/{thread_id}/lock")
def set_locked(thread_id: str, body: LockUpdate, forum: ForumService = Depends(get_forum)):
    return forum.set_locked(thread_id, body.locked).summary()
