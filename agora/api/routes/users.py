"""
agora.api.routes.users — Member registration & profiles
=========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from agora.api.deps import get_forum
from agora.services.forum_service import ForumService

router = APIRouter(tags=["users"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class UserCreate(BaseModel):
    id: str | None = Field(default=None, min_length=1, max_length=64)
    username: str = Field(min_length=1, max_length=100)
    display_name: str | None = Field(default=None, max_length=100)
    avatar: str | None = None
    bio: str = ""


class BadgeAward(BaseModel):
    badge: str = Field(min_length=1, max_length=100)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.post("/users", status_code=201)
def register_user(body: UserCreate, forum: ForumService = Depends(get_forum)):
    user = forum.register_user(
        body.username,
        display_name=body.display_name,
        avatar=body.avatar,
        bio=body.bio,
        user_id=body.id,
    )
    return user.profile()


@router.get("/users/{user_id}")
def get_user(user_id: str, forum: ForumService = Depends(get_forum)):
    """Public profile: stats, rank, badges."""
    return forum.get_user_profile(user_id)


@router.post("/users/{user_id}/badges")
def add_badge(user_id: str, body: BadgeAward, forum: ForumService = Depends(get_forum)):
    added = forum.add_badge(user_id, body.badge)
    return {"added": added, "badges": forum.get_user(user_id).badges}
