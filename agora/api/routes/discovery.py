"""
agora.api.routes.discovery — Categories, search, and leaderboards
===================================================================

Read-only endpoints.  Aggregates are computed over a point-in-time
snapshot of the forum, so a listing never mixes pre- and post-mutation
state.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from agora.api.deps import get_forum
from agora.services.forum_service import ForumService

router = APIRouter(tags=["discovery"])


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
@router.get("/categories")
def list_categories(forum: ForumService = Depends(get_forum)):
    """Every category with its subcategories and aggregate stats."""
    return forum.get_categories_with_stats()


@router.get("/categories/{category_id}/threads")
def list_category_threads(
    category_id: str,
    subcategory: str | None = None,
    sort: str = "active",
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    forum: ForumService = Depends(get_forum),
):
    """Paginated active threads; pinned threads lead."""
    forum.taxonomy.validate(category_id, subcategory)
    result = forum.list_by_category(
        category_id, subcategory, sort=sort, page=page, limit=limit,
    )
    return result.to_dict()


@router.get("/categories/{category_id}/stats")
def get_category_stats(category_id: str, forum: ForumService = Depends(get_forum)):
    return forum.get_category_stats(category_id).to_dict()


# ---------------------------------------------------------------------------
# Search & feeds
# ---------------------------------------------------------------------------
@router.get("/search")
def search(q: str = Query(..., min_length=1), forum: ForumService = Depends(get_forum)):
    return [t.summary() for t in forum.search(q)]


@router.get("/trending")
def trending(limit: int = Query(10, ge=1, le=100), forum: ForumService = Depends(get_forum)):
    return [t.summary() for t in forum.get_trending_threads(limit)]


@router.get("/latest")
def latest(limit: int = Query(10, ge=1, le=100), forum: ForumService = Depends(get_forum)):
    return [t.summary() for t in forum.get_latest_threads(limit)]


# ---------------------------------------------------------------------------
# Leaderboards & stats
# ---------------------------------------------------------------------------
@router.get("/leaderboard/{board}")
def leaderboard(
    board: str,
    limit: int = Query(10, ge=1, le=100),
    forum: ForumService = Depends(get_forum),
):
    """Top users by ``reputation`` or ``posts``.  Unknown boards rank by reputation."""
    if board == "posts":
        users = forum.get_most_active_users(limit)
    else:
        board = "reputation"
        users = forum.get_top_contributors(limit)
    return {"board": board, "users": users}


@router.get("/stats")
def statistics(forum: ForumService = Depends(get_forum)):
    return forum.get_statistics()
