"""
agora.constants — Shared Constants & Helpers
==============================================

Single source of truth for the rank table, reaction kinds, and the
reputation awards.  Import from here instead of duplicating in the
engine, services, and API.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Reactions — closed set; anything else is ignored by the content store
# ---------------------------------------------------------------------------
class ReactionKind(enum.StrEnum):
    FIRE = "fire"
    MIND_BLOWN = "mind_blown"
    HELPFUL = "helpful"
    CREATIVE = "creative"


def parse_reaction(value: str) -> ReactionKind | None:
    """Return the matching :class:`ReactionKind`, or None if unrecognized."""
    try:
        return ReactionKind(value)
    except ValueError:
        return None


def empty_reactions() -> dict[ReactionKind, int]:
    """A zeroed counter for every reaction kind."""
    return {kind: 0 for kind in ReactionKind}


# ---------------------------------------------------------------------------
# Reputation awards
# ---------------------------------------------------------------------------
THREAD_REPUTATION = 5
REPLY_REPUTATION = 1
ENGAGEMENT_REPUTATION = 1  # thread author, when someone else replies


# ---------------------------------------------------------------------------
# Ranks — ordered lowest → highest
# ---------------------------------------------------------------------------
class Rank(enum.StrEnum):
    OBSERVER = "OBSERVER"
    INITIATE = "INITIATE"
    AWAKENED = "AWAKENED"
    ARCHITECT = "ARCHITECT"
    ORACLE = "ORACLE"
    ELDER = "ELDER"
    DIVINE = "DIVINE"


@dataclass(frozen=True, slots=True)
class RankInfo:
    """Display metadata for a rank tier."""

    level: int
    name: str
    icon: str
    min_posts: int
    color: str

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "name": self.name,
            "icon": self.icon,
            "min_posts": self.min_posts,
            "color": self.color,
        }


RANKS: dict[Rank, RankInfo] = {
    Rank.OBSERVER: RankInfo(0, "Observer", "\U0001f441\ufe0f", 0, "#808080"),
    Rank.INITIATE: RankInfo(1, "Initiate", "\U0001f331", 5, "#2ECC71"),
    Rank.AWAKENED: RankInfo(2, "Awakened", "\u2728", 25, "#3498DB"),
    Rank.ARCHITECT: RankInfo(3, "Architect", "\U0001f3db\ufe0f", 100, "#9B59B6"),
    Rank.ORACLE: RankInfo(4, "Oracle", "\U0001f52e", 500, "#F1C40F"),
    Rank.ELDER: RankInfo(5, "Elder", "\U0001f451", 1000, "#E74C3C"),
    Rank.DIVINE: RankInfo(6, "Divine", "\u26a1", 5000, "#00FFFF"),
}


# ---------------------------------------------------------------------------
# Rank formula — THE single canonical implementation
# ---------------------------------------------------------------------------
def rank_for_posts(posts: int) -> Rank:
    """Highest rank whose ``min_posts`` does not exceed *posts*.

    Scans the table from the top tier down and returns the first match.
    """
    for rank in reversed(RANKS):
        if posts >= RANKS[rank].min_posts:
            return rank
    return Rank.OBSERVER


# ---------------------------------------------------------------------------
# Query limits
# ---------------------------------------------------------------------------
SEARCH_RESULT_LIMIT = 50
DEFAULT_PAGE_SIZE = 20
TRENDING_WINDOW_HOURS = 24
ONLINE_WINDOW_MINUTES = 15
