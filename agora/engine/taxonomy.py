"""
agora.engine.taxonomy — Static Category Tree
==============================================

The category / subcategory catalogue threads are filed under.  It is
immutable for the lifetime of the process and consulted read-only by
the content store for validation and by the query engine for per-category
statistics.

A deployment can supply its own tree by passing a different tuple of
:class:`Category` objects to :class:`Taxonomy`; the default is
:data:`DEFAULT_CATEGORIES`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from agora.errors import InvalidCategory

__all__ = ["DEFAULT_CATEGORIES", "Category", "Subcategory", "Taxonomy"]


@dataclass(frozen=True, slots=True)
class Subcategory:
    id: str
    name: str
    icon: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "icon": self.icon}


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    name: str
    icon: str
    description: str
    subcategories: tuple[Subcategory, ...] = ()

    def has_subcategory(self, subcategory_id: str) -> bool:
        return any(s.id == subcategory_id for s in self.subcategories)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "description": self.description,
            "subcategories": [s.to_dict() for s in self.subcategories],
        }


def _cat(id: str, name: str, icon: str, description: str, *subs: tuple[str, str, str]) -> Category:
    return Category(id, name, icon, description, tuple(Subcategory(*s) for s in subs))


# ---------------------------------------------------------------------------
# Default catalogue
# ---------------------------------------------------------------------------
DEFAULT_CATEGORIES: tuple[Category, ...] = (
    _cat(
        "GENERAL", "General Discussion", "\U0001f4ac",
        "General community discussion.",
        ("announcements", "Announcements", "\U0001f4e2"),
        ("introductions", "Introductions", "\U0001f44b"),
        ("feedback", "Feedback & Suggestions", "\U0001f4a1"),
        ("off-topic", "Off Topic", "\U0001f300"),
    ),
    _cat(
        "GAMES", "Game Discussions", "\U0001f3ae",
        "Master the games.",
        ("architect", "ARCHITECT", "\U0001f3db\ufe0f"),
        ("oracle", "ORACLE", "\U0001f52e"),
        ("pantheon", "PANTHEON", "\u26a1"),
        ("forge", "FORGE", "\U0001f525"),
        ("empire", "EMPIRE", "\U0001f451"),
        ("echo", "ECHO", "\U0001f50a"),
        ("infinite", "INFINITE", "\u221e"),
    ),
    _cat(
        "CREATIONS", "User Creations Showcase", "\U0001f31f",
        "What did you build today?",
        ("websites", "Websites & Apps", "\U0001f310"),
        ("brands", "Brands & Identities", "\U0001f3a8"),
        ("businesses", "Businesses Launched", "\U0001f680"),
        ("content", "Content & Media", "\U0001f4f8"),
        ("agents", "Custom Agents", "\U0001f916"),
    ),
    _cat(
        "STRATEGY", "Strategy Guides", "\U0001f4da",
        "Guides and tutorials.",
        ("tutorials", "Tutorials", "\U0001f4d6"),
        ("tips", "Tips & Tricks", "\U0001f48e"),
        ("workflows", "Workflows", "\u2699\ufe0f"),
        ("prompts", "Prompt Engineering", "\u2728"),
    ),
    _cat(
        "COPA", "Copa Community", "\U0001f91d",
        "Augmentation over automation.",
        ("legal", "Copa Legal", "\u2696\ufe0f"),
        ("medical", "Copa Medical", "\U0001f3e5"),
        ("sales", "Copa Sales", "\U0001f4bc"),
        ("creative", "Copa Creative", "\U0001f3ad"),
        ("code", "Copa Code", "\U0001f4bb"),
        ("success-stories", "Success Stories", "\U0001f3c6"),
    ),
    _cat(
        "AGENTS", "Agent Exchange", "\U0001f504",
        "The agent marketplace community.",
        ("marketplace", "Marketplace Talk", "\U0001f3ea"),
        ("rentals", "Rental Listings", "\U0001f4cb"),
        ("reviews", "Agent Reviews", "\u2b50"),
        ("strategies", "Investment Strategies", "\U0001f4c8"),
    ),
    _cat(
        "CRYPTO", "Token Economy", "\U0001f4b0",
        "Token talk, staking, yields, and more.",
        ("token", "Token", "\U0001fa99"),
        ("staking", "Staking & Yields", "\U0001f33e"),
        ("governance", "Governance", "\U0001f5f3\ufe0f"),
        ("proposals", "Proposals", "\U0001f4dc"),
    ),
    _cat(
        "MODDING", "Modding & Development", "\U0001f527",
        "Custom agents, workflows, integrations.",
        ("agent-building", "Agent Building", "\U0001f3d7\ufe0f"),
        ("integrations", "Integrations", "\U0001f50c"),
        ("templates", "Templates", "\U0001f4c4"),
        ("api", "API Discussion", "\U0001f517"),
    ),
    _cat(
        "LORE", "The Lore", "\U0001f4dc",
        "Philosophy and lore.",
        ("simulation-theory", "Simulation Theory", "\U0001f30c"),
        ("consciousness", "Consciousness", "\U0001f9e0"),
        ("awakening", "The Awakening", "\U0001f441\ufe0f"),
        ("stories", "Stories & Fiction", "\u270d\ufe0f"),
    ),
)


class Taxonomy:
    """Read-only lookup over an ordered category tree."""

    def __init__(self, categories: Iterable[Category] = DEFAULT_CATEGORIES) -> None:
        self._categories: dict[str, Category] = {}
        for category in categories:
            if category.id in self._categories:
                raise ValueError(f"Duplicate category id: {category.id}")
            self._categories[category.id] = category

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories.values())

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._categories

    def get(self, category_id: str) -> Category | None:
        return self._categories.get(category_id)

    def validate(self, category_id: str, subcategory_id: str | None = None) -> Category:
        """Return the category, or raise :class:`InvalidCategory`.

        A present *subcategory_id* must belong to *category_id*.
        """
        category = self._categories.get(category_id)
        if category is None:
            raise InvalidCategory(category_id)
        if subcategory_id is not None and not category.has_subcategory(subcategory_id):
            raise InvalidCategory(category_id, subcategory_id)
        return category
