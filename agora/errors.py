"""
agora.errors — Domain Error Hierarchy
=======================================

Every error the engine raises derives from :class:`ForumError` so outer
layers (API, CLI) can catch the family in one place.  None of these are
transient: the caller recovers by supplying valid input.
"""

from __future__ import annotations

__all__ = [
    "DuplicateUserId",
    "DuplicateUsername",
    "ForumError",
    "InvalidCategory",
    "NotFound",
    "ThreadLocked",
]


class ForumError(Exception):
    """Base class for all forum engine errors."""


class InvalidCategory(ForumError):
    """Category (or subcategory under it) is not part of the taxonomy."""

    def __init__(self, category_id: str, subcategory_id: str | None = None) -> None:
        self.category_id = category_id
        self.subcategory_id = subcategory_id
        if subcategory_id is None:
            msg = f"Invalid category: {category_id}"
        else:
            msg = f"Invalid subcategory: {subcategory_id} (category {category_id})"
        super().__init__(msg)


class NotFound(ForumError):
    """A thread, reply, or user id does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} not found: {entity_id}")


class ThreadLocked(ForumError):
    """Reply attempted on a locked thread."""

    def __init__(self, thread_id: str) -> None:
        self.thread_id = thread_id
        super().__init__(f"Thread is locked: {thread_id}")


class DuplicateUsername(ForumError):
    """Username already taken while uniqueness is enforced."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username already registered: {username}")


class DuplicateUserId(ForumError):
    """Explicit user id on registration is already in use."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User id already registered: {user_id}")
