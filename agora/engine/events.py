"""
agora.engine.events — ForumEvent and MutationResult
=====================================================

The universal event envelope.  Every mutating engine operation returns
a :class:`MutationResult` carrying its value plus the events to relay;
the engine itself never talks to listeners.  Dispatch happens in
:mod:`agora.services.notifier` after the mutation has committed.

Payload keys are the wire contract for external relays and use the
camelCase names browsers expect (``threadId``, ``replyId`` …).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

__all__ = ["EventName", "ForumEvent", "MutationResult"]

T = TypeVar("T")


class EventName(enum.StrEnum):
    USER_REGISTERED = "user:registered"
    USER_RANK_CHANGED = "user:rank_changed"
    THREAD_CREATED = "thread:created"
    THREAD_MODERATED = "thread:moderated"
    REPLY_CREATED = "reply:created"
    REPLY_ANSWERED = "reply:answered"
    REACTION_ADDED = "reaction:added"


@dataclass(frozen=True, slots=True)
class ForumEvent:
    """Named event with a JSON-serializable payload."""

    name: EventName
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.name.value,
            "payload": dict(self.payload),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class MutationResult(Generic[T]):
    """Value produced by a mutation plus the events it emitted, in order."""

    value: T
    events: tuple[ForumEvent, ...] = ()
