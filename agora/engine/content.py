"""
agora.engine.content — Content Store
======================================

Owns thread / reply / reaction state and enforces the taxonomy and lock
invariants.  Every operation runs entirely under the store lock,
including :meth:`ContentStore.get_thread`, which bumps the view counter.

Operations validate everything they need *before* touching state, so a
failure (``InvalidCategory``, ``NotFound``, ``ThreadLocked``) leaves the
store exactly as it was.

Listing pipeline::

    filter(category, subcategory, ACTIVE) → sort(newest|popular|active)
        → pinned first (stable) → page slice
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from agora.constants import DEFAULT_PAGE_SIZE, SEARCH_RESULT_LIMIT, ReactionKind, parse_reaction
from agora.engine.entities import Reply, Thread, ThreadStatus, new_id, utcnow
from agora.engine.events import EventName, ForumEvent, MutationResult
from agora.engine.identity import IdentityRegistry
from agora.engine.store import ForumStore
from agora.engine.taxonomy import Taxonomy
from agora.errors import NotFound, ThreadLocked

logger = logging.getLogger(__name__)

__all__ = [
    "SORT_KEYS",
    "ContentStore",
    "ThreadPage",
    "matches_query",
    "paginate",
    "pinned_first",
    "sort_threads",
]


# ---------------------------------------------------------------------------
# Sorting & pagination (pure)
# ---------------------------------------------------------------------------
SORT_KEYS: dict[str, Callable[[Thread], object]] = {
    "newest": lambda t: t.created_at,
    "popular": lambda t: t.views,
    "active": lambda t: t.updated_at,
}


def sort_threads(threads: Iterable[Thread], sort: str = "active") -> list[Thread]:
    """Stable descending sort.  Unknown sort names fall back to ``active``."""
    key = SORT_KEYS.get(sort, SORT_KEYS["active"])
    return sorted(threads, key=key, reverse=True)


def pinned_first(threads: Iterable[Thread]) -> list[Thread]:
    """Move pinned threads to the front, preserving order within each group."""
    return sorted(threads, key=lambda t: not t.is_pinned)


@dataclass(frozen=True, slots=True)
class ThreadPage:
    threads: list[Thread]
    total: int
    page: int
    total_pages: int

    def to_dict(self) -> dict:
        return {
            "threads": [t.summary() for t in self.threads],
            "total": self.total,
            "page": self.page,
            "total_pages": self.total_pages,
        }


def paginate(threads: list[Thread], page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> ThreadPage:
    """1-indexed page slice.  Pages past the end are empty."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    start = (page - 1) * limit
    return ThreadPage(
        threads=threads[start:start + limit],
        total=len(threads),
        page=page,
        total_pages=math.ceil(len(threads) / limit),
    )


def matches_query(thread: Thread, query: str) -> bool:
    """Case-insensitive substring match on title, content, or any tag."""
    needle = query.casefold()
    return (
        needle in thread.title.casefold()
        or needle in thread.content.casefold()
        or any(needle in tag.casefold() for tag in thread.tags)
    )


def _unique(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)


# ---------------------------------------------------------------------------
# Content store
# ---------------------------------------------------------------------------
class ContentStore:
    """Thread, reply and reaction operations over a shared ForumStore."""

    def __init__(
        self,
        store: ForumStore,
        identity: IdentityRegistry,
        taxonomy: Taxonomy,
        *,
        clock: Callable[[], datetime] = utcnow,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        search_limit: int = SEARCH_RESULT_LIMIT,
    ) -> None:
        self._store = store
        self._identity = identity
        self._taxonomy = taxonomy
        self._clock = clock
        self._default_page_size = default_page_size
        self._search_limit = min(search_limit, SEARCH_RESULT_LIMIT)  # hard cap

    def _live_thread(self, thread_id: str) -> Thread:
        thread = self._store.threads.get(thread_id)
        if thread is None:
            raise NotFound("thread", thread_id)
        return thread

    def _live_reply(self, thread: Thread, reply_id: str) -> Reply:
        reply = thread.find_reply(reply_id)
        if reply is None:
            raise NotFound("reply", reply_id)
        return reply

    # -------------------------------------------------------------------
    # Threads
    # -------------------------------------------------------------------
    def create_thread(
        self,
        category_id: str,
        author_id: str,
        title: str,
        content: str,
        *,
        subcategory_id: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> MutationResult[Thread]:
        """File a new ACTIVE thread and credit its author.

        Author gets ``threads``+1, ``posts``+1, reputation +5.

        Raises
        ------
        InvalidCategory
            Unknown category, or subcategory not under it.
        NotFound
            Author is not registered.
        """
        self._taxonomy.validate(category_id, subcategory_id)

        with self._store.lock:
            author = self._identity.live_user(author_id)
            now = self._clock()
            thread = Thread(
                id=new_id("thread"),
                title=title,
                category_id=category_id,
                subcategory_id=subcategory_id,
                author_id=author_id,
                content=content,
                tags=_unique(tags or ()),
                created_at=now,
                updated_at=now,
            )
            self._store.threads[thread.id] = thread
            self._store.counters.total_threads += 1
            rank_events = self._identity.credit_thread(author)
            result = copy.deepcopy(thread)

        logger.info(
            "Thread created: %s in %s/%s by %s",
            thread.id, category_id, subcategory_id or "-", author_id,
        )
        event = ForumEvent(
            EventName.THREAD_CREATED,
            {"threadId": thread.id, "categoryId": category_id, "authorId": author_id},
            timestamp=now,
        )
        return MutationResult(result, (event, *rank_events))

    def get_thread(self, thread_id: str) -> MutationResult[Thread]:
        """Return the thread and count the view (every successful lookup)."""
        with self._store.lock:
            thread = self._live_thread(thread_id)
            thread.views += 1
            logger.debug("Thread %s viewed (%d)", thread_id, thread.views)
            return MutationResult(copy.deepcopy(thread))

    # -------------------------------------------------------------------
    # Replies
    # -------------------------------------------------------------------
    def add_reply(self, thread_id: str, author_id: str, content: str) -> MutationResult[Reply]:
        """Append a reply and credit the replier (and the thread author).

        The replier gets ``posts``+1 and reputation +1.  When the replier is
        not the thread author, the thread author gets reputation +1.

        Raises
        ------
        NotFound
            Thread or replier does not exist.
        ThreadLocked
            The thread is locked.  Nothing is mutated.
        """
        with self._store.lock:
            thread = self._live_thread(thread_id)
            if thread.is_locked:
                raise ThreadLocked(thread_id)
            author = self._identity.live_user(author_id)

            now = self._clock()
            reply = Reply(id=new_id("reply"), author_id=author_id, content=content, created_at=now)
            thread.replies.append(reply)
            thread.updated_at = now
            self._store.counters.total_replies += 1

            rank_events = self._identity.credit_reply(author)
            if thread.author_id != author_id:
                thread_author = self._store.users.get(thread.author_id)
                if thread_author is not None:
                    self._identity.credit_engagement(thread_author)
            result = copy.deepcopy(reply)

        logger.info("Reply %s added to %s by %s", reply.id, thread_id, author_id)
        event = ForumEvent(
            EventName.REPLY_CREATED,
            {"threadId": thread_id, "replyId": reply.id, "authorId": author_id},
            timestamp=now,
        )
        return MutationResult(result, (event, *rank_events))

    # -------------------------------------------------------------------
    # Reactions
    # -------------------------------------------------------------------
    def add_reaction(
        self,
        thread_id: str,
        reaction_kind: str,
        *,
        reply_id: str | None = None,
        user_id: str | None = None,
    ) -> MutationResult[ReactionKind | None]:
        """Count a reaction on the thread, or on one of its replies.

        An unrecognized *reaction_kind* is a silent no-op: no counter moves
        and no event is emitted.  The value is the kind counted, or None.

        Raises
        ------
        NotFound
            Unknown thread, reply, or reacting user.
        """
        with self._store.lock:
            thread = self._live_thread(thread_id)
            target = thread if reply_id is None else self._live_reply(thread, reply_id)
            reactor = self._identity.live_user(user_id) if user_id is not None else None

            kind = parse_reaction(reaction_kind)
            if kind is None:
                logger.debug("Ignoring unknown reaction %r on %s", reaction_kind, thread_id)
                return MutationResult(None)

            target.reactions[kind] += 1
            now = self._clock()
            if reactor is not None:
                self._identity.credit_reaction(reactor)

        event = ForumEvent(
            EventName.REACTION_ADDED,
            {"threadId": thread_id, "replyId": reply_id, "reactionType": kind.value},
            timestamp=now,
        )
        return MutationResult(kind, (event,))

    # -------------------------------------------------------------------
    # Moderation flags
    # -------------------------------------------------------------------
    def _moderate(
        self, thread_id: str, action: str, apply: Callable[[Thread], None]
    ) -> MutationResult[Thread]:
        with self._store.lock:
            thread = self._live_thread(thread_id)
            apply(thread)
            result = copy.deepcopy(thread)
            now = self._clock()
        logger.info("Thread %s moderated: %s", thread_id, action)
        event = ForumEvent(
            EventName.THREAD_MODERATED, {"threadId": thread_id, "action": action}, timestamp=now,
        )
        return MutationResult(result, (event,))

    def set_pinned(self, thread_id: str, pinned: bool) -> MutationResult[Thread]:
        def _apply(t: Thread) -> None:
            t.is_pinned = pinned
        return self._moderate(thread_id, "pin" if pinned else "unpin", _apply)

    def set_locked(self, thread_id: str, locked: bool) -> MutationResult[Thread]:
        def _apply(t: Thread) -> None:
            t.is_locked = locked
        return self._moderate(thread_id, "lock" if locked else "unlock", _apply)

    def remove_thread(self, thread_id: str) -> MutationResult[Thread]:
        """Soft-remove: status → REMOVED.  The thread stays addressable by id."""
        def _apply(t: Thread) -> None:
            t.status = ThreadStatus.REMOVED
        return self._moderate(thread_id, "remove", _apply)

    def mark_answer(self, thread_id: str, reply_id: str) -> MutationResult[Reply]:
        """Flag *reply_id* as the accepted answer; clears any previous one."""
        with self._store.lock:
            thread = self._live_thread(thread_id)
            chosen = self._live_reply(thread, reply_id)
            for reply in thread.replies:
                reply.is_answer = reply is chosen
            result = copy.deepcopy(chosen)
            now = self._clock()
        event = ForumEvent(
            EventName.REPLY_ANSWERED, {"threadId": thread_id, "replyId": reply_id}, timestamp=now,
        )
        return MutationResult(result, (event,))

    # -------------------------------------------------------------------
    # Listing & search
    # -------------------------------------------------------------------
    def list_by_category(
        self,
        category_id: str,
        subcategory_id: str | None = None,
        *,
        sort: str = "active",
        page: int = 1,
        limit: int | None = None,
    ) -> ThreadPage:
        """Paginated ACTIVE threads of a category, pinned threads first."""
        with self._store.lock:
            candidates = [
                t for t in self._store.threads.values()
                if t.category_id == category_id
                and t.is_active
                and (subcategory_id is None or t.subcategory_id == subcategory_id)
            ]
            ordered = pinned_first(sort_threads(candidates, sort))
            result = paginate(ordered, page, limit or self._default_page_size)
            return ThreadPage(
                threads=copy.deepcopy(result.threads),
                total=result.total,
                page=result.page,
                total_pages=result.total_pages,
            )

    def search(self, query: str) -> list[Thread]:
        """ACTIVE threads matching *query*, store order, capped."""
        with self._store.lock:
            hits: list[Thread] = []
            for thread in self._store.threads.values():
                if thread.is_active and matches_query(thread, query):
                    hits.append(thread)
                    if len(hits) >= self._search_limit:
                        break
            return copy.deepcopy(hits)
