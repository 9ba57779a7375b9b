"""
agora.services.notifier — Event Notifier
==========================================

Relays :class:`~agora.engine.events.ForumEvent` objects to whatever
external listeners are attached (a websocket fan-out, a message bus,
a test spy).  Delivery is fire-and-forget: a failing callback is logged
and never propagates back into the forum engine, and the engine works
the same with zero listeners.

Callbacks are registered per event name, or under ``"*"`` to receive
everything.  Plain callables run inline on the dispatching thread.
Coroutine functions are scheduled on the loop passed to
:meth:`EventNotifier.register` via ``run_coroutine_threadsafe``.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
import threading
from collections.abc import Callable, Iterable
from functools import partial
from typing import Any

from agora.engine.events import ForumEvent

logger = logging.getLogger(__name__)

__all__ = ["WILDCARD", "EventNotifier"]

WILDCARD = "*"

EventCallback = Callable[[ForumEvent], Any]


def _log_async_failure(event: ForumEvent, future: concurrent.futures.Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error(
            "Event callback failed for '%s'", event.name, exc_info=exc,
        )


class EventNotifier:
    """Thread-safe callback registry + dispatcher."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # event name (or "*") → list of (callback, loop)
        self._callbacks: dict[str, list[tuple[EventCallback, asyncio.AbstractEventLoop | None]]] = {}

    def register(
        self,
        event_name: str,
        callback: EventCallback,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Attach *callback* for *event_name* (``"*"`` for every event).

        Parameters
        ----------
        event_name : str
            e.g. ``"thread:created"`` or ``"*"``.
        callback : callable or coroutine function
            Invoked with the :class:`ForumEvent`.
        loop : asyncio.AbstractEventLoop, optional
            Required for coroutine callbacks; the loop they are scheduled on.
        """
        if inspect.iscoroutinefunction(callback) and loop is None:
            raise ValueError("Coroutine callbacks need an event loop to run on")
        with self._lock:
            self._callbacks.setdefault(str(event_name), []).append((callback, loop))
        logger.info("Registered event callback for '%s'", event_name)

    def unregister(self, event_name: str, callback: EventCallback) -> None:
        with self._lock:
            entries = self._callbacks.get(str(event_name), [])
            self._callbacks[str(event_name)] = [e for e in entries if e[0] is not callback]

    def listener_count(self, event_name: str | None = None) -> int:
        with self._lock:
            if event_name is None:
                return sum(len(v) for v in self._callbacks.values())
            return len(self._callbacks.get(str(event_name), []))

    def dispatch(self, events: Iterable[ForumEvent]) -> None:
        """Deliver each event to its listeners, in order."""
        for event in events:
            self._dispatch_one(event)

    def _dispatch_one(self, event: ForumEvent) -> None:
        with self._lock:
            targets = [
                *self._callbacks.get(event.name.value, []),
                *self._callbacks.get(WILDCARD, []),
            ]
        if not targets:
            logger.debug("No listeners for '%s'", event.name)
            return

        for callback, loop in targets:
            try:
                if loop is not None and inspect.iscoroutinefunction(callback):
                    if loop.is_closed():
                        logger.warning(
                            "Cannot dispatch '%s' — event loop is closed", event.name,
                        )
                        continue
                    future = asyncio.run_coroutine_threadsafe(callback(event), loop)
                    future.add_done_callback(partial(_log_async_failure, event))
                else:
                    callback(event)
            except Exception:
                logger.exception("Event callback failed for '%s'", event.name)
