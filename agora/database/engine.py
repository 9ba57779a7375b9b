"""
agora.database.engine — Database Connection & Async Helper
============================================================

The forum runs in memory; the database only holds snapshots.  This
module builds the SQLAlchemy engine for that snapshot store and provides
the bridge async hosts (the FastAPI lifespan) use to run the
synchronous snapshot functions without blocking their event loop.

Usage::

    from agora.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    # Inside an async function:
    await run_db(save_snapshot, engine, forum.store)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from agora.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_DATABASE_URL = "sqlite:///agora.db"


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` for the snapshot store.

    *url* defaults to the ``DATABASE_URL`` env var, then to a local
    SQLite file.  Non-SQLite URLs get a small pool with pre-ping, since
    snapshots are written rarely and connections may sit idle for hours.
    """
    url = url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL

    if url.startswith("sqlite"):
        engine = create_engine(url, echo=False)
    else:
        engine = create_engine(
            url,
            echo=False,
            pool_size=2,
            max_overflow=2,
            pool_pre_ping=True,   # Reconnect stale connections automatically
            pool_timeout=10,
            pool_recycle=3600,
        )
    logger.info("Database engine created → %s", engine.url.render_as_string(hide_password=True))
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create all snapshot tables.  Safe to call on every startup."""
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that auto-commits on success and rolls back
    on exception.
    """
    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** database function on a background thread.

    Calls :func:`asyncio.to_thread`, which schedules *func* on the default
    ``ThreadPoolExecutor`` so the caller's event loop is never blocked.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
