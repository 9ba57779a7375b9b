"""
agora.api.main — FastAPI application entry point
==================================================

Run with::

    uvicorn agora.api.main:app --reload --port 8000

or ``python -m agora``.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from agora.api.deps import get_config, get_engine, get_forum  # noqa: E402
from agora.api.routes.discovery import router as discovery_router  # noqa: E402
from agora.api.routes.threads import router as threads_router  # noqa: E402
from agora.api.routes.users import router as users_router  # noqa: E402
from agora.database.engine import init_db, run_db  # noqa: E402
from agora.errors import (  # noqa: E402
    DuplicateUserId,
    DuplicateUsername,
    ForumError,
    InvalidCategory,
    NotFound,
    ThreadLocked,
)
from agora.services.snapshot_service import load_snapshot, save_snapshot  # noqa: E402

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[ForumError], int] = {
    NotFound: 404,
    InvalidCategory: 422,
    ThreadLocked: 409,
    DuplicateUsername: 409,
    DuplicateUserId: 409,
}


def _cors_origins() -> list[str]:
    """Comma-separated ``CORS_ALLOW_ORIGINS``; empty means same-origin only."""
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — restore and persist the forum snapshot."""
    cfg = get_config()
    forum = get_forum()

    if not cfg.persist_snapshots:
        logger.info("%s API started — snapshots disabled", cfg.community_name)
        yield
        return

    engine = get_engine()
    await run_db(init_db, engine)
    await run_db(load_snapshot, engine, forum.store)
    logger.info("%s API started — %d threads in memory", cfg.community_name, len(forum.store))
    yield
    await run_db(save_snapshot, engine, forum.store)
    logger.info("%s API shutting down", cfg.community_name)


app = FastAPI(
    title="Agora Forum API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(users_router, prefix="/api")
app.include_router(threads_router, prefix="/api")
app.include_router(discovery_router, prefix="/api")


# ---------------------------------------------------------------------------
# Domain error → HTTP mapping
# ---------------------------------------------------------------------------
@app.exception_handler(ForumError)
async def forum_error_handler(request: Request, exc: ForumError):
    status = next(
        (code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls)), 400,
    )
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/api/health")
def health():
    return {"status": "ok"}
