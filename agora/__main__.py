"""
agora.__main__ — Entry point for ``python -m agora``
======================================================

Wiring:
1. Load .env (DATABASE_URL, AGORA_CONFIG).
2. Load config.yaml (soft settings; defaults if absent).
3. Serve the FastAPI app with uvicorn.  The app's lifespan restores the
   forum snapshot on startup and writes it back on shutdown.

Run with::

    python -m agora
"""

from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("agora")


def main() -> None:
    """Bootstrap and serve the Agora API."""

    # 1. Environment variables.
    load_dotenv()

    # 2. Soft configuration.
    from agora.api.deps import get_config

    cfg = get_config()
    logger.info("Starting %s on port %d", cfg.community_name, cfg.api_port)

    # 3. Serve (blocking).
    uvicorn.run("agora.api.main:app", host="0.0.0.0", port=cfg.api_port, log_config=None)


if __name__ == "__main__":
    main()
