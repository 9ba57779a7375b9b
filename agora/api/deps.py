"""
agora.api.deps — FastAPI dependency injection
===============================================
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from sqlalchemy import Engine

from agora.config import AgoraConfig, load_config
from agora.database.engine import create_db_engine
from agora.services.forum_service import ForumService

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_config() -> AgoraConfig:
    """``AGORA_CONFIG`` (default ``config.yaml``), or built-in defaults if absent."""
    path = os.getenv("AGORA_CONFIG", "config.yaml")
    try:
        return load_config(path)
    except FileNotFoundError:
        logger.warning("No config file at %s — using defaults", path)
        return AgoraConfig()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_forum() -> ForumService:
    return ForumService(get_config())
