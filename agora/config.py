"""
agora.config — YAML Configuration Loader
==========================================

Reads ``config.yaml`` for the tunable, non-secret settings of a forum
deployment (community name, username policy, query windows, API port).
Secrets and connection strings stay in the environment (``.env``).

Usage::

    from agora.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.community_name)        # "Agora Dev"
    print(cfg.trending_window_hours) # 24

Every key is optional; a missing key falls back to the default below.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from agora.constants import (
    DEFAULT_PAGE_SIZE,
    ONLINE_WINDOW_MINUTES,
    SEARCH_RESULT_LIMIT,
    TRENDING_WINDOW_HOURS,
)


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class AgoraConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    community_name: str = "Agora"

    # Registration policy
    unique_usernames: bool = False  # case-insensitive uniqueness when True

    # Query tuning
    trending_window_hours: int = TRENDING_WINDOW_HOURS
    online_window_minutes: int = ONLINE_WINDOW_MINUTES
    default_page_size: int = DEFAULT_PAGE_SIZE
    search_result_limit: int = SEARCH_RESULT_LIMIT

    # Persistence
    persist_snapshots: bool = True  # load on startup, save on shutdown

    # API
    api_port: int = 8000


def _positive_int(raw: dict, key: str, default: int) -> int:
    value = int(raw.get(key, default))
    if value <= 0:
        raise ValueError(f"Config key '{key}' must be a positive integer, got {value}")
    return value


def _search_limit(raw: dict, default: int) -> int:
    value = _positive_int(raw, "search_result_limit", default)
    if value > SEARCH_RESULT_LIMIT:
        raise ValueError(
            f"Config key 'search_result_limit' may not exceed {SEARCH_RESULT_LIMIT}, got {value}"
        )
    return value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> AgoraConfig:
    """Read *path* and return an :class:`AgoraConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    ValueError
        If a numeric setting is zero or negative, or the search limit
        exceeds the 50-result cap.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    defaults = AgoraConfig()
    return AgoraConfig(
        community_name=str(raw.get("community_name", defaults.community_name)),
        unique_usernames=bool(raw.get("unique_usernames", defaults.unique_usernames)),
        trending_window_hours=_positive_int(
            raw, "trending_window_hours", defaults.trending_window_hours
        ),
        online_window_minutes=_positive_int(
            raw, "online_window_minutes", defaults.online_window_minutes
        ),
        default_page_size=_positive_int(raw, "default_page_size", defaults.default_page_size),
        search_result_limit=_search_limit(raw, defaults.search_result_limit),
        persist_snapshots=bool(raw.get("persist_snapshots", defaults.persist_snapshots)),
        api_port=_positive_int(raw, "api_port", defaults.api_port),
    )
