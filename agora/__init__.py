"""
Agora — A Community Forum Engine
==================================
Categorized discussion threads, user reputation and rank progression,
reactions, search, and trending/leaderboard computation over an
in-memory store, with snapshot persistence and an HTTP surface.

Package layout::

    agora/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Rank table, reaction kinds, reputation awards
    ├── errors.py          # ForumError hierarchy
    ├── engine/
    │   ├── entities.py    # User, Thread, Reply dataclasses
    │   ├── events.py      # ForumEvent envelope + MutationResult
    │   ├── taxonomy.py    # Static category / subcategory tree
    │   ├── store.py       # ForumStore — keyed collections + lock
    │   ├── identity.py    # IdentityRegistry (users, reputation, rank)
    │   ├── content.py     # ContentStore (threads, replies, reactions)
    │   └── queries.py     # Trending, leaderboards, statistics
    ├── services/
    │   ├── forum_service.py    # Facade: mutate → dispatch events
    │   ├── notifier.py         # Event callbacks for external relays
    │   └── snapshot_service.py # Save / load the store via SQLAlchemy
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # Snapshot ORM tables
    └── api/
        ├── main.py        # FastAPI app
        └── routes/        # Thread, user and discovery endpoints
"""

__version__ = "0.1.0"
