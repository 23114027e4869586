"""
Database Module - SoulyCore backend

Structure:
    database/
    ├── __init__.py      # This file - public API
    ├── session.py       # SQLAlchemy async session management
    ├── init.py          # Schema and migration utilities
    └── models/          # SQLAlchemy ORM models
        ├── base.py
        ├── knowledge.py
        ├── conversations.py
        ├── project.py
        ├── system.py
        └── llm_history.py

Usage:
    from database import get_session
    from database.models import Brain
    
    async with get_session() as session:
        result = await session.execute(select(Brain))
        brains = result.scalars().all()
"""

from .models import Base, TimestampMixin

from .session import (
    get_database_url,
    init_engine,
    close_engine,
    create_tables,
    get_session,
    get_session_dependency,
)

from .init import run_migrations

__all__ = [
    "Base",
    "TimestampMixin",
    # Session Management
    "get_database_url",
    "init_engine",
    "close_engine",
    "create_tables",
    "get_session",
    "get_session_dependency",
    # Init utilities
    "run_migrations",
]
