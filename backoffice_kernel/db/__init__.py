"""Database layer - engine, session scope and declarative base classes."""

from backoffice_kernel.db.base import Base, TrackedBase
from backoffice_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)

__all__ = [
    "Base",
    "TrackedBase",
    "create_tables",
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "session_scope",
]
