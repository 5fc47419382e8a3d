"""SQLAlchemy adapter package for bundlemint."""

from __future__ import annotations

from .engine import StartupError, configured_engine, require_engine, shutdown, startup
from .generator import SqlAlchemyIdentifierGenerator
from .mappings import CounterKind, identifier_counter_table, metadata

__all__ = [
    "CounterKind",
    "SqlAlchemyIdentifierGenerator",
    "StartupError",
    "configured_engine",
    "identifier_counter_table",
    "metadata",
    "require_engine",
    "shutdown",
    "startup",
]
