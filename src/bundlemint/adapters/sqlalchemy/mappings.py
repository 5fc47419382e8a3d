"""SQLAlchemy table metadata for identifier counters."""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy import Column, Enum, Integer, MetaData, String, Table

metadata = MetaData()


class CounterKind(StrEnum):
    RECORD_ID = "record_id"
    VERSION = "version"


identifier_counter_table = Table(
    "identifier_counters",
    metadata,
    Column("counter_kind", Enum(CounterKind, native_enum=False, length=16), primary_key=True),
    # record type for id counters, ``Type/id`` for version counters
    Column("scope", String(255), primary_key=True),
    Column("value", Integer, nullable=False),
)
