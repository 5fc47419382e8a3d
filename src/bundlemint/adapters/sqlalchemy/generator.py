"""Durable identifier generator backed by a counter table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import and_, insert, select, update

from bundlemint.adapters.generators import FIRST_VERSION, parse_version, require_record_type
from bundlemint.domain.model import Identifier

from .engine import require_engine
from .mappings import CounterKind, identifier_counter_table

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.engine import Connection, Engine


class SqlAlchemyIdentifierGenerator:
    """Mint ids and versions from counters that survive restarts.

    Every call runs in its own transaction, so counters advance even when the
    batch that requested them is later rejected; gaps in the sequence are
    expected.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or require_engine()

    def next_identifier(self, original: Identifier) -> Identifier:
        record_type = require_record_type(original)
        with self._engine.begin() as connection:
            value = _increment(connection, CounterKind.RECORD_ID, record_type)
            record_id = str(value)
            _increment(connection, CounterKind.VERSION, f"{record_type}/{record_id}")
        return Identifier(record_type=record_type, record_id=record_id, version_id=FIRST_VERSION)

    def next_version(self, original: Identifier) -> Identifier:
        record_type = require_record_type(original)
        with self._engine.begin() as connection:
            value = _increment(
                connection,
                CounterKind.VERSION,
                f"{record_type}/{original.record_id}",
                floor=parse_version(original.version_id),
            )
        return Identifier(
            record_type=record_type,
            record_id=original.record_id,
            version_id=str(value),
        )

    def current_value(self, kind: CounterKind, scope: str) -> int | None:
        with self._engine.connect() as connection:
            return connection.execute(
                select(identifier_counter_table.c.value).where(_scope_clause(kind, scope))
            ).scalar_one_or_none()


def _increment(connection: Connection, kind: CounterKind, scope: str, *, floor: int = 0) -> int:
    current = connection.execute(
        select(identifier_counter_table.c.value)
        .where(_scope_clause(kind, scope))
        .with_for_update()
    ).scalar_one_or_none()
    if current is None:
        value = floor + 1
        connection.execute(
            insert(identifier_counter_table).values(counter_kind=kind, scope=scope, value=value)
        )
    else:
        value = max(current, floor) + 1
        connection.execute(
            update(identifier_counter_table).where(_scope_clause(kind, scope)).values(value=value)
        )
    return value


def _scope_clause(kind: CounterKind, scope: str) -> ColumnElement[bool]:
    return and_(
        identifier_counter_table.c.counter_kind == kind,
        identifier_counter_table.c.scope == scope,
    )
