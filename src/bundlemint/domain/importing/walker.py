"""Traversal over the reference-bearing fields of a record payload."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bundlemint.domain.model import Component, NarrativeField, ReferenceField, UriField

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from bundlemint.domain.model import FieldValue, Record, ReferenceBearingField


def iter_reference_fields(record: Record) -> Iterator[ReferenceBearingField]:
    """Yield every reference, URI and narrative field nested anywhere in ``record``."""

    yield from _iter_values(record.fields.values())


def walk_reference_fields(
    record: Record,
    action: Callable[[ReferenceBearingField], None],
) -> int:
    """Call ``action`` on each reference-bearing field; return how many were visited.

    The fields are yielded live, so ``action`` rewrites them in place.
    """

    visited = 0
    for field_value in iter_reference_fields(record):
        action(field_value)
        visited += 1
    return visited


def _iter_values(values: Iterable[FieldValue]) -> Iterator[ReferenceBearingField]:
    for value in values:
        if isinstance(value, ReferenceField):
            yield value
            # extensions on a reference may themselves carry references
            yield from _iter_values(value.extra.values())
        elif isinstance(value, NarrativeField):
            yield value
            yield from _iter_values(value.extra.values())
        elif isinstance(value, UriField):
            yield value
        elif isinstance(value, Component):
            yield from _iter_values(value.fields.values())
        elif isinstance(value, list):
            yield from _iter_values(value)
