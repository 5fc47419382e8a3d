"""Batch entries: one unit of work inside a submitted bundle."""

from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bundlemint.domain.model.identifier import Identifier
    from bundlemint.domain.model.record import Record


class Verb(StrEnum):
    CREATE = "POST"
    UPDATE = "PUT"
    DELETE = "DELETE"
    READ = "GET"
    PATCH = "PATCH"

    @property
    def updates_in_place(self) -> bool:
        return self is Verb.UPDATE


@dataclass(slots=True, kw_only=True)
class BatchEntry:
    """Mutable work item; the import passes rewrite ``identifier`` and ``payload``.

    ``is_deletion`` follows ``verb is Verb.DELETE`` unless ``deletion`` overrides it.
    """

    verb: Verb
    identifier: Identifier
    payload: Record | None = None
    deletion: InitVar[bool | None] = None
    is_deletion: bool = field(init=False)

    def __post_init__(self, deletion: bool | None) -> None:
        self.is_deletion = self.verb is Verb.DELETE if deletion is None else deletion
