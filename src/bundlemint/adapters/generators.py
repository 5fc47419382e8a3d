"""In-memory identifier generation."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bundlemint.domain.model import Identifier

if TYPE_CHECKING:
    from collections.abc import Callable


FIRST_VERSION = "1"


def parse_version(version_id: str | None) -> int:
    """Return the numeric value of ``version_id``; non-numeric versions count as 0."""

    if version_id is None or not version_id.isdigit():
        return 0
    return int(version_id)


def require_record_type(original: Identifier) -> str:
    if not original.record_type:
        raise ValueError(f"Cannot mint an identifier without a record type: {original}")
    return original.record_type


@dataclass(slots=True)
class SequentialIdentifierGenerator:
    """Sequential decimal ids per record type; versions count per record.

    Not durable: use it for dry runs and tests.
    """

    id_format: Callable[[int], str] = str
    _ids: defaultdict[str, int] = field(default_factory=lambda: defaultdict(int), repr=False)
    _versions: dict[tuple[str, str], int] = field(
        default_factory=dict[tuple[str, str], int], repr=False
    )

    def next_identifier(self, original: Identifier) -> Identifier:
        record_type = require_record_type(original)
        self._ids[record_type] += 1
        record_id = self.id_format(self._ids[record_type])
        self._versions[(record_type, record_id)] = 1
        return Identifier(record_type=record_type, record_id=record_id, version_id=FIRST_VERSION)

    def next_version(self, original: Identifier) -> Identifier:
        record_type = require_record_type(original)
        key = (record_type, original.record_id)
        current = max(self._versions.get(key, 0), parse_version(original.version_id))
        self._versions[key] = current + 1
        return Identifier(
            record_type=record_type,
            record_id=original.record_id,
            version_id=str(current + 1),
        )
