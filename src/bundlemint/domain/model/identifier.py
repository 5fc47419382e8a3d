"""Record identifiers and their origin classification.

An identifier addresses one record (optionally one version of it) and may
carry the origin, i.e. the service base address, it claims to belong to. The
origin is metadata: two identifiers naming the same record are equal whatever
origin they were written against.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Final

HISTORY_SEGMENT: Final[str] = "_history"
URI_ID_PREFIXES: Final[tuple[str, ...]] = ("urn:uuid:", "urn:oid:", "cid:")


def is_uri_id(value: str) -> bool:
    """Return whether ``value`` is a globally unique URI used as a record id."""

    lowered = value.lower()
    return any(lowered.startswith(prefix) for prefix in URI_ID_PREFIXES)


class OriginKind(StrEnum):
    """How an identifier relates to the serving system's own namespace."""

    FOREIGN = "foreign"
    TEMPORARY = "temporary"
    LOCAL = "local"
    INTERNAL = "internal"


@dataclass(frozen=True, slots=True, eq=False)
class Identifier:
    record_type: str
    record_id: str
    version_id: str | None = None
    origin: str | None = None

    @property
    def has_origin(self) -> bool:
        return bool(self.origin)

    @property
    def identity(self) -> tuple[str, str]:
        """Record identity used for equality, ignoring version and origin.

        URI ids are unique on their own, so the record type is left out.
        """
        if is_uri_id(self.record_id):
            return ("", self.record_id)
        return (self.record_type, self.record_id)

    def without_origin(self) -> Identifier:
        if self.origin is None:
            return self
        return replace(self, origin=None)

    def with_origin(self, origin: str | None) -> Identifier:
        return replace(self, origin=origin)

    def with_version(self, version_id: str | None) -> Identifier:
        return replace(self, version_id=version_id)

    def without_version(self) -> Identifier:
        if self.version_id is None:
            return self
        return replace(self, version_id=None)

    def to_locator(self) -> str:
        """Render as ``[origin/]Type/id[/_history/vid]`` (bare URN for URI ids)."""

        if is_uri_id(self.record_id):
            return self.record_id
        path = f"{self.record_type}/{self.record_id}"
        if self.version_id is not None:
            path = f"{path}/{HISTORY_SEGMENT}/{self.version_id}"
        if self.origin:
            return f"{self.origin.rstrip('/')}/{path}"
        return path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        if self.identity != other.identity:
            return False
        if self.version_id is None or other.version_id is None:
            return True
        return self.version_id == other.version_id

    def __hash__(self) -> int:
        return hash(self.identity)

    def __str__(self) -> str:
        return self.to_locator()
