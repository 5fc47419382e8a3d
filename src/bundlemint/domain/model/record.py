"""Record payloads as trees of typed fields.

Only three field kinds carry references to other records:

- ``ReferenceField``: a structured reference whose ``reference`` is a locator
- ``UriField``: a bare identifier-shaped URI value
- ``NarrativeField``: an XHTML fragment whose links and images may point at records

``Component`` nests further fields; lists may hold any field value. All other
values (strings, numbers, booleans, ``None``) are opaque payload content.
"""

from __future__ import annotations

from dataclasses import dataclass, field

type Scalar = str | int | float | bool | None
type FieldValue = ReferenceField | UriField | NarrativeField | Component | list[FieldValue] | Scalar
type ReferenceBearingField = ReferenceField | UriField | NarrativeField


@dataclass(slots=True, kw_only=True)
class ReferenceField:
    """Structured reference to another record."""

    reference: str | None = None
    display: str | None = None
    extra: dict[str, FieldValue] = field(default_factory=dict["str", "FieldValue"])


@dataclass(slots=True)
class UriField:
    value: str | None


@dataclass(slots=True, kw_only=True)
class NarrativeField:
    """Human-readable XHTML summary embedded in a record."""

    div: str
    status: str | None = None
    extra: dict[str, FieldValue] = field(default_factory=dict["str", "FieldValue"])


@dataclass(slots=True)
class Component:
    fields: dict[str, FieldValue] = field(default_factory=dict["str", "FieldValue"])


@dataclass(slots=True)
class Record:
    record_type: str
    fields: dict[str, FieldValue] = field(default_factory=dict["str", "FieldValue"])

    def get(self, name: str) -> FieldValue:
        return self.fields.get(name)
