"""Public domain model surface."""

from __future__ import annotations

from bundlemint.domain.model.entry import BatchEntry, Verb
from bundlemint.domain.model.identifier import (
    HISTORY_SEGMENT,
    Identifier,
    OriginKind,
    is_uri_id,
)
from bundlemint.domain.model.record import (
    Component,
    FieldValue,
    NarrativeField,
    Record,
    ReferenceBearingField,
    ReferenceField,
    Scalar,
    UriField,
)

__all__ = [  # noqa: RUF022
    # identifiers
    "HISTORY_SEGMENT",
    "Identifier",
    "OriginKind",
    "is_uri_id",
    # records
    "Component",
    "FieldValue",
    "NarrativeField",
    "Record",
    "ReferenceBearingField",
    "ReferenceField",
    "Scalar",
    "UriField",
    # batch
    "BatchEntry",
    "Verb",
]
