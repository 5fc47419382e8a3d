"""JSON transaction bundle adapter."""

from __future__ import annotations

from .schema import BundleEntryPayload, BundlePayload, BundleRequestPayload
from .translator import (
    DEFAULT_URI_KEYS,
    BundleFormatError,
    bundle_from_entries,
    entries_from_bundle,
    entry_from_payload,
    parse_bundle,
    record_from_resource,
    resource_from_record,
)

__all__ = [
    "DEFAULT_URI_KEYS",
    "BundleEntryPayload",
    "BundleFormatError",
    "BundlePayload",
    "BundleRequestPayload",
    "bundle_from_entries",
    "entries_from_bundle",
    "entry_from_payload",
    "parse_bundle",
    "record_from_resource",
    "resource_from_record",
]
