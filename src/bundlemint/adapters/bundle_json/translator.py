"""Translate JSON bundles to batch entries and back."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final, cast
from uuid import uuid4

from bundlemint.domain.model import (
    BatchEntry,
    Component,
    Identifier,
    NarrativeField,
    Record,
    ReferenceField,
    UriField,
    Verb,
    is_uri_id,
)

from .schema import BundlePayload

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from bundlemint.adapters.localhost import Localhost
    from bundlemint.domain.model import FieldValue

    from .schema import BundleEntryPayload

log = logging.getLogger(__name__)

# string properties holding identifier-shaped URIs
DEFAULT_URI_KEYS: Final[frozenset[str]] = frozenset(
    {"uri", "url", "source", "instantiatesUri", "valueUri", "valueUrl"}
)
NARRATIVE_KEYS: Final[frozenset[str]] = frozenset({"id", "extension", "status", "div"})


class BundleFormatError(ValueError):
    """Raised when a bundle entry cannot be turned into a batch entry."""


def parse_bundle(data: Mapping[str, object]) -> BundlePayload:
    return BundlePayload.model_validate(data)


def entries_from_bundle(
    bundle: BundlePayload,
    *,
    localhost: Localhost,
    uri_keys: frozenset[str] = DEFAULT_URI_KEYS,
) -> list[BatchEntry]:
    """Build one ``BatchEntry`` per bundle entry, preserving order.

    Two entries that are not deletions may not address the same record.
    """

    entries: list[BatchEntry] = []
    positions: dict[Identifier, int] = {}
    for position, payload in enumerate(bundle.entry):
        entry = entry_from_payload(
            payload, localhost=localhost, uri_keys=uri_keys, position=position
        )
        if not entry.is_deletion:
            first = positions.setdefault(entry.identifier, position)
            if first != position:
                raise BundleFormatError(
                    f"Bundle entries {first} and {position} both address {entry.identifier}"
                )
        entries.append(entry)
    return entries


def entry_from_payload(
    entry: BundleEntryPayload,
    *,
    localhost: Localhost,
    uri_keys: frozenset[str] = DEFAULT_URI_KEYS,
    position: int = 0,
) -> BatchEntry:
    if entry.request is None:
        raise BundleFormatError(f"Bundle entry {position} has no request")

    verb = Verb(entry.request.method)
    payload = (
        record_from_resource(entry.resource, uri_keys=uri_keys)
        if entry.resource is not None and verb is not Verb.DELETE
        else None
    )
    try:
        if verb is Verb.CREATE:
            record_type = (
                payload.record_type
                if payload is not None
                else entry.request.url.strip("/").split("/")[0]
            )
            identifier = _identifier_for_create(
                entry.full_url, record_type=record_type, localhost=localhost
            )
        else:
            identifier = _identifier_from_request(entry.request.url, localhost=localhost)
    except ValueError as exc:
        raise BundleFormatError(f"Bundle entry {position}: {exc}") from exc

    if (
        payload is not None
        and verb in {Verb.CREATE, Verb.UPDATE}
        and payload.record_type != identifier.record_type
    ):
        raise BundleFormatError(
            f"Bundle entry {position}: resource type {payload.record_type} "
            f"does not match {identifier}"
        )
    return BatchEntry(verb=verb, identifier=identifier, payload=payload)


def _identifier_for_create(
    full_url: str | None,
    *,
    record_type: str,
    localhost: Localhost,
) -> Identifier:
    if full_url is None:
        # nothing can reference an entry without a fullUrl
        return Identifier(record_type=record_type, record_id=f"urn:uuid:{uuid4()}")
    if is_uri_id(full_url):
        return Identifier(record_type=record_type, record_id=full_url)
    identifier = localhost.locator_to_identifier(full_url)
    if identifier.origin is None:
        identifier = identifier.with_origin(localhost.base)
    return identifier


def _identifier_from_request(url: str, *, localhost: Localhost) -> Identifier:
    identifier = localhost.locator_to_identifier(url)
    if identifier.origin is None and not is_uri_id(identifier.record_id):
        # request URLs are relative to this server
        identifier = identifier.with_origin(localhost.base)
    return identifier


def record_from_resource(
    resource: Mapping[str, Any],
    *,
    uri_keys: frozenset[str] = DEFAULT_URI_KEYS,
) -> Record:
    record_type = resource.get("resourceType")
    if not isinstance(record_type, str):
        raise BundleFormatError("resource must declare a resourceType")
    fields = {
        key: _to_field(key, value, uri_keys=uri_keys)
        for key, value in resource.items()
        if key != "resourceType"
    }
    return Record(record_type=record_type, fields=fields)


def _to_field(key: str, value: object, *, uri_keys: frozenset[str]) -> FieldValue:
    if isinstance(value, dict):
        mapping = cast("dict[str, object]", value)
        reference = mapping.get("reference")
        if isinstance(reference, str):
            display = mapping.get("display")
            return ReferenceField(
                reference=reference,
                display=display if isinstance(display, str) else None,
                extra={
                    name: _to_field(name, item, uri_keys=uri_keys)
                    for name, item in mapping.items()
                    if name not in {"reference", "display"}
                },
            )
        div = mapping.get("div")
        if isinstance(div, str) and set(mapping) <= NARRATIVE_KEYS:
            status = mapping.get("status")
            return NarrativeField(
                div=div,
                status=status if isinstance(status, str) else None,
                extra={
                    name: _to_field(name, item, uri_keys=uri_keys)
                    for name, item in mapping.items()
                    if name not in {"status", "div"}
                },
            )
        return Component(
            {name: _to_field(name, item, uri_keys=uri_keys) for name, item in mapping.items()}
        )
    if isinstance(value, list):
        return [_to_field(key, item, uri_keys=uri_keys) for item in cast("list[object]", value)]
    if isinstance(value, str) and key in uri_keys:
        return UriField(value)
    if value is None or isinstance(value, str | int | float | bool):
        return value
    raise BundleFormatError(f"Unsupported JSON value for {key!r}: {type(value).__name__}")


def resource_from_record(record: Record, identifier: Identifier | None = None) -> dict[str, Any]:
    """Serialize ``record`` back to a JSON resource, stamping ``identifier`` on it."""

    resource: dict[str, Any] = {"resourceType": record.record_type}
    for key, value in record.fields.items():
        resource[key] = _from_field(value)
    if identifier is not None and not is_uri_id(identifier.record_id):
        resource["id"] = identifier.record_id
        if identifier.version_id is not None:
            meta = dict(resource.get("meta") or {})
            meta["versionId"] = identifier.version_id
            resource["meta"] = meta
    return resource


def _from_field(value: FieldValue) -> Any:  # noqa: ANN401
    if isinstance(value, ReferenceField):
        data: dict[str, Any] = {}
        if value.reference is not None:
            data["reference"] = value.reference
        if value.display is not None:
            data["display"] = value.display
        data.update({name: _from_field(item) for name, item in value.extra.items()})
        return data
    if isinstance(value, UriField):
        return value.value
    if isinstance(value, NarrativeField):
        narrative: dict[str, Any] = {}
        if value.status is not None:
            narrative["status"] = value.status
        narrative["div"] = value.div
        narrative.update({name: _from_field(item) for name, item in value.extra.items()})
        return narrative
    if isinstance(value, Component):
        return {name: _from_field(item) for name, item in value.fields.items()}
    if isinstance(value, list):
        return [_from_field(item) for item in value]
    return value


def bundle_from_entries(
    entries: Sequence[BatchEntry],
    *,
    localhost: Localhost,
    bundle_type: str | None = "transaction",
) -> dict[str, Any]:
    """Render internalized entries as a JSON bundle addressed on this server."""

    bundle: dict[str, Any] = {"resourceType": "Bundle"}
    if bundle_type is not None:
        bundle["type"] = bundle_type
    bundle["entry"] = [_entry_to_json(entry, localhost=localhost) for entry in entries]
    log.debug("Rendered bundle with %d entries", len(entries))
    return bundle


def _entry_to_json(entry: BatchEntry, *, localhost: Localhost) -> dict[str, Any]:
    identifier = entry.identifier.without_origin()
    data: dict[str, Any] = {}
    if not is_uri_id(identifier.record_id):
        data["fullUrl"] = localhost.identifier_to_locator(identifier.without_version())
    if entry.payload is not None:
        data["resource"] = resource_from_record(entry.payload, identifier)
    data["request"] = {
        "method": entry.verb.value,
        "url": _request_url(entry, identifier),
    }
    return data


def _request_url(entry: BatchEntry, identifier: Identifier) -> str:
    if entry.verb is Verb.CREATE:
        return identifier.record_type
    return identifier.without_version().to_locator()

