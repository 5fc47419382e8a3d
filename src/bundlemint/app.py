"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from bundlemint.adapters.bundle_json import (
    bundle_from_entries,
    entries_from_bundle,
    parse_bundle,
)
from bundlemint.adapters.localhost import Localhost
from bundlemint.adapters.sqlalchemy import SqlAlchemyIdentifierGenerator, startup
from bundlemint.config import get_server_config
from bundlemint.domain.importing import BatchImporter

if TYPE_CHECKING:
    from bundlemint.domain.importing import ReferenceReport
    from bundlemint.domain.ports import IdentifierGenerator

GeneratorFactory = Callable[[], "IdentifierGenerator"]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BundleImportResult:
    bundle: dict[str, Any]
    report: ReferenceReport


def default_generator_factory() -> IdentifierGenerator:
    return SqlAlchemyIdentifierGenerator(startup(force=True))


def import_bundle(
    data: Mapping[str, object],
    *,
    base_url: str | None = None,
    generator_factory: GeneratorFactory | None = None,
) -> BundleImportResult:
    """Internalize a JSON bundle into this server's identifier space.

    Raises ``pydantic.ValidationError`` for structurally invalid bundles,
    ``BundleFormatError`` for entries that cannot be addressed, and
    ``BundleImportError`` subclasses when identifiers or references cannot be
    internalized.
    """

    server = get_server_config(base_url=base_url)
    localhost = Localhost(server.base_url)
    payload = parse_bundle(data)
    entries = entries_from_bundle(payload, localhost=localhost)
    log.info(
        "Importing bundle: type=%s, entries=%d, base=%s",
        payload.type,
        len(entries),
        localhost.base,
    )

    generator = (generator_factory or default_generator_factory)()
    importer = BatchImporter(classifier=localhost, generator=generator)
    result = importer.internalize(entries)

    bundle = bundle_from_entries(
        result.entries,
        localhost=localhost,
        bundle_type=payload.type,
    )
    return BundleImportResult(bundle=bundle, report=result.report)
