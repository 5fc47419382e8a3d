"""Orchestrator for internalizing a submitted batch.

Both passes run over the whole batch, strictly one after the other: every
entry key is internalized before any reference is resolved, which is what
makes forward references between entries resolvable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .keys import internalize_keys
from .references import internalize_references

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from bundlemint.domain.model import BatchEntry
    from bundlemint.domain.ports import IdentifierGenerator, OriginClassifier

    from .references import ReferenceReport

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportResult:
    entries: list[BatchEntry]
    report: ReferenceReport


def internalize(
    entries: Sequence[BatchEntry],
    *,
    classifier: OriginClassifier,
    generator: IdentifierGenerator,
) -> ImportResult:
    """Rewrite ``entries`` in place into the server's canonical identifier space.

    Raises ``MalformedIdentifierError`` or ``UnresolvedReferenceError``; after
    either, the entries are partially rewritten and must not be persisted.
    """

    batch = list(entries)
    identifier_map = internalize_keys(batch, classifier=classifier, generator=generator)
    report = internalize_references(batch, identifier_map=identifier_map, classifier=classifier)
    log.info(
        "Internalized batch: entries=%d, remapped=%d, references=%d, rewritten=%d, "
        "external=%d, unparseable_narratives=%d",
        len(batch),
        len(identifier_map),
        report.visited,
        report.rewritten,
        report.external,
        len(report.unparseable_narratives),
    )
    return ImportResult(entries=batch, report=report)


@dataclass(slots=True)
class BatchImporter:
    """Collect entries and internalize them as one batch.

    Instances are not shared between concurrent imports; staged entries are
    cleared after every ``internalize`` call.
    """

    classifier: OriginClassifier
    generator: IdentifierGenerator
    _staged: list[BatchEntry] = field(default_factory=list["BatchEntry"], repr=False)

    def add(self, entry: BatchEntry) -> None:
        self._staged.append(entry)

    def add_range(self, entries: Iterable[BatchEntry]) -> None:
        for entry in entries:
            self.add(entry)

    @property
    def staged(self) -> tuple[BatchEntry, ...]:
        return tuple(self._staged)

    def internalize(self, entries: Iterable[BatchEntry] | None = None) -> ImportResult:
        if entries is not None:
            self.add_range(entries)
        batch, self._staged = self._staged, []
        return internalize(batch, classifier=self.classifier, generator=self.generator)
