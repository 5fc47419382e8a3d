"""Reference internalization: rewrite in-payload references to canonical form.

Runs only after every entry key has been internalized, so a reference may
point at an entry that appears later in the batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from bundlemint.domain.model import NarrativeField, OriginKind, ReferenceField, UriField

from .errors import UnresolvedReferenceError
from .markup import MarkupOutcome, rewrite_markup
from .walker import walk_reference_fields

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bundlemint.domain.model import BatchEntry, Identifier, ReferenceBearingField
    from bundlemint.domain.ports import OriginClassifier

    from .identifier_map import IdentifierMap
    from .markup import MarkupRewrite

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReferenceReport:
    """Counters describing what the reference pass did to a batch."""

    visited: int = 0
    rewritten: int = 0
    external: int = 0
    narratives_rewritten: int = 0
    unparseable_narratives: list[str] = field(default_factory=list[str])


@dataclass(slots=True)
class ReferenceResolver:
    """Apply the reference-resolution rule against one import's identifier map."""

    identifier_map: IdentifierMap
    classifier: OriginClassifier
    report: ReferenceReport = field(default_factory=ReferenceReport)

    def resolve(self, locator: str | None) -> str | None:
        if locator is None or not _is_plausible_locator(locator):
            return locator

        if not self.classifier.is_own_authority(locator):
            self.report.external += 1
            return locator

        try:
            original = self.classifier.locator_to_identifier(locator)
        except ValueError:
            log.debug("Leaving unrecognised locator unchanged: %s", locator)
            return locator

        replacement = self._internalize(original, locator=locator)
        if replacement is None:
            return locator
        resolved = replacement.to_locator()
        if resolved != locator:
            self.report.rewritten += 1
        return resolved

    def resolve_text(self, locator: str) -> str:
        resolved = self.resolve(locator)
        return locator if resolved is None else resolved

    def _internalize(self, original: Identifier, *, locator: str) -> Identifier | None:
        kind = self.classifier.classify_origin(original)
        if kind is OriginKind.FOREIGN or kind is OriginKind.TEMPORARY:
            canonical = self.identifier_map.lookup(original)
            if canonical is None:
                raise UnresolvedReferenceError(original, locator=locator)
            if original.version_id is None:
                canonical = canonical.without_version()
            return canonical.without_origin()
        if kind is OriginKind.LOCAL:
            return original.without_origin()
        # internal identifiers are passed through; an entry key of this kind is fatal instead
        return None

    def visit(self, reference_field: ReferenceBearingField) -> None:
        self.report.visited += 1
        if isinstance(reference_field, ReferenceField):
            reference_field.reference = self.resolve(reference_field.reference)
        elif isinstance(reference_field, UriField):
            reference_field.value = self.resolve(reference_field.value)
        elif isinstance(reference_field, NarrativeField):
            self._visit_narrative(reference_field)

    def _visit_narrative(self, narrative: NarrativeField) -> MarkupRewrite:
        result = rewrite_markup(narrative.div, self.resolve_text)
        if result.outcome is MarkupOutcome.UNPARSEABLE:
            self.report.unparseable_narratives.append(narrative.div)
            return result
        narrative.div = result.div
        self.report.narratives_rewritten += 1
        return result


def internalize_references(
    entries: Sequence[BatchEntry],
    *,
    identifier_map: IdentifierMap,
    classifier: OriginClassifier,
) -> ReferenceReport:
    """Rewrite every reference-bearing field of every non-deletion payload in place."""

    resolver = ReferenceResolver(identifier_map=identifier_map, classifier=classifier)
    for entry in entries:
        if entry.is_deletion or entry.payload is None:
            continue
        walk_reference_fields(entry.payload, resolver.visit)
    return resolver.report


def _is_plausible_locator(value: str) -> bool:
    if not value or any(char.isspace() for char in value):
        return False
    # fragment references point at contained resources, not at other records
    if value.startswith("#"):
        return False
    try:
        urlsplit(value)
    except ValueError:
        return False
    return True
