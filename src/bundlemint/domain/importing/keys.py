"""Key internalization: give every non-deletion entry a canonical identifier."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bundlemint.domain.model import OriginKind

from .errors import MalformedIdentifierError
from .identifier_map import IdentifierMap

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bundlemint.domain.model import BatchEntry, Identifier
    from bundlemint.domain.ports import IdentifierGenerator, OriginClassifier

log = logging.getLogger(__name__)


def internalize_keys(
    entries: Sequence[BatchEntry],
    *,
    classifier: OriginClassifier,
    generator: IdentifierGenerator,
) -> IdentifierMap:
    """Replace each entry's identifier and return the map of replacements.

    Remapping policy by origin kind:
    - foreign / temporary -> fresh identity
    - local with an update-in-place verb -> next version of the same identity
    - local with any other verb -> fresh identity
    - internal -> ``MalformedIdentifierError``

    Deletions keep the identifier the client supplied.
    """

    identifier_map = IdentifierMap()
    for entry in entries:
        internalize_key(entry, identifier_map, classifier=classifier, generator=generator)
    log.debug("Internalized %d entry keys", len(identifier_map))
    return identifier_map


def internalize_key(
    entry: BatchEntry,
    identifier_map: IdentifierMap,
    *,
    classifier: OriginClassifier,
    generator: IdentifierGenerator,
) -> None:
    if entry.is_deletion:
        return

    original = entry.identifier
    kind = classifier.classify_origin(original)
    if kind is OriginKind.FOREIGN or kind is OriginKind.TEMPORARY:
        canonical = generator.next_identifier(original)
    elif kind is OriginKind.LOCAL:
        if entry.verb.updates_in_place:
            canonical = generator.next_version(original)
        else:
            canonical = generator.next_identifier(original)
    else:
        raise MalformedIdentifierError(original)

    entry.identifier = _remap(identifier_map, original, canonical)
    log.debug("Remapped %s key %s -> %s", kind, original, entry.identifier)


def _remap(
    identifier_map: IdentifierMap, original: Identifier, canonical: Identifier
) -> Identifier:
    return identifier_map.assign(original, canonical.without_origin())
