"""Per-import mapping from client identifiers to canonical identifiers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import ItemsView

    from bundlemint.domain.model import Identifier


@dataclass(slots=True)
class IdentifierMap:
    """Write-once association of original identifiers with canonical ones.

    Built by the key pass and only read by the reference pass. Keys compare by
    record identity, so a reference written with or without a version or origin
    finds the entry that declared it.
    """

    _targets: dict[Identifier, Identifier] = field(
        default_factory=dict["Identifier", "Identifier"], repr=False
    )

    def assign(self, original: Identifier, canonical: Identifier) -> Identifier:
        if original in self._targets:
            raise ValueError(
                f"Identifier {original} is already mapped to {self._targets[original]}"
            )
        self._targets[original] = canonical
        return canonical

    def lookup(self, original: Identifier) -> Identifier | None:
        return self._targets.get(original)

    def items(self) -> ItemsView[Identifier, Identifier]:
        return self._targets.items()

    def __contains__(self, original: object) -> bool:
        return original in self._targets

    def __len__(self) -> int:
        return len(self._targets)
