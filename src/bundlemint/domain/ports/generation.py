"""Port for minting canonical identifiers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bundlemint.domain.model import Identifier


@runtime_checkable
class IdentifierGenerator(Protocol):
    """Issues identifiers in the server's canonical identifier space."""

    def next_identifier(self, original: Identifier) -> Identifier:
        """Mint a brand-new record identity of the same record type."""
        ...

    def next_version(self, original: Identifier) -> Identifier:
        """Mint the next version of ``original``'s record identity."""
        ...
