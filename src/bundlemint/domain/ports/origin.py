"""Port for placing identifiers and locators relative to this server."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bundlemint.domain.model import Identifier, OriginKind


@runtime_checkable
class OriginClassifier(Protocol):
    """Knows the server's own base address and how identifiers relate to it."""

    def classify_origin(self, identifier: Identifier) -> OriginKind: ...

    def is_own_authority(self, locator: str) -> bool: ...

    def locator_to_identifier(self, locator: str) -> Identifier: ...
