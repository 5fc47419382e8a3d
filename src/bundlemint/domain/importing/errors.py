"""Fatal conditions raised while internalizing a bundle."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from bundlemint.domain.model import Identifier


class BundleImportError(RuntimeError):
    """Base class; the whole batch must be rejected."""

    status_code: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST


class MalformedIdentifierError(BundleImportError):
    """An entry identifier fits none of the recognised origin categories."""

    status_code: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST

    def __init__(self, identifier: Identifier) -> None:
        super().__init__(
            f"Client provided an identifier without a recognizable origin: {identifier}"
        )
        self.identifier = identifier


class UnresolvedReferenceError(BundleImportError):
    """A reference needs in-batch resolution but no entry in the batch matches it."""

    status_code: ClassVar[HTTPStatus] = HTTPStatus.CONFLICT

    def __init__(self, identifier: Identifier, *, locator: str) -> None:
        super().__init__(
            "This reference does not point to a resource on the server "
            f"or in the current batch: {locator}"
        )
        self.identifier = identifier
        self.locator = locator
