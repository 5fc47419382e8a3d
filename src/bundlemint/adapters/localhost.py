"""Origin classification for a server reachable at a single base URL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final
from urllib.parse import urlsplit, urlunsplit

from bundlemint.domain.model import HISTORY_SEGMENT, Identifier, OriginKind, is_uri_id

HTTP_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})


def normalize_base_url(base_url: str) -> str:
    """Lower-case scheme and host and drop a trailing slash, query and fragment."""

    parts = urlsplit(base_url.strip())
    if parts.scheme.lower() not in HTTP_SCHEMES or not parts.netloc:
        raise ValueError(f"Base URL must be an absolute http(s) URL: {base_url!r}")
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path.rstrip("/"), "", "")
    )


@dataclass(frozen=True, slots=True)
class Localhost:
    """Places identifiers and locators relative to ``base_url``.

    - ids that are URNs (``urn:uuid:``, ``urn:oid:``, ``cid:``) are temporary
    - ids without an origin are internal: clients must say where an id is from
    - ids whose origin is ``base_url`` are local, any other origin is foreign
    """

    base_url: str
    _base: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_base", normalize_base_url(self.base_url))

    @property
    def base(self) -> str:
        return self._base

    def classify_origin(self, identifier: Identifier) -> OriginKind:
        if is_uri_id(identifier.record_id):
            return OriginKind.TEMPORARY
        if not identifier.has_origin:
            return OriginKind.INTERNAL
        if self.is_base(identifier.origin or ""):
            return OriginKind.LOCAL
        return OriginKind.FOREIGN

    def is_base(self, origin: str) -> bool:
        try:
            return normalize_base_url(origin) == self._base
        except ValueError:
            return False

    def is_own_authority(self, locator: str) -> bool:
        if is_uri_id(locator):
            return True
        parts = urlsplit(locator)
        if not parts.scheme and not parts.netloc:
            # relative locators are resolved against this server
            return True
        if parts.scheme.lower() not in HTTP_SCHEMES:
            return False
        return self._under_base(locator)

    def locator_to_identifier(self, locator: str) -> Identifier:
        """Parse ``[origin/]Type/id[/_history/vid]`` or a bare URN.

        Raises ``ValueError`` when the locator does not address a record.
        """

        if is_uri_id(locator):
            return Identifier(record_type="", record_id=locator)

        parts = urlsplit(locator)
        if parts.query or parts.fragment:
            locator = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
        if parts.scheme or parts.netloc:
            if self._under_base(locator):
                origin = self._base
                path = locator[len(self._base) :]
            else:
                origin, path = _split_foreign(locator)
        else:
            origin, path = None, locator
        record_type, record_id, version_id = parse_record_path(path)
        return Identifier(
            record_type=record_type,
            record_id=record_id,
            version_id=version_id,
            origin=origin,
        )

    def identifier_to_locator(self, identifier: Identifier) -> str:
        """Absolute locator of ``identifier`` on this server."""

        return identifier.with_origin(self._base).to_locator()

    def _under_base(self, locator: str) -> bool:
        parts = urlsplit(locator)
        candidate = urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path, "", ""))
        return candidate == self._base or candidate.startswith(f"{self._base}/")


def parse_record_path(path: str) -> tuple[str, str, str | None]:
    """Split ``Type/id[/_history/vid]`` into its components."""

    segments = [segment for segment in path.strip("/").split("/") if segment]
    if len(segments) == 2:  # noqa: PLR2004
        return segments[0], segments[1], None
    if len(segments) == 4 and segments[2] == HISTORY_SEGMENT:  # noqa: PLR2004
        return segments[0], segments[1], segments[3]
    raise ValueError(f"Not a record locator: {path!r}")


def _split_foreign(locator: str) -> tuple[str, str]:
    """Split a foreign absolute URL into its base and its record path.

    The record path is the trailing ``Type/id`` (optionally with history);
    whatever precedes it is taken as the foreign base.
    """

    parts = urlsplit(locator)
    segments = parts.path.rstrip("/").split("/")
    keep = 4 if len(segments) >= 4 and segments[-2] == HISTORY_SEGMENT else 2  # noqa: PLR2004
    if len([segment for segment in segments if segment]) < keep:
        raise ValueError(f"Not a record locator: {locator!r}")
    base_path = "/".join(segments[:-keep])
    origin = urlunsplit((parts.scheme.lower(), parts.netloc.lower(), base_path, "", ""))
    return origin, "/".join(segments[-keep:])
