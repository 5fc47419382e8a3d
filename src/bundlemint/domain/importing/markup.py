"""Rewriting of link and image targets inside embedded XHTML narratives."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final
from xml.etree import ElementTree as ET

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser

if TYPE_CHECKING:
    from collections.abc import Callable

log = logging.getLogger(__name__)

XHTML_NAMESPACE: Final[str] = "http://www.w3.org/1999/xhtml"
REFERENCE_ATTRIBUTES: Final[dict[str, str]] = {"a": "href", "img": "src"}

# serialize XHTML as the default namespace instead of an ``html:`` prefix
ET.register_namespace("", XHTML_NAMESPACE)


class MarkupOutcome(StrEnum):
    REWRITTEN = "rewritten"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True, slots=True)
class MarkupRewrite:
    div: str
    outcome: MarkupOutcome
    rewritten_targets: int = 0


def rewrite_markup(div: str, resolve: Callable[[str], str]) -> MarkupRewrite:
    """Resolve every ``a/@href`` and ``img/@src`` in ``div`` and re-serialize it.

    Content that is not well-formed XML, or that declares entities, is returned
    untouched with outcome ``UNPARSEABLE``. Comments and processing instructions
    are kept. Errors raised by ``resolve`` propagate.
    """

    try:
        root = _parse(div)
    except (ET.ParseError, DefusedXmlException) as exc:
        log.debug("Leaving unparseable narrative unchanged: %s", exc)
        return MarkupRewrite(div=div, outcome=MarkupOutcome.UNPARSEABLE)

    rewritten = 0
    for element in root.iter():
        attribute = REFERENCE_ATTRIBUTES.get(_local_name(element.tag))
        if attribute is None:
            continue
        value = element.get(attribute)
        if value is None:
            continue
        resolved = resolve(value)
        if resolved != value:
            element.set(attribute, resolved)
            rewritten += 1

    return MarkupRewrite(
        div=ET.tostring(root, encoding="unicode"),
        outcome=MarkupOutcome.REWRITTEN,
        rewritten_targets=rewritten,
    )


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        # comments and processing instructions
        return ""
    return tag.rsplit("}", 1)[-1]


def _parse(div: str) -> ET.Element:
    parser = DefusedXMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    parser.feed(div)
    return parser.close()
