"""Bundle internalization core.

Two passes over one batch:
1) key internalization assigns each non-deletion entry a canonical identifier
2) reference internalization rewrites every reference inside every payload
"""

from __future__ import annotations

from .errors import BundleImportError, MalformedIdentifierError, UnresolvedReferenceError
from .identifier_map import IdentifierMap
from .importer import BatchImporter, ImportResult, internalize
from .keys import internalize_key, internalize_keys
from .markup import MarkupOutcome, MarkupRewrite, rewrite_markup
from .references import ReferenceReport, ReferenceResolver, internalize_references
from .walker import iter_reference_fields, walk_reference_fields

__all__ = [
    "BatchImporter",
    "BundleImportError",
    "IdentifierMap",
    "ImportResult",
    "MalformedIdentifierError",
    "MarkupOutcome",
    "MarkupRewrite",
    "ReferenceReport",
    "ReferenceResolver",
    "UnresolvedReferenceError",
    "internalize",
    "internalize_key",
    "internalize_keys",
    "internalize_references",
    "iter_reference_fields",
    "rewrite_markup",
    "walk_reference_fields",
]
