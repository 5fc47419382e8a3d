"""Domain port definitions for adapters."""

from __future__ import annotations

from .generation import IdentifierGenerator
from .origin import OriginClassifier

__all__ = [
    "IdentifierGenerator",
    "OriginClassifier",
]
