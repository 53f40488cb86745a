"""Splitting module for cloning documents per element of a field.

A string field is split on a literal terminator, a sequence field is used
as it is, and every element ends up in its own clone of the document.
"""

from eventsplit.splitting.engine import SPLIT_INDEX_KEY, Splitter
from eventsplit.splitting.matched import apply_common_options
from eventsplit.splitting.protocols import (
    SourceKind,
    SourceValue,
    SplitResult,
    SplittableDocument,
)

__all__ = [
    "SPLIT_INDEX_KEY",
    "SourceKind",
    "SourceValue",
    "SplitResult",
    "SplittableDocument",
    "Splitter",
    "apply_common_options",
]
