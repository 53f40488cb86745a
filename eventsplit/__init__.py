"""
eventsplit - Split one pipeline event into many

A record-transformation stage: given a document whose field holds a
delimited string or a sequence, produce one clone of the document per
element, and suppress the original.

Example usage:

    from eventsplit import Document, SplitConfig, Splitter

    splitter = Splitter(SplitConfig(field="message"))
    result = splitter.process(Document({"message": "big\\nbird"}))

    for clone in result.emitted:
        print(clone.get("message"), clone.metadata["split_index"])
"""

__version__ = "0.1.0"

from eventsplit.config import CommonOptions, PipelineSettings, SplitConfig, load_settings
from eventsplit.exceptions import (
    ConfigurationError,
    DocumentFormatError,
    FieldMergeError,
    FieldPathError,
    SplitError,
    UnsplittableFieldType,
)
from eventsplit.models import Document
from eventsplit.pipeline import FilterRegistry, Pipeline, SplitFilter
from eventsplit.splitting import SplitResult, Splitter

__all__ = [
    "CommonOptions",
    "ConfigurationError",
    "Document",
    "DocumentFormatError",
    "FieldMergeError",
    "FieldPathError",
    "FilterRegistry",
    "Pipeline",
    "PipelineSettings",
    "SplitConfig",
    "SplitError",
    "SplitFilter",
    "SplitResult",
    "Splitter",
    "UnsplittableFieldType",
    "load_settings",
]
