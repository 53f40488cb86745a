"""JSON Lines reader and writer for documents."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import TextIO

from eventsplit.exceptions import DocumentFormatError
from eventsplit.models import METADATA_KEY, Document


def read_documents(stream: Iterable[str]) -> Iterator[Document]:
    """Yield one Document per non-blank line.

    An "@metadata" key in the input object becomes the document's metadata.

    Raises:
        DocumentFormatError: If a line is not a JSON object
    """
    for line_number, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise DocumentFormatError(line_number, f"invalid JSON ({e.msg})") from e
        if not isinstance(data, dict):
            raise DocumentFormatError(
                line_number, f"expected a JSON object, got {type(data).__name__}"
            )
        metadata = data.pop(METADATA_KEY, None)
        if metadata is not None and not isinstance(metadata, dict):
            raise DocumentFormatError(line_number, f"{METADATA_KEY} must be an object")
        yield Document(data, metadata)


def write_documents(
    documents: Iterable[Document],
    stream: TextIO,
    include_metadata: bool = False,
) -> int:
    """Write documents as JSON Lines.

    Args:
        documents: Documents to write
        stream: Text stream to write to
        include_metadata: Also write metadata under "@metadata"

    Returns:
        Number of documents written
    """
    count = 0
    for document in documents:
        data = document.to_dict()
        if include_metadata and document.metadata:
            data[METADATA_KEY] = document.metadata
        stream.write(json.dumps(data, ensure_ascii=False) + "\n")
        count += 1
    return count
