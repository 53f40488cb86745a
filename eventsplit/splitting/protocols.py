"""Protocols and data structures for the splitting system."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from eventsplit.exceptions import UnsplittableFieldType


class SplittableDocument(Protocol):
    """What the splitter needs from a document.

    Implemented by eventsplit.models.Document; hosts with their own event
    type can implement it directly.
    """

    metadata: dict[str, Any]

    def get(self, path: str, default: Any = None) -> Any: ...

    def set(self, path: str, value: Any) -> None: ...

    def remove(self, path: str) -> Any: ...

    def clone(self) -> SplittableDocument: ...

    def merge_into_root(self, other: Mapping[str, Any]) -> None: ...

    def cancel(self) -> None: ...


class SourceKind(str, Enum):
    """Kinds of source value the splitter accepts."""

    STRING = "string"
    SEQUENCE = "sequence"


@dataclass(frozen=True)
class SourceValue:
    """The source field's value, classified once per document.

    Attributes:
        kind: Whether the value was a string or a sequence
        splits: The split elements in source order
    """

    kind: SourceKind
    splits: list[Any]

    @classmethod
    def classify(cls, field_path: str, value: Any, terminator: str) -> SourceValue:
        """Classify value and split it.

        Strings are split on the literal terminator, keeping trailing empty
        segments. Lists and tuples are already split.

        Raises:
            UnsplittableFieldType: For any other value, including a missing field
        """
        if isinstance(value, (list, tuple)):
            return cls(kind=SourceKind.SEQUENCE, splits=list(value))
        if isinstance(value, str):
            return cls(kind=SourceKind.STRING, splits=value.split(terminator))
        raise UnsplittableFieldType(field_path, value)

    @property
    def is_unsplit_string(self) -> bool:
        """A string that did not contain the terminator."""
        return self.kind is SourceKind.STRING and len(self.splits) == 1


@dataclass
class SplitResult:
    """Outcome of splitting one document.

    Attributes:
        emitted: Derived documents in split order
        suppress_original: Whether the input document must not be forwarded
    """

    emitted: list[SplittableDocument] = field(default_factory=list)
    suppress_original: bool = False
