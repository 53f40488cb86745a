"""Exceptions raised by the split filter and its pipeline host."""

from __future__ import annotations


class SplitError(Exception):
    """Base class for all eventsplit errors."""


class ConfigurationError(SplitError):
    """Raised when a filter or pipeline is configured in a way that cannot work.

    Configuration errors are not retried: the same configuration fails the
    same way for every document.
    """


class UnsplittableFieldType(ConfigurationError):
    """Raised when the source field holds neither a string nor a sequence."""

    def __init__(self, field: str, value: object) -> None:
        """Initialize the error.

        Args:
            field: The configured source field path
            value: The value found at that path
        """
        self.field = field
        self.value_type = type(value).__name__
        super().__init__(
            "Only strings and sequences are splittable. "
            f"field:{field} is of type = {self.value_type}"
        )


class FieldMergeError(SplitError):
    """Raised when a mapping is merged into a field that is not a mapping."""

    def __init__(self, field: str, existing: object) -> None:
        self.field = field
        super().__init__(
            f"Cannot merge into field {field}: "
            f"existing value is of type {type(existing).__name__}, expected a mapping"
        )


class FieldPathError(SplitError, ValueError):
    """Raised for malformed field paths or paths that cannot be written."""


class DocumentFormatError(SplitError):
    """Raised when serialized input cannot be turned into documents."""

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        super().__init__(f"Line {line_number}: {reason}")
