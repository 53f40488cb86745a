"""Document model and field path handling.

A document is a mutable mapping of fields addressed by field paths, plus a
metadata side-map that is never part of the normal field space.

Field paths use two forms:

    message                  top-level key
    [user][name]             nested mappings
    [events][0]              list index (read, or write to an existing index)
    [@metadata][split_index] the metadata side-map
"""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from eventsplit.exceptions import FieldMergeError, FieldPathError

METADATA_KEY = "@metadata"
TAGS_FIELD = "tags"

_BRACKET_SEGMENT = re.compile(r"\[([^\[\]]*)\]")
_SPRINTF_REFERENCE = re.compile(r"%\{([^}]+)\}")

_MISSING = object()


@lru_cache(maxsize=1024)
def parse_field_path(path: str) -> tuple[str, ...]:
    """Split a field path into its segments.

    Args:
        path: A bare field name or a bracketed reference like "[a][b]"

    Returns:
        Tuple of path segments, outermost first

    Raises:
        FieldPathError: If the path is empty or malformed
    """
    if not isinstance(path, str) or not path:
        raise FieldPathError(f"Invalid field path: {path!r}")

    if not path.startswith("["):
        if "[" in path or "]" in path:
            raise FieldPathError(f"Invalid field path: {path!r}")
        return (path,)

    segments = _BRACKET_SEGMENT.findall(path)
    if "".join(f"[{s}]" for s in segments) != path:
        raise FieldPathError(f"Unbalanced brackets in field path: {path!r}")
    if any(not segment for segment in segments):
        raise FieldPathError(f"Empty segment in field path: {path!r}")
    return tuple(segments)


def _child(container: Any, segment: str) -> Any:
    """Return the value under segment, or _MISSING."""
    if isinstance(container, dict):
        return container.get(segment, _MISSING)
    if isinstance(container, list):
        try:
            index = int(segment)
        except ValueError:
            return _MISSING
        if -len(container) <= index < len(container):
            return container[index]
    return _MISSING


class Document:
    """One event flowing through the pipeline."""

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        self._data: dict[str, Any] = dict(data) if data else {}
        self.metadata: dict[str, Any] = dict(metadata) if metadata else {}
        self._cancelled = False

    def __repr__(self) -> str:
        state = ", cancelled" if self._cancelled else ""
        return f"Document({self._data!r}{state})"

    # -- field access -------------------------------------------------

    def _root_for(self, path: str) -> tuple[Any, tuple[str, ...]]:
        segments = parse_field_path(path)
        if segments[0] == METADATA_KEY:
            return self.metadata, segments[1:]
        return self._data, segments

    def get(self, path: str, default: Any = None) -> Any:
        """Return the value at path, or default when it does not exist."""
        current, segments = self._root_for(path)
        for segment in segments:
            current = _child(current, segment)
            if current is _MISSING:
                return default
        return current

    def includes(self, path: str) -> bool:
        """Check whether a value exists at path."""
        return self.get(path, _MISSING) is not _MISSING

    def set(self, path: str, value: Any) -> None:
        """Write value at path, creating intermediate mappings as needed.

        Raises:
            FieldPathError: If an intermediate value cannot hold children
        """
        current, segments = self._root_for(path)
        if not segments:
            if not isinstance(value, dict):
                raise FieldPathError(f"{METADATA_KEY} must be a mapping")
            self.metadata = dict(value)
            return

        *parents, last = segments
        for segment in parents:
            nested = _child(current, segment)
            if nested is _MISSING:
                if not isinstance(current, dict):
                    raise FieldPathError(
                        f"Cannot set {path}: no element {segment!r} in list"
                    )
                nested = current[segment] = {}
            elif not isinstance(nested, (dict, list)):
                raise FieldPathError(
                    f"Cannot set {path}: {segment!r} holds a {type(nested).__name__}"
                )
            current = nested

        if isinstance(current, dict):
            current[last] = value
            return
        try:
            current[int(last)] = value
        except (ValueError, IndexError) as e:
            raise FieldPathError(f"Cannot set {path}: invalid list index {last!r}") from e

    def remove(self, path: str) -> Any:
        """Delete the value at path.

        Returns:
            The removed value, or None if nothing was there
        """
        current, segments = self._root_for(path)
        if not segments:
            removed, self.metadata = self.metadata, {}
            return removed

        *parents, last = segments
        for segment in parents:
            current = _child(current, segment)
            if current is _MISSING:
                return None

        if isinstance(current, dict):
            return current.pop(last, None)
        if _child(current, last) is _MISSING:
            return None
        return current.pop(int(last))

    def merge_into_root(self, other: Mapping[str, Any]) -> None:
        """Shallow-merge the keys of other into the top-level fields.

        Keys of other win on conflict. An @metadata key is merged into the
        metadata side-map instead of the fields.
        """
        if not isinstance(other, Mapping):
            raise FieldMergeError("<root>", other)
        fields = dict(other)
        if METADATA_KEY in fields:
            metadata = fields.pop(METADATA_KEY)
            if not isinstance(metadata, Mapping):
                raise FieldMergeError(f"[{METADATA_KEY}]", metadata)
            self.metadata.update(metadata)
        self._data.update(fields)

    # -- tags and templates ------------------------------------------

    def add_tag(self, tag: str) -> None:
        """Append tag to the tags field unless it is already there."""
        tags = self._data.get(TAGS_FIELD)
        if tags is None:
            self._data[TAGS_FIELD] = [tag]
        elif isinstance(tags, list):
            if tag not in tags:
                tags.append(tag)
        elif tags != tag:
            self._data[TAGS_FIELD] = [tags, tag]

    def remove_tag(self, tag: str) -> None:
        """Drop every occurrence of tag from the tags field."""
        tags = self._data.get(TAGS_FIELD)
        if isinstance(tags, list):
            self._data[TAGS_FIELD] = [t for t in tags if t != tag]
        elif tags == tag:
            del self._data[TAGS_FIELD]

    def sprintf(self, template: str) -> str:
        """Expand %{path} references in template against this document.

        References to missing fields are left as written. Mappings and
        lists are rendered as JSON.
        """

        def replace(match: re.Match[str]) -> str:
            try:
                value = self.get(match.group(1), _MISSING)
            except FieldPathError:
                return match.group(0)
            if value is _MISSING or value is None:
                return match.group(0)
            if isinstance(value, (dict, list)):
                return json.dumps(value, ensure_ascii=False)
            return str(value)

        return _SPRINTF_REFERENCE.sub(replace, template)

    # -- lifecycle ---------------------------------------------------

    def clone(self) -> Document:
        """Return a deep, independent copy of fields and metadata.

        The clone is never cancelled.
        """
        return Document(copy.deepcopy(self._data), copy.deepcopy(self.metadata))

    def cancel(self) -> None:
        """Mark this document as suppressed; the pipeline must not emit it."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the fields, without metadata."""
        return copy.deepcopy(self._data)
