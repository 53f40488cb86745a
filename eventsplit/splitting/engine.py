"""Split engine that turns one document into one clone per split element."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from eventsplit.config import SplitConfig
from eventsplit.exceptions import FieldMergeError
from eventsplit.logging_config import IndentLogger, logger as default_logger
from eventsplit.splitting.protocols import SourceValue, SplitResult, SplittableDocument

SPLIT_INDEX_KEY = "split_index"

EmitCallback = Callable[[SplittableDocument], None]


class Splitter:
    """Clone a document once per element of one of its fields.

    The field is either a string, split on the configured terminator, or a
    sequence, whose elements are used as they are. Each clone is a full
    copy of the original with only the output field changed, and carries
    its 1-based position among the emitted clones in
    metadata["split_index"].

    The splitter holds no state besides its frozen configuration, so one
    instance may serve many threads.
    """

    def __init__(
        self,
        config: SplitConfig | None = None,
        logger: IndentLogger | None = None,
    ) -> None:
        """Initialize the splitter.

        Args:
            config: Split policy (defaults: split "message" on newlines)
            logger: Logger for per-clone debug lines
        """
        self._config = config or SplitConfig()
        self._logger = logger or default_logger

    @property
    def config(self) -> SplitConfig:
        return self._config

    def process(
        self,
        document: SplittableDocument,
        emit: EmitCallback | None = None,
    ) -> SplitResult:
        """Split a document.

        Args:
            document: The document to split; it is never mutated
            emit: Optional callback invoked with each clone as it is made

        Returns:
            SplitResult with the clones and whether to suppress the original

        Raises:
            UnsplittableFieldType: If the field is not a string or sequence
            FieldMergeError: If a mapping is merged into a non-mapping target
        """
        source = self._classify(document)

        # A string without the terminator passes through untouched
        if source.is_unsplit_string:
            return SplitResult(emitted=[], suppress_original=False)

        result = SplitResult()
        for child in self._clones(document, source):
            if emit is not None:
                emit(child)
            result.emitted.append(child)
        result.suppress_original = True
        return result

    def iter_splits(self, document: SplittableDocument) -> Iterator[SplittableDocument]:
        """Lazily yield the clones of a document.

        The source field is classified immediately, so a type error is
        raised by this call rather than on first iteration. An unsplit
        string yields nothing.
        """
        source = self._classify(document)
        if source.is_unsplit_string:
            return iter(())
        return self._clones(document, source)

    def _classify(self, document: SplittableDocument) -> SourceValue:
        field = self._config.field
        return SourceValue.classify(field, document.get(field), self._config.terminator)

    def _clones(
        self,
        document: SplittableDocument,
        source: SourceValue,
    ) -> Iterator[SplittableDocument]:
        config = self._config
        output_field = config.output_field
        delete_source = config.delete_field and self._can_delete_field()

        index = 0
        for value in source.splits:
            if isinstance(value, str) and value == "":
                continue

            index += 1
            child = document.clone()
            # Elements come from the original; copy so clones share nothing
            value = copy.deepcopy(value)
            if self._logger.isEnabledFor(logging.DEBUG):
                self._logger.debug(f"Split event #{index} field={config.field} value={value!r}")

            if config.merge_hash and self._can_merge_root(value):
                child.merge_into_root(value)
            elif config.merge_hash and self._can_merge_target(value):
                existing = child.get(output_field)
                if not isinstance(existing, Mapping):
                    raise FieldMergeError(output_field, existing)
                child.set(output_field, {**existing, **value})
            else:
                child.set(output_field, value)

            if delete_source:
                child.remove(config.field)

            child.metadata[SPLIT_INDEX_KEY] = index
            yield child

    def _can_merge_root(self, value: Any) -> bool:
        """Merge into the root when no target was configured."""
        return isinstance(value, Mapping) and self._config.target is None

    def _can_merge_target(self, value: Any) -> bool:
        """Merge into target when target is not the source field."""
        config = self._config
        return (
            isinstance(value, Mapping)
            and config.target is not None
            and not config.targets_source_field
        )

    def _can_delete_field(self) -> bool:
        """Whether removing the source field keeps the split result.

        With merge_hash an unset target counts as different from the
        field, since mappings go to the root.
        """
        config = self._config
        if config.targets_source_field:
            return False
        return config.merge_hash or config.target is not None
