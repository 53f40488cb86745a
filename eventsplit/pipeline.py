"""Pipeline host that runs documents through a chain of filters."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Protocol

from eventsplit.config import CommonOptions, PipelineSettings, split_filter_options
from eventsplit.exceptions import ConfigurationError
from eventsplit.logging_config import IndentLogger, logger as default_logger
from eventsplit.models import Document
from eventsplit.splitting import SplitResult, Splitter, apply_common_options


class Filter(Protocol):
    """A pipeline stage."""

    name: str

    def apply(self, document: Document) -> SplitResult:
        """Process one document, returning derived documents if any."""
        ...


@dataclass
class SplitFilter:
    """The split stage: a Splitter plus the decorations for its clones."""

    splitter: Splitter
    options: CommonOptions = field(default_factory=CommonOptions)
    name: str = "split"

    def apply(self, document: Document) -> SplitResult:
        """Split document and decorate each clone as it is emitted."""
        return self.splitter.process(
            document, emit=lambda child: apply_common_options(child, self.options)
        )


FilterFactory = Callable[[dict[str, Any], IndentLogger], Filter]


def create_split_filter(options: dict[str, Any], logger: IndentLogger) -> SplitFilter:
    """Build a SplitFilter from its options mapping."""
    config, common = split_filter_options(options)
    return SplitFilter(splitter=Splitter(config, logger=logger), options=common)


class FilterRegistry:
    """Registry mapping filter names to their factories."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._factories: dict[str, FilterFactory] = {}

    def register(self, name: str, factory: FilterFactory) -> None:
        """Register a filter factory.

        Args:
            name: Name used for the filter in settings files
            factory: Callable building the filter from its options

        Raises:
            ValueError: If name is empty
        """
        normalized = name.strip().lower()
        if not normalized:
            raise ValueError("Filter name cannot be empty")
        self._factories[normalized] = factory

    def create(
        self,
        name: str,
        options: dict[str, Any] | None = None,
        logger: IndentLogger | None = None,
    ) -> Filter:
        """Create a filter by name.

        Raises:
            ConfigurationError: If no filter is registered under name
        """
        factory = self._factories.get(name.strip().lower())
        if factory is None:
            available = ", ".join(sorted(self._factories)) or "<none>"
            raise ConfigurationError(
                f"Unknown filter: {name}. Registered filters: {available}"
            )
        return factory(options or {}, logger or default_logger)

    def registered_names(self) -> set[str]:
        """Return set of all registered filter names."""
        return set(self._factories.keys())


def create_default_registry() -> FilterRegistry:
    """Create a registry with the built-in filters."""
    registry = FilterRegistry()
    registry.register("split", create_split_filter)
    return registry


@dataclass
class PipelineStats:
    """Counters for one pipeline run."""

    received: int = 0
    emitted: int = 0
    suppressed: int = 0


class Pipeline:
    """Push documents through filters in order.

    Clones emitted by a filter continue through the filters after it. A
    document whose filter asks for suppression is cancelled and dropped.
    Configuration errors raised by a filter halt the run.
    """

    def __init__(
        self,
        filters: list[Filter],
        logger: IndentLogger | None = None,
    ) -> None:
        self._filters = list(filters)
        self._logger = logger or default_logger
        self.stats = PipelineStats()

    @classmethod
    def from_settings(
        cls,
        settings: PipelineSettings,
        registry: FilterRegistry | None = None,
        logger: IndentLogger | None = None,
    ) -> Pipeline:
        """Build a pipeline from parsed settings."""
        registry = registry or create_default_registry()
        logger = logger or default_logger
        filters = []
        for entry in settings.filters:
            ((name, options),) = entry.items()
            filters.append(registry.create(name, options or {}, logger))
        return cls(filters, logger=logger)

    @property
    def filters(self) -> list[Filter]:
        return list(self._filters)

    def run(self, documents: Iterable[Document]) -> Iterator[Document]:
        """Yield the documents that leave the pipeline, in order."""
        for number, document in enumerate(documents, start=1):
            self.stats.received += 1
            with self._logger.indent_block(f"Document {number}"):
                yield from self._run_from(document, 0)

    def _run_from(self, document: Document, start: int) -> Iterator[Document]:
        for position in range(start, len(self._filters)):
            stage = self._filters[position]
            result = stage.apply(document)
            if result.suppress_original:
                document.cancel()
                self.stats.suppressed += 1
                self._logger.debug(
                    f"{stage.name}: replaced by {len(result.emitted)} document(s)"
                )
                for child in result.emitted:
                    yield from self._run_from(child, position + 1)
                return
        self.stats.emitted += 1
        yield document
