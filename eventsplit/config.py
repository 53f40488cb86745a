"""Configuration models for the split filter and the pipeline host.

Options are validated here, before any filter is constructed, so the
filters themselves can assume well-formed configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from eventsplit.exceptions import ConfigurationError
from eventsplit.models import parse_field_path

DEFAULT_TERMINATOR = "\n"
DEFAULT_FIELD = "message"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SplitConfig(BaseModel):
    """Policy of one split filter.

    Attributes:
        terminator: Literal separator used when the source field is a string
        field: Path of the field to split
        target: Path the split value is written to (defaults to field)
        merge_hash: Merge mapping elements into the root or into target
        delete_field: Remove field from each clone unless it holds the result
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    terminator: str = DEFAULT_TERMINATOR
    field: str = DEFAULT_FIELD
    target: str | None = None
    merge_hash: bool = False
    delete_field: bool = False

    @field_validator("terminator")
    @classmethod
    def _terminator_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("terminator must not be empty")
        return value

    @field_validator("field", "target")
    @classmethod
    def _valid_path(cls, value: str | None) -> str | None:
        if value is not None:
            parse_field_path(value)
        return value

    @property
    def output_field(self) -> str:
        """Field the split value is written to."""
        return self.target or self.field

    @property
    def targets_source_field(self) -> bool:
        """Whether target is set and addresses the same field as field.

        Paths are compared after parsing, so message and [message] match.
        """
        if self.target is None:
            return False
        return parse_field_path(self.target) == parse_field_path(self.field)


class CommonOptions(BaseModel):
    """Decorations applied to every document a filter emits.

    Values may reference document fields with %{path}.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    add_field: dict[str, Any] = {}
    remove_field: list[str] = []
    add_tag: list[str] = []
    remove_tag: list[str] = []

    @property
    def is_empty(self) -> bool:
        return not (self.add_field or self.remove_field or self.add_tag or self.remove_tag)


def split_filter_options(options: dict[str, Any]) -> tuple[SplitConfig, CommonOptions]:
    """Validate a split filter's options mapping.

    Keys belonging to CommonOptions are separated from the split policy.

    Raises:
        ConfigurationError: If any option is unknown or invalid
    """
    common_keys = set(CommonOptions.model_fields)
    common = {k: v for k, v in options.items() if k in common_keys}
    policy = {k: v for k, v in options.items() if k not in common_keys}
    try:
        return SplitConfig(**policy), CommonOptions(**common)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid split filter options: {e}") from e


class PipelineSettings(BaseModel):
    """Parsed pipeline settings file.

    Attributes:
        filters: Ordered list of single-key mappings {filter_name: options}
        log_level: Logging level for the run
    """

    model_config = ConfigDict(extra="forbid")

    filters: list[dict[str, dict[str, Any] | None]] = []
    log_level: str = "WARNING"

    @field_validator("filters")
    @classmethod
    def _one_filter_per_entry(
        cls, value: list[dict[str, dict[str, Any] | None]]
    ) -> list[dict[str, dict[str, Any] | None]]:
        for index, entry in enumerate(value):
            if len(entry) != 1:
                raise ValueError(
                    f"filters[{index}] must name exactly one filter, got {sorted(entry)}"
                )
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        if value.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {value}. Must be one of: {sorted(VALID_LOG_LEVELS)}")
        return value.upper()


def load_settings(path: str | Path) -> PipelineSettings:
    """Load pipeline settings from a YAML file.

    Example file:

        log_level: DEBUG
        filters:
          - split:
              field: events
              merge_hash: true
              add_tag: [split]

    Raises:
        ConfigurationError: If the file is missing, not YAML, or invalid
    """
    settings_path = Path(path)
    if not settings_path.exists():
        raise ConfigurationError(f"Settings file not found: {settings_path}")

    try:
        with settings_path.open("r", encoding="utf-8") as f:
            parsed = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {settings_path}: {e}") from e

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ConfigurationError("Settings file must contain a YAML mapping at top level")

    try:
        return PipelineSettings(**parsed)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {settings_path}: {e}") from e
