"""Decorations applied to documents a filter has matched."""

from __future__ import annotations

import copy

from eventsplit.config import CommonOptions
from eventsplit.models import Document


def apply_common_options(document: Document, options: CommonOptions) -> None:
    """Apply add_field, remove_field, add_tag and remove_tag, in that order.

    Field names, field values and tags may contain %{path} references,
    which are expanded against the document being decorated. Other values
    are copied, so no two documents share them.
    """
    for path, value in options.add_field.items():
        field = document.sprintf(path)
        if isinstance(value, str):
            value = document.sprintf(value)
        else:
            value = copy.deepcopy(value)
        existing = document.get(field)
        if existing is None:
            document.set(field, value)
        elif isinstance(existing, list):
            existing.append(value)
        elif existing != value:
            # Adding to an existing field turns it into a list
            document.set(field, [existing, value])

    for path in options.remove_field:
        document.remove(document.sprintf(path))

    for tag in options.add_tag:
        document.add_tag(document.sprintf(tag))

    for tag in options.remove_tag:
        document.remove_tag(document.sprintf(tag))
