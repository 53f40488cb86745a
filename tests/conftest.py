"""
Pytest configuration and fixtures for eventsplit tests
"""
import logging

import pytest

from eventsplit.logging_config import IndentLogger
from eventsplit.models import Document


@pytest.fixture
def sample_event() -> Document:
    """Event with a multi-line message and fields that must survive splitting"""
    return Document(
        {
            "message": "big\nbird\nsesame street",
            "host": "web-01",
            "labels": {"env": "prod", "team": ["a", "b"]},
        },
        metadata={"source": "exec"},
    )


@pytest.fixture
def events_document() -> Document:
    """Event with an array of objects"""
    return Document(
        {
            "still_here": True,
            "events": [{"id": 2, "user": "frank"}, {"id": 3, "user": "jane"}],
        }
    )


@pytest.fixture
def test_logger() -> IndentLogger:
    """IndentLogger at DEBUG level, so debug formatting runs in tests"""
    base = logging.getLogger("eventsplit.tests")
    base.setLevel(logging.DEBUG)
    return IndentLogger(base)
