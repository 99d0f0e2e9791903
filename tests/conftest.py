"""Pytest configuration shared by all test modules."""

from __future__ import annotations

import pytest
import structlog

from minvcs import MinvcsEngine, initialize_repository


@pytest.fixture(autouse=True)
def reset_structlog():
    """Start every test from structlog defaults, so capture_logs sees all levels."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def engine(tmp_path):
    """Create an initialized repository and engine for testing."""
    root = initialize_repository(tmp_path / "repo")
    return MinvcsEngine(root)
