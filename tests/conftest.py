"""Shared fixtures for all tests."""

import pytest

from foodorder.infrastructure.repositories import reset_repositories


@pytest.fixture(autouse=True)
def fresh_repositories():
    """Start every test with empty in-memory repositories."""
    reset_repositories()
    yield
    reset_repositories()
