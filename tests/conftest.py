"""Shared pytest fixtures and configuration."""

import pytest

from teachreg.registry import RegistrationStore


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def store():
    """Create an in-memory RegistrationStore."""
    s = RegistrationStore(":memory:")
    yield s
    s.close()
