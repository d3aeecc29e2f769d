"""Shared test fixtures for the dynamotree test suite."""

from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from dynamotree.config import get_settings
from dynamotree.config.settings import set_toml_config
from tests.factories import Account


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache and TOML source before and after each test.

    This ensures test isolation for configuration tests.
    """
    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog defaults after each test.

    setup_logging binds the current stderr, which pytest may close once the
    test finishes.
    """
    yield
    structlog.reset_defaults()


@pytest.fixture
def alice() -> Account:
    return Account(name="Alice", email="alice@example.com")


@pytest.fixture
def bob() -> Account:
    return Account(name="Bob", email="bob@example.com")
