"""Shared fixtures for translation runtime tests."""

import pytest

from i18n_runtime.configuration import get_settings
from i18n_runtime.formatter import get_default_formatter
from i18n_runtime.logging import configure_logging
from i18n_runtime.storage import InMemoryStorage
from tests.factories.i18n import make_sources, make_translations


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    configure_logging()


@pytest.fixture(autouse=True)
def reset_providers():
    """Clear cached providers so settings overrides never leak between tests."""
    get_settings.cache_clear()
    get_default_formatter.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_formatter.cache_clear()


@pytest.fixture
def translations():
    """Per-locale translation maps keyed by derived hash."""
    return make_translations()


@pytest.fixture
def storage(translations) -> InMemoryStorage:
    return InMemoryStorage(translations, sources=make_sources())
