"""Unit tests for i18n_runtime.caching.loader module."""

import asyncio

import pytest

from i18n_runtime.caching import InMemoryCache, RequestScopedCache, TranslationMapLoader
from i18n_runtime.exceptions import StorageError
from i18n_runtime.hashing import derive_key
from i18n_runtime.storage import InMemoryStorage, StorageAdapter

pytestmark = pytest.mark.unit


class SlowStorage(StorageAdapter):
    def __init__(self, delay: float):
        self.delay = delay

    async def get_translations(self, locale):
        await asyncio.sleep(self.delay)
        return {"a": "b"}

    async def get_sources(self):
        await asyncio.sleep(self.delay)
        return []


class BrokenStorage(StorageAdapter):
    def __init__(self, error: Exception):
        self.error = error

    async def get_translations(self, locale):
        raise self.error

    async def get_sources(self):
        raise self.error


@pytest.fixture
def cache():
    return InMemoryCache()


class TestTranslationMapLoader:
    """Tests for TranslationMapLoader."""

    @pytest.mark.asyncio
    async def test_loads_from_storage_and_populates_cache(self, storage, cache):
        loader = TranslationMapLoader(storage, cache)

        translations = await loader.load("pt")

        assert translations[derive_key("Hello World")] == "Olá Mundo"
        assert await cache.get("pt") is translations

    @pytest.mark.asyncio
    async def test_cache_hit_skips_storage(self, storage, cache):
        loader = TranslationMapLoader(storage, cache)

        await loader.load("pt")
        await loader.load("pt")

        assert storage.calls == 1

    @pytest.mark.asyncio
    async def test_request_cache_deduplicates(self, storage, cache):
        loader = TranslationMapLoader(storage, cache)
        request_cache = RequestScopedCache()

        first, second = await asyncio.gather(
            loader.load("pt", request_cache),
            loader.load("pt", request_cache),
        )

        assert first is second
        assert storage.calls == 1

    @pytest.mark.asyncio
    async def test_result_is_read_only_copy(self, cache):
        source = {"pt": {"a": "b"}}
        loader = TranslationMapLoader(InMemoryStorage(source), cache)

        translations = await loader.load("pt")

        with pytest.raises(TypeError):
            translations["a"] = "c"

    @pytest.mark.asyncio
    async def test_storage_timeout_degrades_to_empty(self, cache):
        loader = TranslationMapLoader(SlowStorage(0.5), cache, storage_timeout_seconds=0.01)

        translations = await loader.load("pt")

        assert dict(translations) == {}
        assert await cache.get("pt") is None

    @pytest.mark.asyncio
    async def test_storage_error_propagates(self, cache):
        error = StorageError("boom", "pt")
        loader = TranslationMapLoader(BrokenStorage(error), cache)

        with pytest.raises(StorageError) as exc_info:
            await loader.load("pt")

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_other_failures_wrapped(self, cache):
        loader = TranslationMapLoader(BrokenStorage(ConnectionError("db down")), cache)

        with pytest.raises(StorageError, match="Failed to load translations for pt") as exc_info:
            await loader.load("pt")

        assert exc_info.value.locale == "pt"
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestLoadSources:
    """Tests for TranslationMapLoader.load_sources."""

    @pytest.mark.asyncio
    async def test_loads_sources(self, storage, cache):
        loader = TranslationMapLoader(storage, cache)

        sources = await loader.load_sources()

        assert sources[0].text == "Hello World"

    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self, cache):
        loader = TranslationMapLoader(SlowStorage(1.0), cache, storage_timeout_seconds=0.01)
        assert await loader.load_sources() == []

    @pytest.mark.asyncio
    async def test_failure_wrapped(self, cache):
        loader = TranslationMapLoader(BrokenStorage(RuntimeError("db down")), cache)

        with pytest.raises(StorageError, match="Failed to load source strings: db down"):
            await loader.load_sources()

    @pytest.mark.asyncio
    async def test_storage_error_passes_through(self, cache):
        error = StorageError("sources unreadable")
        loader = TranslationMapLoader(BrokenStorage(error), cache)

        with pytest.raises(StorageError) as exc_info:
            await loader.load_sources()

        assert exc_info.value is error
