"""Unit tests for i18n_runtime.plurals module."""

from decimal import Decimal

import pytest

from i18n_runtime.plurals import (
    CLIENT_CACHE_SIZE,
    SERVER_CACHE_SIZE,
    PluralCategoryCache,
    create_plural_cache,
    get_plural_category,
)
from tests.factories.i18n import make_settings

pytestmark = pytest.mark.unit


class TestPluralCategoryCache:
    """Tests for the bounded plural rule cache."""

    def test_starts_empty(self):
        cache = PluralCategoryCache()
        assert cache.size == 0
        assert cache.get("en") is None

    def test_default_sizes(self):
        assert SERVER_CACHE_SIZE == 50
        assert CLIENT_CACHE_SIZE == 10
        assert PluralCategoryCache().max_size == 50

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            PluralCategoryCache(max_size=0)

    def test_set_and_get(self):
        cache = PluralCategoryCache()
        rule = object()
        cache.set("en", rule)
        assert cache.get("en") is rule
        assert len(cache) == 1
        assert "en" in cache

    def test_clear(self):
        cache = PluralCategoryCache()
        cache.set("en", object())
        cache.set("ja", object())
        cache.clear()
        assert cache.size == 0

    def test_evicts_least_recently_used(self):
        cache = PluralCategoryCache(max_size=2)
        cache.set("en", object())
        cache.set("zh", object())
        cache.set("ja", object())

        assert cache.get("en") is None
        assert cache.get("zh") is not None
        assert cache.get("ja") is not None
        assert cache.size == 2

    def test_get_promotes_entry(self):
        cache = PluralCategoryCache(max_size=2)
        cache.set("en", object())
        cache.set("zh", object())
        cache.get("en")
        cache.set("ja", object())

        assert cache.get("en") is not None
        assert cache.get("zh") is None
        assert cache.get("ja") is not None

    def test_updating_existing_key_never_evicts(self):
        cache = PluralCategoryCache(max_size=2)
        cache.set("en", object())
        cache.set("zh", object())
        replacement = object()
        cache.set("en", replacement)

        assert cache.size == 2
        assert cache.get("en") is replacement
        assert cache.get("zh") is not None

    def test_get_stats(self):
        cache = PluralCategoryCache(max_size=3)
        cache.set("en", object())
        stats = cache.get_stats()
        assert stats == {"size": 1, "max_size": 3, "locales": ["en"]}


class TestCreatePluralCache:
    """Tests for create_plural_cache()."""

    def test_server_capacity_from_settings(self):
        cache = create_plural_cache(settings=make_settings())
        assert cache.max_size == 50

    def test_client_capacity_from_settings(self):
        cache = create_plural_cache(client=True, settings=make_settings())
        assert cache.max_size == 10


class TestGetPluralCategory:
    """Tests for get_plural_category()."""

    def test_english(self):
        assert get_plural_category(1, "en") == "one"
        assert get_plural_category(0, "en") == "other"
        assert get_plural_category(2, "en") == "other"
        assert get_plural_category(10, "en") == "other"

    def test_english_fractions_are_other(self):
        assert get_plural_category(1.5, "en") == "other"
        assert get_plural_category(Decimal("0.5"), "en") == "other"

    def test_japanese_has_no_singular(self):
        assert get_plural_category(1, "ja") == "other"
        assert get_plural_category(5, "ja") == "other"

    @pytest.mark.parametrize(
        "value,category",
        [(1, "one"), (3, "few"), (5, "many"), (11, "many"), (21, "one"), (22, "few")],
    )
    def test_russian(self, value, category):
        assert get_plural_category(value, "ru") == category

    def test_arabic_zero_and_two(self):
        assert get_plural_category(0, "ar") == "zero"
        assert get_plural_category(2, "ar") == "two"

    def test_region_subtag(self):
        assert get_plural_category(1, "en-GB") == "one"

    @pytest.mark.parametrize("locale", ["xx", "not-a-locale"])
    def test_unknown_locale_falls_back_to_english(self, locale):
        assert get_plural_category(1, locale) == "one"
        assert get_plural_category(2, locale) == "other"

    def test_populates_cache(self):
        cache = PluralCategoryCache()
        get_plural_category(1, "en", cache)
        assert cache.size == 1
        assert cache.get("en") is not None

    def test_reuses_cached_rule(self):
        cache = PluralCategoryCache()
        get_plural_category(1, "en", cache)
        get_plural_category(2, "en", cache)
        assert cache.size == 1

    def test_uses_cached_rule_without_rebuilding(self):
        cache = PluralCategoryCache()
        cache.set("en", lambda value: "few")
        assert get_plural_category(1, "en", cache) == "few"

    def test_unknown_locale_cached_under_requested_code(self):
        cache = PluralCategoryCache()
        get_plural_category(1, "xx", cache)
        assert "xx" in cache
