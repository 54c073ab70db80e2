from unittest.mock import Mock

import pytest
from django.test import SimpleTestCase, override_settings

from api_toolkit.core.cache import (
    CacheKeys,
    DjangoCacheStore,
    LocalMemoryStore,
    MetadataCache,
    get_metadata_cache,
    reset_metadata_cache,
)

pytestmark = pytest.mark.unit


def test_resolve_key_with_prefix():
    key = CacheKeys.MODEL_EAGER_LOADS.resolve_key("test_app.Post", "abc", prefix="api")
    assert key == "api.model-eager-loads:test_app.Post:abc"


def test_resolve_key_uses_default_prefix():
    key = CacheKeys.MODEL_RESOURCES.resolve_key("test_app.Post")
    assert key == "api-toolkit.model-resources:test_app.Post"


@override_settings(API_TOOLKIT={"cache": {"prefix": "custom"}})
def test_resolve_key_uses_configured_prefix():
    key = CacheKeys.MODEL_RESOURCES.resolve_key("test_app.Post")
    assert key == "custom.model-resources:test_app.Post"


def test_remember_computes_once():
    cache = MetadataCache()
    compute = Mock(return_value=["a"])

    assert cache.remember("k", compute) == ["a"]
    assert cache.remember("k", compute) == ["a"]
    compute.assert_called_once()


@pytest.mark.parametrize("value", [None, False, 0, []])
def test_remember_caches_negative_results(value):
    cache = MetadataCache()
    compute = Mock(return_value=value)

    cache.remember("k", compute)
    cache.remember("k", compute)

    compute.assert_called_once()
    assert cache.has("k")


def test_invalidate_forces_recompute():
    cache = MetadataCache()
    compute = Mock(side_effect=[1, 2])

    assert cache.remember("k", compute) == 1
    cache.invalidate("k")
    assert cache.remember("k", compute) == 2


def test_flush_clears_every_entry():
    store = LocalMemoryStore()
    cache = MetadataCache(store=store)
    cache.remember("a", lambda: 1)
    cache.remember("b", lambda: 2)

    cache.flush()

    assert len(store) == 0
    assert cache.get("a", "missing") == "missing"


class DjangoCacheStoreTests(SimpleTestCase):
    def setUp(self):
        self.store = DjangoCacheStore("default")
        self.store.clear()

    def test_round_trip_and_none_values(self):
        cache = MetadataCache(store=self.store, prefix="t")
        compute = Mock(return_value=None)

        self.assertIsNone(cache.remember("k", compute))
        self.assertIsNone(cache.remember("k", compute))
        compute.assert_called_once()

    def test_clear_hides_previous_entries(self):
        self.store.set("k", "v")
        self.assertEqual(self.store.get("k"), "v")

        self.store.clear()

        self.assertIsNone(self.store.get("k"))


class SharedCacheTests(SimpleTestCase):
    def tearDown(self):
        reset_metadata_cache()

    def test_shared_instance_is_reused(self):
        reset_metadata_cache()
        self.assertIs(get_metadata_cache(), get_metadata_cache())

    def test_reset_builds_new_instance(self):
        first = get_metadata_cache()
        reset_metadata_cache()
        self.assertIsNot(first, get_metadata_cache())

    @override_settings(API_TOOLKIT={"cache": {"alias": "default", "prefix": "custom"}})
    def test_alias_selects_django_cache_store(self):
        cache = get_metadata_cache()
        self.assertIsInstance(cache.store, DjangoCacheStore)
        self.assertEqual(cache.prefix, "custom")
