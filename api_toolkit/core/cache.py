"""
Metadata cache for schema facts derived from models and resources.

Model to resource lookups and eager load structures are expensive to derive
and only change when model classes or resource declarations change. They are memoized here for the lifetime of the process (or of the
configured Django cache entry) until ``invalidate`` or ``flush`` is called.

Two stores are available:

- ``LocalMemoryStore``: a plain in-process dictionary (default).
- ``DjangoCacheStore``: any configured Django cache alias. Entries are
  namespaced with a version number so ``flush`` works on every backend.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from django.core.cache import caches

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class CacheKeys(str, Enum):
    """Key templates used by the metadata cache."""

    MODEL_RESOURCES = "model-resources:%s"
    MODEL_EAGER_LOADS = "model-eager-loads:%s:%s"

    def resolve_key(self, *replacements: str, prefix: Optional[str] = None) -> str:
        """
        Resolve the key with the configured prefix and its placeholders.

        Examples:
            >>> CacheKeys.MODEL_RESOURCES.resolve_key("blog.Post", prefix="api")
            'api.model-resources:blog.Post'
        """
        if prefix is None:
            from .settings import get_setting

            prefix = get_setting("cache.prefix", "api-toolkit")
        key = f"{prefix}.{self.value}"
        if replacements:
            key = key % tuple(str(r) for r in replacements)
        return key


class LocalMemoryStore:
    """In-process key-value store."""

    def __init__(self):
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class DjangoCacheStore:
    """Key-value store backed by a Django cache alias."""

    VERSION_KEY = "api-toolkit.metadata-version"

    def __init__(self, alias: str = "default", timeout: Optional[int] = None):
        self.alias = alias
        self.timeout = timeout

    @property
    def backend(self):
        return caches[self.alias]

    def _version(self) -> int:
        version = self.backend.get(self.VERSION_KEY)
        if version is None:
            version = 1
            self.backend.set(self.VERSION_KEY, version, None)
        return int(version)

    def _key(self, key: str) -> str:
        return f"{key}:v{self._version()}"

    def get(self, key: str, default: Any = None) -> Any:
        return self.backend.get(self._key(key), default)

    def set(self, key: str, value: Any) -> None:
        self.backend.set(self._key(key), value, self.timeout)

    def delete(self, key: str) -> None:
        self.backend.delete(self._key(key))

    def clear(self) -> None:
        """Bump the namespace version so previous entries are never read again."""
        self.backend.set(self.VERSION_KEY, self._version() + 1, None)


class MetadataCache:
    """Memoizes schema metadata in an injectable store."""

    def __init__(self, store=None, prefix: Optional[str] = None):
        self.store = store if store is not None else LocalMemoryStore()
        self.prefix = prefix

    def key(self, template: CacheKeys, *replacements: str) -> str:
        return template.resolve_key(*replacements, prefix=self.prefix)

    def remember(self, key: str, compute: Callable[[], T]) -> T:
        """
        Return the cached value for ``key``, computing and storing it on a miss.

        ``None`` and ``False`` results are stored like any other value.
        """
        value = self.store.get(key, _MISSING)
        if value is not _MISSING:
            return value
        value = compute()
        self.store.set(key, value)
        return value

    def get(self, key: str, default: Any = None) -> Any:
        value = self.store.get(key, _MISSING)
        return default if value is _MISSING else value

    def has(self, key: str) -> bool:
        return self.store.get(key, _MISSING) is not _MISSING

    def invalidate(self, key: str) -> None:
        self.store.delete(key)

    def flush(self) -> None:
        self.store.clear()
        logger.debug("Metadata cache flushed")


_metadata_cache: Optional[MetadataCache] = None
_metadata_cache_lock = threading.Lock()


def build_metadata_cache() -> MetadataCache:
    """Build a metadata cache from the ``API_TOOLKIT["cache"]`` settings."""
    from .settings import ApiToolkitSettings

    config = ApiToolkitSettings.load()
    if config.cache_alias:
        store = DjangoCacheStore(config.cache_alias, config.cache_timeout)
    else:
        store = LocalMemoryStore()
    return MetadataCache(store=store, prefix=config.cache_prefix)


def get_metadata_cache() -> MetadataCache:
    """Get the process-wide metadata cache."""
    global _metadata_cache
    if _metadata_cache is None:
        with _metadata_cache_lock:
            if _metadata_cache is None:
                _metadata_cache = build_metadata_cache()
    return _metadata_cache


def reset_metadata_cache() -> None:
    """Discard the process-wide metadata cache so the next lookup rebuilds it."""
    global _metadata_cache
    with _metadata_cache_lock:
        if _metadata_cache is not None:
            _metadata_cache.flush()
        _metadata_cache = None
