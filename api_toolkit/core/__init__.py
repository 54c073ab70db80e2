"""
Core building blocks: settings, exceptions and the metadata cache.
"""

from .cache import (
    CacheKeys,
    DjangoCacheStore,
    LocalMemoryStore,
    MetadataCache,
    get_metadata_cache,
    reset_metadata_cache,
)
from .exceptions import (
    ApiException,
    BadRequestException,
    ErrorCode,
    InvalidFilterException,
    InvalidInputException,
    NotFoundException,
    UnhandledException,
)
from .settings import ApiToolkitSettings, get_setting

__all__ = [
    "ApiException",
    "ApiToolkitSettings",
    "BadRequestException",
    "CacheKeys",
    "DjangoCacheStore",
    "ErrorCode",
    "InvalidFilterException",
    "InvalidInputException",
    "LocalMemoryStore",
    "MetadataCache",
    "NotFoundException",
    "UnhandledException",
    "get_metadata_cache",
    "get_setting",
    "reset_metadata_cache",
]
