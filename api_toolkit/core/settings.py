"""
Settings loading for the API toolkit.

Settings are resolved from the library defaults, then environment defaults,
then the ``API_TOOLKIT`` Django setting, later sources taking precedence.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from django.conf import settings as django_settings

from ..defaults import LIBRARY_DEFAULTS, get_environment_defaults, merge_settings


def _get_project_settings() -> dict[str, Any]:
    """Get the ``API_TOOLKIT`` dictionary declared by the project."""
    value = getattr(django_settings, "API_TOOLKIT", None)
    return value if isinstance(value, dict) else {}


def _get_environment() -> str:
    env = getattr(django_settings, "ENVIRONMENT", None)
    if not env:
        env = "development" if getattr(django_settings, "DEBUG", False) else "production"
    return env


def get_merged_settings() -> dict[str, Any]:
    """Return the fully merged settings dictionary."""
    return merge_settings(
        LIBRARY_DEFAULTS,
        get_environment_defaults(_get_environment()),
        _get_project_settings(),
    )


def get_setting(path: str, default: Any = None) -> Any:
    """
    Get a single setting by dotted path.

    Examples:
        >>> get_setting("parser.defaults.limit")
        50
    """
    current: Any = get_merged_settings()
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


@dataclass
class ApiToolkitSettings:
    """Typed view over the merged ``API_TOOLKIT`` settings."""

    cache_prefix: str = "api-toolkit"
    cache_alias: Optional[str] = None
    cache_timeout: Optional[int] = None
    default_limit: int = 50
    enable_eager_loading: bool = True
    strict: bool = False
    max_eager_load_depth: int = 4
    searchable_exclusions: list[str] = field(default_factory=lambda: ["password"])
    resource_map: dict[str, str] = field(default_factory=dict)
    fixed_fields: list[str] = field(default_factory=lambda: ["id", "_type"])
    report_to_sentry: bool = False

    @classmethod
    def load(cls) -> "ApiToolkitSettings":
        merged = get_merged_settings()
        cache = merged.get("cache", {}) or {}
        parser = merged.get("parser", {}) or {}
        criteria = merged.get("criteria", {}) or {}
        repositories = merged.get("repositories", {}) or {}
        resources = merged.get("resources", {}) or {}
        exceptions = merged.get("exceptions", {}) or {}
        return cls(
            cache_prefix=str(cache.get("prefix") or "api-toolkit"),
            cache_alias=cache.get("alias"),
            cache_timeout=cache.get("timeout"),
            default_limit=int((parser.get("defaults") or {}).get("limit") or 50),
            enable_eager_loading=bool(parser.get("enable_eager_loading", True)),
            strict=bool(criteria.get("strict", False)),
            max_eager_load_depth=int(criteria.get("max_eager_load_depth", 4)),
            searchable_exclusions=list(repositories.get("searchable_exclusions") or []),
            resource_map=dict(resources.get("resource_map") or {}),
            fixed_fields=list(resources.get("fixed_fields") or []),
            report_to_sentry=bool(exceptions.get("report_to_sentry", False)),
        )
