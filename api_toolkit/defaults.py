"""
Default configuration for the django-api-toolkit library.

Every setting the library consumes lives here. Projects override any part of
it through the ``API_TOOLKIT`` Django setting; nested dictionaries are merged
section by section so a project only has to declare the keys it changes.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"
LIBRARY_NAME = "django-api-toolkit"


# --------------------------------------------------------------------------- #
# Library-wide defaults (grouped by feature area)
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    "cache": {
        # Namespace for every metadata cache key.
        "prefix": "api-toolkit",
        # Django cache alias backing the metadata cache. ``None`` keeps the
        # entries in process memory for the lifetime of the worker.
        "alias": None,
        "timeout": None,
    },
    "parser": {
        "defaults": {
            "limit": 50,
        },
        "enable_eager_loading": True,
    },
    "criteria": {
        # Raise InvalidFilterException instead of dropping unknown columns,
        # relations and sort directions.
        "strict": False,
        "max_eager_load_depth": 4,
    },
    "repositories": {
        # Either a bare column (``password``) or a table qualified column
        # (``auth_user.password``).
        "searchable_exclusions": ["password"],
    },
    "resources": {
        # "app_label.ModelName" -> "dotted.path.to.Resource"
        "resource_map": {},
        "fixed_fields": ["id", "_type"],
    },
    "exceptions": {
        "report_to_sentry": False,
    },
}


ENVIRONMENT_DEFAULTS: dict[str, dict[str, Any]] = {
    "development": {},
    "testing": {
        "cache": {"alias": None},
    },
    "production": {},
}


# --------------------------------------------------------------------------- #
# Helper functions
# --------------------------------------------------------------------------- #
def get_environment_defaults(environment: str) -> dict[str, Any]:
    """Return environment-specific overrides."""
    return ENVIRONMENT_DEFAULTS.get(environment, {}).copy()


def merge_settings(*settings_dicts: dict[str, Any]) -> dict[str, Any]:
    """
    Merge multiple settings dictionaries with deep merging for nested dicts.
    Later dictionaries override earlier ones.
    """
    result: dict[str, Any] = {}
    for settings_dict in settings_dicts:
        for key, value in (settings_dict or {}).items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = merge_settings(result[key], value)
            else:
                result[key] = value
    return result
