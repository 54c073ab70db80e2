"""
Django app configuration for django-api-toolkit.
"""

import logging

from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed

logger = logging.getLogger(__name__)


def _reset_on_settings_change(sender, setting, **kwargs):
    if setting in ("API_TOOLKIT", "CACHES"):
        from .core.cache import reset_metadata_cache
        from .criteria.relations import clear_relation_tables

        reset_metadata_cache()
        clear_relation_tables()


class ApiToolkitConfig(AppConfig):
    """Validates the ``API_TOOLKIT`` setting and wires cache invalidation."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "api_toolkit"
    verbose_name = "API Toolkit"

    def ready(self):
        self._validate_configuration()
        setting_changed.connect(_reset_on_settings_change, dispatch_uid="api_toolkit_reset")
        logger.debug("API toolkit initialized")

    def _validate_configuration(self):
        from django.core.cache import caches

        from .core.settings import ApiToolkitSettings

        config = ApiToolkitSettings.load()
        if config.cache_alias and config.cache_alias not in caches.settings:
            raise ImproperlyConfigured(
                f"API_TOOLKIT cache alias '{config.cache_alias}' is not a configured cache"
            )
        if config.max_eager_load_depth < 1:
            raise ImproperlyConfigured("API_TOOLKIT max_eager_load_depth must be at least 1")
        if config.default_limit < 1:
            raise ImproperlyConfigured("API_TOOLKIT parser default limit must be at least 1")
