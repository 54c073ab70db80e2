"""
Declarative API resources.

A resource names the fields a model exposes and the subset serialized when the
client does not ask for specific fields::

    class PostResource(ApiResource):
        resource_type = "posts"
        model = Post
        fields = ["title", "body", "author", "comments"]
        default_fields = ["title", "author"]

Resources are found for a model through the registry (``register_resource``)
or the ``API_TOOLKIT["resources"]["resource_map"]`` setting, which maps
``"app_label.ModelName"`` to a dotted import path.
"""

import logging
from typing import Any, Optional, Type

from django.core.exceptions import ImproperlyConfigured
from django.db import models
from django.utils.module_loading import import_string

from .core.settings import ApiToolkitSettings

logger = logging.getLogger(__name__)

_registry: dict[Type[models.Model], Type["ApiResource"]] = {}


class ApiResource:
    """Base class for resource declarations."""

    resource_type: Optional[str] = None
    model: Optional[Type[models.Model]] = None
    fields: list[str] = []
    default_fields: list[str] = []

    @classmethod
    def get_resource_type(cls) -> str:
        if cls.resource_type:
            return cls.resource_type
        if cls.model is not None:
            return cls.model._meta.model_name
        return cls.__name__.lower()

    @classmethod
    def get_all_fields(cls) -> list[str]:
        return list(cls.fields)

    @classmethod
    def get_default_fields(cls) -> list[str]:
        return list(cls.default_fields or cls.fields)

    @classmethod
    def resolve_fields(cls, api_query=None, root: bool = False) -> list[str]:
        """
        Fields to serialize for this resource.

        Requested fields for the resource type win over the root ``fields``
        parameter, which only applies to the root resource. Unknown names are
        dropped; without a usable request the default fields are returned.
        """
        requested: list[str] = []
        if api_query is not None:
            requested = api_query.get_fields(cls.get_resource_type())
            if not requested and root:
                requested = api_query.get_fields()

        known = set(cls.get_all_fields())
        requested = [name for name in requested if name in known]
        return requested or cls.get_default_fields()

    @classmethod
    def serialize(
        cls,
        instance: models.Model,
        api_query=None,
        root: bool = True,
        depth: int = 1,
        settings: Optional[ApiToolkitSettings] = None,
    ) -> dict[str, Any]:
        settings = settings or ApiToolkitSettings.load()
        data: dict[str, Any] = {}
        for name in settings.fixed_fields:
            if name == "id":
                data["id"] = instance.pk
            elif name == "_type":
                data["_type"] = cls.get_resource_type()

        for name in cls.resolve_fields(api_query, root=root):
            if name in data:
                continue
            data[name] = cls._serialize_value(
                getattr(instance, name, None), api_query, depth, settings
            )
        return data

    @classmethod
    def _serialize_value(cls, value, api_query, depth: int, settings: ApiToolkitSettings):
        if isinstance(value, models.Manager):
            return [
                cls._serialize_related(item, api_query, depth, settings)
                for item in value.all()
            ]
        if isinstance(value, models.Model):
            return cls._serialize_related(value, api_query, depth, settings)
        return value

    @classmethod
    def _serialize_related(
        cls, instance: models.Model, api_query, depth: int, settings: ApiToolkitSettings
    ):
        resource = get_resource_for_model(type(instance))
        if resource is None or depth >= settings.max_eager_load_depth:
            return instance.pk
        return resource.serialize(
            instance, api_query, root=False, depth=depth + 1, settings=settings
        )


def register_resource(resource: Type[ApiResource]) -> Type[ApiResource]:
    """Register ``resource`` for its model. Usable as a class decorator."""
    if resource.model is None:
        raise ImproperlyConfigured(f"{resource.__name__} does not declare a model")
    _registry[resource.model] = resource
    return resource


def unregister_resource(resource: Type[ApiResource]) -> None:
    if resource.model is not None and _registry.get(resource.model) is resource:
        del _registry[resource.model]


def get_resource_for_model(model) -> Optional[Type[ApiResource]]:
    """Resource class for ``model`` from the registry or the resource map."""
    if not isinstance(model, type):
        model = type(model)
    resource = _registry.get(model)
    if resource is not None:
        return resource

    path = ApiToolkitSettings.load().resource_map.get(model._meta.label)
    if not path:
        return None
    try:
        return import_string(path)
    except ImportError as e:
        logger.warning(f"Could not import resource '{path}' for {model._meta.label}: {e}")
        return None


def get_resource_for_type(resource_type: str) -> Optional[Type[ApiResource]]:
    """Resource class whose type is ``resource_type``, or ``None``."""
    for resource in _registry.values():
        if resource.get_resource_type() == resource_type:
            return resource

    for label, path in ApiToolkitSettings.load().resource_map.items():
        try:
            resource = import_string(path)
        except ImportError as e:
            logger.warning(f"Could not import resource '{path}' for {label}: {e}")
            continue
        if resource.get_resource_type() == resource_type:
            return resource
    return None
