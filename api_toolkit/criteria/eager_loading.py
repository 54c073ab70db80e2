"""
Eager-load planning from resource field lists.

The planner walks the fields that will be serialized for a model, keeps the
ones that are relations and recurses into the resource mapped to each related
model, producing a nested structure::

    {"author": {"organization": {}}, "tags": {}}

An empty mapping marks a leaf relation. The structure is cached per model and
field set, then materialized into ``prefetch_related`` lookups where nested
levels become ``Prefetch`` objects carrying their own ``prefetch_related``.
"""

import hashlib
import json
import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Type, Union

from django.db import models
from django.db.models import Prefetch

from ..core.cache import CacheKeys, MetadataCache, get_metadata_cache
from ..query.parser import ApiQuery
from .relations import RelationResolver, model_label

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 4

EagerLoadStructure = dict[str, dict]


def fields_digest(
    fields: Iterable[str],
    requested: Optional[Mapping[str, list]] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """Stable digest of a field list, the per-type requested fields and the depth bound."""
    payload = {
        "fields": sorted(set(fields)),
        "requested": {key: list(value) for key, value in sorted((requested or {}).items())},
        "max_depth": max_depth,
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.md5(encoded.encode("utf-8"), usedforsecurity=False).hexdigest()


def relation_names(lookups: Iterable[Union[str, Prefetch]]) -> list[str]:
    """Top-level relation names of materialized lookups."""
    return [
        lookup.prefetch_to if isinstance(lookup, Prefetch) else lookup
        for lookup in lookups
    ]


class EagerLoadPlanner:
    """
    Plans ``prefetch_related`` lookups for the fields of a serialized model.

    Nested field lists are resolved the way ``ApiResource.resolve_fields``
    resolves them for serialization, so every relation the serializer renders
    is planned and nothing else is.

    Args:
        cache: Metadata cache holding planned structures
        relations: Relation resolver for the models walked
        resource_resolver: Callable returning the resource class for a model
        requested_fields: Fields requested per resource type
        max_depth: Relation depth after which relations are loaded as leaves
        type_resolver: Callable returning the resource class for a resource type
    """

    def __init__(
        self,
        cache: Optional[MetadataCache] = None,
        relations: Optional[RelationResolver] = None,
        resource_resolver: Optional[Callable[[Type[models.Model]], Any]] = None,
        requested_fields: Optional[Mapping[str, list]] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        type_resolver: Optional[Callable[[str], Any]] = None,
    ):
        self.cache = cache if cache is not None else get_metadata_cache()
        self.relations = relations or RelationResolver()
        self.resource_resolver = resource_resolver or self._resolve_resource
        self.type_resolver = type_resolver or _resource_for_type
        self.api_query = ApiQuery(resource_fields=dict(requested_fields or {}))
        self.requested_fields = self.api_query.resource_fields
        self.max_depth = max_depth

    def plan(self, model: Type[models.Model], fields: Iterable[str]) -> EagerLoadStructure:
        names = dict.fromkeys(field for field in fields if isinstance(field, str))
        relations = [name for name in names if self.relations.is_relation(model, name)]
        key = self.cache.key(
            CacheKeys.MODEL_EAGER_LOADS,
            model_label(model),
            fields_digest(relations, self.effective_requests(), self.max_depth),
        )
        return self.cache.remember(key, lambda: self._build(model, relations, 1, frozenset()))

    def materialize(
        self, structure: Mapping[str, dict], model: Type[models.Model]
    ) -> list[Union[str, Prefetch]]:
        lookups: list[Union[str, Prefetch]] = []
        for name, nested in structure.items():
            if not nested:
                lookups.append(name)
                continue
            related_model = self.relations.get_related_model(model, name)
            if related_model is None:
                lookups.append(name)
                continue
            queryset = related_model._default_manager.prefetch_related(
                *self.materialize(nested, related_model)
            )
            lookups.append(Prefetch(name, queryset=queryset))
        return lookups

    def fields_for_model(self, model: Optional[Type[models.Model]]) -> list[str]:
        """Fields the model's resource serializes below the root."""
        if model is None:
            return []
        resource = self.resource_resolver(model)
        if resource is None:
            return []
        return list(resource.resolve_fields(self.api_query))

    def effective_requests(self) -> dict[str, list[str]]:
        """
        Relation names requested per resource type, after dropping unknown
        types and fields.

        A type whose requested fields are all unknown falls back to its
        defaults and is left out, matching ``ApiResource.resolve_fields``.
        """
        effective: dict[str, list[str]] = {}
        for resource_type, requested in self.requested_fields.items():
            resource = self.type_resolver(resource_type)
            if resource is None or resource.model is None:
                continue
            known = set(resource.get_all_fields())
            requested = [name for name in requested if name in known]
            if not requested:
                continue
            effective[resource_type] = sorted(
                {name for name in requested if self.relations.is_relation(resource.model, name)}
            )
        return effective

    def _build(
        self,
        model: Type[models.Model],
        fields: list[str],
        depth: int,
        visited: frozenset,
    ) -> EagerLoadStructure:
        structure: EagerLoadStructure = {}
        for name in fields:
            if name in structure or not self.relations.is_relation(model, name):
                continue

            if self.relations.is_polymorphic(model, name) or depth >= self.max_depth:
                structure[name] = {}
                continue

            if (model, name) in visited:
                logger.debug(f"Eager load cycle at {model.__name__}.{name}; loading as leaf")
                structure[name] = {}
                continue

            related_model = self.relations.get_related_model(model, name)
            nested_fields = self.fields_for_model(related_model)
            if not nested_fields:
                structure[name] = {}
                continue

            structure[name] = self._build(
                related_model, nested_fields, depth + 1, visited | {(model, name)}
            )
        return structure

    def _resolve_resource(self, model: Type[models.Model]):
        from ..resources import get_resource_for_model

        key = self.cache.key(CacheKeys.MODEL_RESOURCES, model_label(model))
        return self.cache.remember(key, lambda: get_resource_for_model(model))


def _resource_for_type(resource_type: str):
    from ..resources import get_resource_for_type

    return get_resource_for_type(resource_type)
