"""
Criteria facade applied once per query build.
"""

import logging
from typing import Optional, Union

from django.db import models

from ..core.cache import MetadataCache, get_metadata_cache
from ..core.settings import ApiToolkitSettings
from .columns import SearchableColumns
from .compiler import FilterCompiler
from .eager_loading import EagerLoadPlanner
from .operators import OperatorTable, default_operators
from .ordering import apply_limit, apply_order
from .relations import RelationResolver

logger = logging.getLogger(__name__)


class ApiCriteria:
    """
    Applies the parsed query parameters of a request to a queryset.

    Filters are applied first, then eager loading, then order and finally the
    limit.

    Args:
        api_query: Parsed query parameters; ``None`` applies nothing but the
            default eager loading
        cache: Metadata cache; defaults to the shared instance
        operators: Operator table; defaults to the built-in table
        settings: Settings view; defaults to ``ApiToolkitSettings.load()``
    """

    def __init__(
        self,
        api_query=None,
        *,
        cache: Optional[MetadataCache] = None,
        operators: Optional[OperatorTable] = None,
        settings: Optional[ApiToolkitSettings] = None,
    ):
        self.api_query = api_query
        self.settings = settings or ApiToolkitSettings.load()
        self.cache = cache if cache is not None else get_metadata_cache()
        self.operators = operators or default_operators
        self.relations = RelationResolver()
        self.columns = SearchableColumns(self.settings.searchable_exclusions)
        self.compiler = FilterCompiler(
            operators=self.operators,
            relations=self.relations,
            columns=self.columns,
            strict=self.settings.strict,
        )
        self.planner = EagerLoadPlanner(
            cache=self.cache,
            relations=self.relations,
            requested_fields=api_query.resource_fields if api_query is not None else None,
            max_depth=self.settings.max_eager_load_depth,
        )

    def apply(
        self,
        model_or_queryset: Union[type, models.QuerySet],
        *,
        with_limit: bool = True,
    ) -> models.QuerySet:
        queryset = self._get_queryset(model_or_queryset)
        queryset = self.apply_filters(queryset)
        queryset = self.apply_eager_loading(queryset)
        queryset = self.apply_order(queryset)
        if with_limit:
            queryset = self.apply_limit(queryset)
        return queryset

    def apply_filters(self, queryset: models.QuerySet) -> models.QuerySet:
        filters = self.api_query.filters if self.api_query is not None else None
        return self.compiler.compile(queryset, filters)

    def apply_eager_loading(self, queryset: models.QuerySet) -> models.QuerySet:
        if not self.settings.enable_eager_loading:
            return queryset
        fields = self.get_root_fields(queryset.model)
        if not fields:
            return queryset
        structure = self.planner.plan(queryset.model, fields)
        lookups = self.planner.materialize(structure, queryset.model)
        if not lookups:
            return queryset
        logger.debug(f"Eager loading {structure} for {queryset.model.__name__}")
        return queryset.prefetch_related(*lookups)

    def apply_order(self, queryset: models.QuerySet) -> models.QuerySet:
        order = self.api_query.order if self.api_query is not None else None
        return apply_order(queryset, order, self.columns, self.settings.strict)

    def apply_limit(self, queryset: models.QuerySet) -> models.QuerySet:
        limit = self.api_query.limit if self.api_query is not None else None
        return apply_limit(queryset, limit)

    def get_root_fields(self, model) -> list[str]:
        """Fields serialized for the root model: its resource's, else the raw request."""
        resource = self.planner.resource_resolver(model)
        if resource is not None:
            return resource.resolve_fields(self.api_query, root=True)
        if self.api_query is not None:
            return self.api_query.get_fields()
        return []

    @staticmethod
    def _get_queryset(model_or_queryset) -> models.QuerySet:
        if isinstance(model_or_queryset, models.QuerySet):
            return model_or_queryset
        if isinstance(model_or_queryset, models.Manager):
            return model_or_queryset.all()
        return model_or_queryset._default_manager.all()
