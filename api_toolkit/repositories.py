"""
Repositories building querysets with the request criteria applied.

    class PostRepository(ApiRepository):
        model = Post

    posts = PostRepository().with_api_criteria(request.api_query).paginate()
"""

import logging
from typing import Any, Callable, Iterable, Optional

from django.core.paginator import Page, Paginator
from django.db import models

from .core.exceptions import NotFoundException
from .core.settings import ApiToolkitSettings
from .criteria import ApiCriteria

logger = logging.getLogger(__name__)


class ApiRepository:
    """Base repository for one model."""

    model: Optional[type] = None
    criteria_class = ApiCriteria

    def __init__(self, api_query=None):
        if self.model is None:
            raise TypeError(f"{type(self).__name__} must declare a model")
        self.api_query = api_query
        self._use_criteria = api_query is not None
        self._scopes: list[Callable[[models.QuerySet], models.QuerySet]] = []

    def query(self) -> models.QuerySet:
        """Base queryset before scopes and criteria."""
        return self.model._default_manager.all()

    def with_api_criteria(self, api_query=None) -> "ApiRepository":
        if api_query is not None:
            self.api_query = api_query
        self._use_criteria = True
        return self

    def add_scope(self, scope: Callable[[models.QuerySet], models.QuerySet]) -> "ApiRepository":
        self._scopes.append(scope)
        return self

    def scope_by_id(self, pk: Any, column: str = "pk") -> "ApiRepository":
        return self.add_scope(lambda queryset: queryset.filter(**{column: pk}))

    def scope_by_ids(self, pks: Iterable[Any], column: str = "pk") -> "ApiRepository":
        pks = list(pks)
        return self.add_scope(lambda queryset: queryset.filter(**{f"{column}__in": pks}))

    def build(self, with_limit: bool = True) -> models.QuerySet:
        queryset = self.query()
        for scope in self._scopes:
            queryset = scope(queryset)
        if self._use_criteria:
            criteria = self.criteria_class(self.api_query)
            queryset = criteria.apply(queryset, with_limit=with_limit)
        return queryset

    def all(self) -> list:
        return list(self.build())

    def first(self) -> Optional[models.Model]:
        return self.build(with_limit=False).first()

    def find(self, pk: Any) -> models.Model:
        instance = self.scope_by_id(pk).first()
        if instance is None:
            raise NotFoundException(f"No {self.model._meta.verbose_name} matches id '{pk}'.")
        return instance

    def paginate(self) -> Page:
        """Page of results sized by the query limit; the limit is not sliced."""
        queryset = self.build(with_limit=False)
        if not queryset.ordered:
            queryset = queryset.order_by("pk")
        per_page = (
            self.api_query.limit
            if self.api_query is not None
            else ApiToolkitSettings.load().default_limit
        )
        page = self.api_query.page if self.api_query is not None else 1
        logger.debug(f"Paginating {self.model.__name__}: page {page}, {per_page} per page")
        return Paginator(queryset, per_page).get_page(page)
