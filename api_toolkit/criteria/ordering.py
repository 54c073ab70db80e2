"""
Order and limit application.
"""

import logging
from typing import Any, Mapping, Optional

from django.db import models

from ..core.exceptions import InvalidFilterException
from .columns import SearchableColumns

logger = logging.getLogger(__name__)

RANDOM_ORDER = "random"
ORDER_DIRECTIONS = ("asc", "desc")


def order_terms(
    model,
    order: Optional[Mapping[str, Any]],
    columns: Optional[SearchableColumns] = None,
    strict: bool = False,
) -> list[str]:
    """
    Translate a ``column -> direction`` mapping into ``order_by`` terms.

    ``random`` yields ``"?"``. Other columns are kept only when searchable and
    ordered ``asc`` or ``desc``.
    """
    columns = columns or SearchableColumns()
    terms: list[str] = []
    for column, direction in (order or {}).items():
        if column == RANDOM_ORDER:
            terms.append("?")
            continue

        normalized = direction.lower() if isinstance(direction, str) else direction
        if not columns.is_searchable(model, column):
            _reject(f"'{column}' is not a sortable column", model, column, strict)
            continue
        if normalized not in ORDER_DIRECTIONS:
            _reject(f"Invalid order direction '{direction}' for '{column}'", model, column, strict)
            continue

        terms.append(f"-{column}" if normalized == "desc" else column)
    return terms


def apply_order(
    queryset: models.QuerySet,
    order: Optional[Mapping[str, Any]],
    columns: Optional[SearchableColumns] = None,
    strict: bool = False,
) -> models.QuerySet:
    """Append the order terms to any explicit ordering already on ``queryset``."""
    terms = order_terms(queryset.model, order, columns, strict)
    if not terms:
        return queryset
    return queryset.order_by(*queryset.query.order_by, *terms)


def apply_limit(queryset: models.QuerySet, limit: Optional[int]) -> models.QuerySet:
    if limit is None:
        return queryset
    return queryset[:limit]


def _reject(message: str, model, column: Any, strict: bool) -> None:
    if strict:
        raise InvalidFilterException(
            message, model_name=model.__name__, field_name=str(column)
        )
    logger.debug(f"Dropping order on {model.__name__}: {message}")
