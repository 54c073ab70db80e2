"""
Searchable column resolution.

A model's searchable columns are the concrete columns of its table minus the
configured exclusions. Only searchable columns may be filtered or ordered on.
"""

from typing import Iterable, Optional, Type

from django.db import models


def get_column_exclusions(table: str, exclusions: Iterable[str]) -> list[str]:
    """
    Resolve the exclusions that apply to ``table``.

    Entries are either bare column names or ``table.column``; a qualified entry
    for another table never matches a bare column name.
    """
    resolved: list[str] = []
    for exclusion in exclusions:
        if "." in exclusion:
            exclusion_table, column = exclusion.split(".", 1)
            if exclusion_table == table:
                resolved.append(column)
            continue
        resolved.append(exclusion)
    return resolved


class SearchableColumns:
    """Per-instance memo of searchable columns keyed by model class."""

    def __init__(self, exclusions: Optional[Iterable[str]] = None):
        self.exclusions = list(exclusions or [])
        self._columns: dict[Type[models.Model], frozenset] = {}

    def for_model(self, model: Type[models.Model]) -> frozenset:
        columns = self._columns.get(model)
        if columns is None:
            columns = self._resolve(model)
            self._columns[model] = columns
        return columns

    def is_searchable(self, model: Type[models.Model], column) -> bool:
        return isinstance(column, str) and column in self.for_model(model)

    def _resolve(self, model: Type[models.Model]) -> frozenset:
        excluded = set(get_column_exclusions(model._meta.db_table, self.exclusions))
        return frozenset(
            field.attname
            for field in model._meta.concrete_fields
            if field.attname not in excluded and field.column not in excluded
        )
