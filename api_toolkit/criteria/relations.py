"""
Relation registry built from Django model metadata.

Django declares every relation statically on ``Model._meta``, so relation
lookups never have to invoke model code. The registry reads each model's
relations once into a table of ``RelationInfo`` entries keyed by the name used
in filter expressions and field lists (the field name for forward relations,
the accessor name for reverse relations).
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Type

from django.contrib.contenttypes.fields import GenericForeignKey, GenericRelation
from django.db import models
from django.db.models import OuterRef, Q

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationInfo:
    """Static description of one relation on a model."""

    name: str
    model: Type[models.Model]
    related_model: Optional[Type[models.Model]]
    field: Any
    many: bool = False
    reverse: bool = False
    polymorphic: bool = False

    def correlated_queryset(self) -> Optional[models.QuerySet]:
        """
        Build a queryset of related rows correlated with the outer row.

        Used as the body of ``Exists`` subqueries. Returns ``None`` when the
        relation cannot be expressed as a correlated subquery.
        """
        field = self.field
        related = self.related_model
        if self.polymorphic or related is None:
            return None
        manager = related._default_manager

        if isinstance(field, GenericRelation):
            from django.contrib.contenttypes.models import ContentType

            content_type = ContentType.objects.get_for_model(
                self.model, for_concrete_model=field.for_concrete_model
            )
            return manager.filter(
                **{
                    field.object_id_field_name: OuterRef("pk"),
                    field.content_type_field_name: content_type,
                }
            )

        if self.reverse:
            remote_field = field.field
            if remote_field.many_to_many:
                return manager.filter(**{remote_field.name: OuterRef("pk")})
            return manager.filter(
                **{remote_field.attname: OuterRef(remote_field.target_field.attname)}
            )

        if field.many_to_many:
            query_name = field.related_query_name()
            if not query_name or query_name.endswith("+"):
                return None
            return manager.filter(**{query_name: OuterRef("pk")})

        return manager.filter(
            **{field.target_field.attname: OuterRef(field.attname)}
        )

    def not_null_q(self) -> Optional[Q]:
        """Existence check for polymorphic relations, which cannot be joined."""
        if self.polymorphic:
            return Q(**{f"{self.field.fk_field}__isnull": False})
        return None


_relation_tables: dict[Type[models.Model], dict[str, RelationInfo]] = {}


def _build_relation_table(model: Type[models.Model]) -> dict[str, RelationInfo]:
    table: dict[str, RelationInfo] = {}
    for field in model._meta.get_fields(include_hidden=False):
        if not getattr(field, "is_relation", False):
            continue

        if isinstance(field, GenericForeignKey):
            table[field.name] = RelationInfo(
                name=field.name,
                model=model,
                related_model=None,
                field=field,
                polymorphic=True,
            )
            continue

        if field.auto_created and not field.concrete:
            accessor = field.get_accessor_name()
            if not accessor:
                continue
            table[accessor] = RelationInfo(
                name=accessor,
                model=model,
                related_model=field.related_model,
                field=field,
                many=bool(field.one_to_many or field.many_to_many),
                reverse=True,
            )
            continue

        table[field.name] = RelationInfo(
            name=field.name,
            model=model,
            related_model=field.related_model,
            field=field,
            many=bool(field.many_to_many or field.one_to_many),
        )
    logger.debug(f"Relation table for {model._meta.label}: {sorted(table)}")
    return table


def get_relation_table(model: Type[models.Model]) -> dict[str, RelationInfo]:
    """Return the relation table for ``model``, building it on first use."""
    table = _relation_tables.get(model)
    if table is None:
        table = _build_relation_table(model)
        _relation_tables[model] = table
    return table


def clear_relation_tables() -> None:
    _relation_tables.clear()


def model_label(model) -> str:
    """``app_label.ModelName`` for a model class or instance."""
    return model._meta.label


class RelationResolver:
    """
    Answers relation questions about models from their relation tables.

    Lookups are pure reads; nothing is stored per requested name.
    """

    def get_relation(self, model: Type[models.Model], name: Any) -> Optional[RelationInfo]:
        if not isinstance(name, str) or not name:
            return None
        return get_relation_table(model).get(name)

    def is_relation(self, model: Type[models.Model], name: Any) -> bool:
        return self.get_relation(model, name) is not None

    def get_related_model(
        self, model: Type[models.Model], name: Any
    ) -> Optional[Type[models.Model]]:
        relation = self.get_relation(model, name)
        return relation.related_model if relation else None

    def is_polymorphic(self, model: Type[models.Model], name: Any) -> bool:
        relation = self.get_relation(model, name)
        return bool(relation and relation.polymorphic)
