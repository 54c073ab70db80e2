"""
Typed expression tree for filter expressions.

The decoded ``filters`` query parameter is parsed once into a list of nodes.
At every mapping level each key is classified, in priority order, as:

1. a comparison operator (``Condition``),
2. a relation existence operator (``HasCheck``),
3. a logical operator (``LogicalGroup``),
4. a relation on the model in scope, when its value is a mapping or list
   (``RelationScope``, parsed against the related model),
5. anything else: a field name carried forward to the nested value
   (``FieldScope``).

A scalar reached with a field name in scope becomes an ``ImplicitEquality``.
Parsing never touches the queryset; the compiler applies the tree.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Type, Union

from django.db import models

from .operators import (
    COMPARISON,
    LOGICAL,
    RELATION,
    ComparisonOperator,
    LogicalOperator,
    OperatorTable,
    RelationOperator,
)
from .relations import RelationInfo, RelationResolver

SCALAR_TYPES = (str, int, float, bool)


@dataclass
class ImplicitEquality:
    field: str
    value: Any


@dataclass
class Condition:
    field: Optional[str]
    operator: ComparisonOperator
    value: Any


@dataclass
class HasTarget:
    name: str
    relation: Optional[RelationInfo]
    filters: list["Node"] = field(default_factory=list)


@dataclass
class HasCheck:
    operator: RelationOperator
    targets: list[HasTarget]


@dataclass
class LogicalGroup:
    operator: LogicalOperator
    children: list["Node"]


@dataclass
class RelationScope:
    relation: RelationInfo
    children: list["Node"]


@dataclass
class FieldScope:
    field: str
    children: list["Node"]


Node = Union[ImplicitEquality, Condition, HasCheck, LogicalGroup, RelationScope, FieldScope]


def is_empty(expression: Any) -> bool:
    """Empty values never produce constraints; ``0`` and ``False`` are values."""
    if expression is None:
        return True
    if isinstance(expression, (str, dict, list, tuple)) and len(expression) == 0:
        return True
    return False


class ExpressionParser:
    """Classifies a raw filter expression into a typed node list."""

    def __init__(self, operators: OperatorTable, relations: RelationResolver):
        self.operators = operators
        self.relations = relations

    def parse(
        self, model: Type[models.Model], expression: Any, field_name: Optional[str] = None
    ) -> list[Node]:
        if is_empty(expression):
            return []

        if isinstance(expression, SCALAR_TYPES):
            if field_name:
                return [ImplicitEquality(field_name, expression)]
            return []

        if isinstance(expression, (list, tuple)):
            nodes: list[Node] = []
            for item in expression:
                nodes.extend(self.parse(model, item, field_name))
            return nodes

        if not isinstance(expression, dict):
            return []

        nodes = []
        for key, value in expression.items():
            nodes.extend(self._parse_entry(model, key, value, field_name))
        return nodes

    def _parse_entry(
        self, model: Type[models.Model], key: Any, value: Any, field_name: Optional[str]
    ) -> list[Node]:
        category = self.operators.classify(key)

        if category == COMPARISON:
            return [Condition(field_name, self.operators.comparison(key), value)]

        if category == RELATION:
            return [HasCheck(self.operators.relation(key), self._parse_has_targets(model, value))]

        if category == LOGICAL:
            return [LogicalGroup(self.operators.logical(key), self.parse(model, value))]

        key = str(key)
        if isinstance(value, (dict, list, tuple)) and self.relations.is_relation(model, key):
            relation = self.relations.get_relation(model, key)
            related_model = self.relations.get_related_model(model, key)
            if relation is not None and related_model is not None:
                return [RelationScope(relation, self.parse(related_model, value))]

        return [FieldScope(key, self.parse(model, value, key))]

    def _parse_has_targets(self, model: Type[models.Model], value: Any) -> list[HasTarget]:
        if isinstance(value, str):
            entries = [(value, None)]
        elif isinstance(value, dict):
            entries = list(value.items())
        elif isinstance(value, (list, tuple)):
            entries = [(item, None) for item in value if isinstance(item, str)]
        else:
            entries = []

        targets: list[HasTarget] = []
        for name, filters in entries:
            name = str(name)
            relation = None
            if self.relations.is_relation(model, name):
                relation = self.relations.get_relation(model, name)
            nested: list[Node] = []
            if relation is not None and relation.related_model is not None:
                nested = self.parse(relation.related_model, filters)
            targets.append(HasTarget(name, relation, nested))
        return targets
