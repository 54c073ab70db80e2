"""
Filter compiler: applies a filter expression to a Django queryset.

The expression is parsed into a typed tree (see ``expressions``) and compiled
into one ``Q`` object. Each node is rendered under the logical context of its
parent (``None``, ``AND`` or ``OR``) and appended to a ``ClauseList`` that
combines clauses with SQL precedence.

Unknown columns, unknown relations and values Django rejects are dropped with
a debug log entry. With strict mode enabled they raise
``InvalidFilterException`` instead.
"""

import json
import logging
from functools import reduce
from operator import or_
from typing import Any, Optional, Type

from django.core.exceptions import FieldError, ValidationError
from django.db import models
from django.db.models import Exists, Q

from ..core.exceptions import InvalidFilterException
from .clauses import ClauseList
from .columns import SearchableColumns
from .expressions import (
    Condition,
    ExpressionParser,
    FieldScope,
    HasCheck,
    HasTarget,
    ImplicitEquality,
    LogicalGroup,
    Node,
    RelationScope,
)
from .operators import AND, OR, ComparisonOperator, OperatorTable, default_operators
from .relations import RelationResolver

logger = logging.getLogger(__name__)

REJECTED_VALUE_ERRORS = (FieldError, ValidationError, TypeError, ValueError)


def clause_connector(context: Optional[str]) -> str:
    """Connector used by a clause added under ``context``."""
    return OR if context == OR else AND


def group_connector(context: Optional[str], connector: str) -> str:
    """
    Connector used by a logical group.

    An ``OR`` group directly under an ``AND`` context is folded into an
    ``AND`` clause so it cannot escape its parent's precedence.
    """
    if context == AND and connector == OR:
        return AND
    return connector


class FilterCompiler:
    """Compiles filter expressions into ``Q`` objects for a model."""

    def __init__(
        self,
        operators: Optional[OperatorTable] = None,
        relations: Optional[RelationResolver] = None,
        columns: Optional[SearchableColumns] = None,
        strict: bool = False,
    ):
        self.operators = operators or default_operators
        self.relations = relations or RelationResolver()
        self.columns = columns or SearchableColumns()
        self.strict = strict
        self.parser = ExpressionParser(self.operators, self.relations)

    def compile(self, queryset: models.QuerySet, expression: Any) -> models.QuerySet:
        """Apply ``expression`` to ``queryset``; empty expressions are a no-op."""
        q = self.build_q(queryset.model, expression)
        if not q:
            return queryset
        return queryset.filter(q)

    def build_q(self, model: Type[models.Model], expression: Any) -> Q:
        nodes = self.parser.parse(model, expression)
        clauses = ClauseList()
        self._compile_nodes(model, nodes, clauses, None)
        return clauses.to_q()

    def _compile_nodes(
        self,
        model: Type[models.Model],
        nodes: list[Node],
        clauses: ClauseList,
        context: Optional[str],
    ) -> None:
        for node in nodes:
            if isinstance(node, ImplicitEquality):
                clauses.add(clause_connector(context), self._equality_q(model, node))
            elif isinstance(node, Condition):
                clauses.add(clause_connector(context), self._condition_q(model, node))
            elif isinstance(node, HasCheck):
                for target in node.targets:
                    clauses.add(
                        clause_connector(context),
                        self._has_q(model, target, node.operator.exists),
                    )
            elif isinstance(node, LogicalGroup):
                group = ClauseList()
                self._compile_nodes(model, node.children, group, node.operator.connector)
                if group:
                    clauses.add(
                        group_connector(context, node.operator.connector), group.to_q()
                    )
            elif isinstance(node, RelationScope):
                clauses.add(clause_connector(context), self._relation_scope_q(node))
            elif isinstance(node, FieldScope):
                self._compile_nodes(model, node.children, clauses, context)

    # Leaves

    def _equality_q(self, model: Type[models.Model], node: ImplicitEquality) -> Optional[Q]:
        if not self._check_column(model, node.field):
            return None
        return self._validated(model, Q(**{node.field: node.value}), node.field)

    def _condition_q(self, model: Type[models.Model], node: Condition) -> Optional[Q]:
        operator = node.operator
        if not node.field:
            logger.debug(f"Dropping '{operator.token}' on {model.__name__}: no field in scope")
            return None
        if not self._check_column(model, node.field):
            return None

        if operator.special == "in":
            return self._in_q(model, node.field, operator, node.value)
        if operator.special == "between":
            return self._between_q(model, node.field, operator, node.value)
        if operator.special == "contains":
            return self._contains_q(model, node.field, operator, node.value)
        if operator.special == "null":
            return Q(**{f"{node.field}__isnull": True})
        if operator.special == "not_null":
            return Q(**{f"{node.field}__isnull": False})
        return self._comparison_q(model, node.field, operator, node.value)

    def _in_q(self, model, field: str, operator: ComparisonOperator, value: Any) -> Optional[Q]:
        if isinstance(value, dict):
            values = list(value.values())
        elif isinstance(value, (list, tuple, set)):
            values = list(value)
        else:
            values = [value]
        return self._validated(model, self._lookup_q(field, operator, values), field)

    def _between_q(
        self, model, field: str, operator: ComparisonOperator, value: Any
    ) -> Optional[Q]:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            self._reject(
                f"'{operator.token}' on '{field}' expects exactly two values",
                model,
                field,
            )
            return None
        return self._validated(model, self._lookup_q(field, operator, tuple(value)), field)

    def _contains_q(
        self, model, field: str, operator: ComparisonOperator, value: Any
    ) -> Optional[Q]:
        if isinstance(value, (list, dict)):
            return self._lookup_q(field, operator, value)

        if isinstance(value, str):
            decoded = self._decode_json(value)
            if decoded is not None:
                return self._lookup_q(field, operator, decoded)
            if "," in value:
                tokens = [token.strip() for token in value.split(",") if token.strip()]
                if not tokens:
                    return None
                return reduce(or_, (self._lookup_q(field, operator, token) for token in tokens))

        return self._validated(model, self._lookup_q(field, operator, value), field)

    def _comparison_q(
        self, model, field: str, operator: ComparisonOperator, value: Any
    ) -> Optional[Q]:
        if operator.lookup == "icontains" and value is not None:
            value = str(value).strip("%")
        return self._validated(model, self._lookup_q(field, operator, value), field)

    @staticmethod
    def _lookup_q(field: str, operator: ComparisonOperator, value: Any) -> Q:
        q = Q(**{f"{field}__{operator.lookup}": value})
        return ~q if operator.negated else q

    @staticmethod
    def _decode_json(value: str) -> Any:
        """Decode ``value`` when it is a JSON array or object."""
        stripped = value.strip()
        if not stripped or stripped[0] not in "[{":
            return None
        try:
            return json.loads(stripped)
        except ValueError:
            return None

    # Relations

    def _has_q(self, model: Type[models.Model], target: HasTarget, exists: bool) -> Optional[Q]:
        relation = target.relation
        if relation is None:
            self._reject(f"Unknown relation '{target.name}'", model, target.name)
            return None

        if relation.polymorphic:
            q = relation.not_null_q()
            return q if exists else ~q

        subquery = relation.correlated_queryset()
        if subquery is None:
            self._reject(f"Relation '{target.name}' cannot be filtered", model, target.name)
            return None

        if target.filters:
            inner = ClauseList()
            self._compile_nodes(relation.related_model, target.filters, inner, None)
            if inner:
                subquery = subquery.filter(inner.to_q())

        q = Q(Exists(subquery))
        return q if exists else ~q

    def _relation_scope_q(self, node: RelationScope) -> Optional[Q]:
        relation = node.relation
        subquery = relation.correlated_queryset()
        if subquery is None:
            self._reject(
                f"Relation '{relation.name}' cannot be filtered", relation.model, relation.name
            )
            return None

        inner = ClauseList()
        self._compile_nodes(relation.related_model, node.children, inner, None)
        if inner:
            subquery = subquery.filter(inner.to_q())
        return Q(Exists(subquery))

    # Validation

    def _check_column(self, model: Type[models.Model], field: str) -> bool:
        if self.columns.is_searchable(model, field):
            return True
        self._reject(f"'{field}' is not a searchable column", model, field)
        return False

    def _validated(self, model: Type[models.Model], q: Q, field: str) -> Optional[Q]:
        """Return ``q`` if Django accepts it for ``model``, else drop it."""
        try:
            model._default_manager.filter(q)
        except REJECTED_VALUE_ERRORS as e:
            self._reject(f"Invalid value for '{field}': {e}", model, field)
            return None
        return q

    def _reject(self, message: str, model: Type[models.Model], field: Optional[str]) -> None:
        if self.strict:
            raise InvalidFilterException(
                message, model_name=model.__name__, field_name=field
            )
        logger.debug(f"Dropping filter on {model.__name__}: {message}")
