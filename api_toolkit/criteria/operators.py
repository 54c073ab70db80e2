"""
Operator tables for filter expressions.

Three disjoint vocabularies are recognised in filter expressions:

- comparison operators (``$eq``, ``$in``, ``$between``...), mapped to Django
  lookups;
- logical operators (``$and``, ``$or``), mapped to clause connectors;
- relation existence operators (``$has``, ``$hasnt``), mapped to ``Exists``
  and ``~Exists`` subqueries.

The default table is shared and never mutated. ``OperatorTable.copy()``
returns an independent table that accepts registrations.
"""

from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ImproperlyConfigured

COMPARISON = "comparison"
LOGICAL = "logical"
RELATION = "relation"

AND = "AND"
OR = "OR"


@dataclass(frozen=True)
class ComparisonOperator:
    """A comparison token and the Django lookup it applies."""

    token: str
    lookup: str
    negated: bool = False
    # Handled by a dedicated method on the compiler instead of a plain lookup.
    special: Optional[str] = None


@dataclass(frozen=True)
class LogicalOperator:
    token: str
    connector: str


@dataclass(frozen=True)
class RelationOperator:
    token: str
    exists: bool


DEFAULT_COMPARISON_OPERATORS = (
    ComparisonOperator("$le", "lte"),
    ComparisonOperator("$lt", "lt"),
    ComparisonOperator("$ge", "gte"),
    ComparisonOperator("$gt", "gt"),
    ComparisonOperator("$neq", "exact", negated=True),
    ComparisonOperator("$eq", "exact"),
    ComparisonOperator("$like", "icontains"),
    ComparisonOperator("$in", "in", special="in"),
    ComparisonOperator("$between", "range", special="between"),
    ComparisonOperator("$contains", "contains", special="contains"),
    ComparisonOperator("$null", "isnull", special="null"),
    ComparisonOperator("$notNull", "isnull", special="not_null"),
)

DEFAULT_LOGICAL_OPERATORS = (
    LogicalOperator("$or", OR),
    LogicalOperator("$and", AND),
)

DEFAULT_RELATION_OPERATORS = (
    RelationOperator("$has", exists=True),
    RelationOperator("$hasnt", exists=False),
)


class OperatorTable:
    """Token lookups for the three operator vocabularies."""

    def __init__(self, comparison=(), logical=(), relation=(), frozen: bool = False):
        self._comparison: dict[str, ComparisonOperator] = {}
        self._logical: dict[str, LogicalOperator] = {}
        self._relation: dict[str, RelationOperator] = {}
        self._frozen = False
        for operator in comparison:
            self.register_comparison(operator)
        for operator in logical:
            self.register_logical(operator)
        for operator in relation:
            self.register_relation(operator)
        self._frozen = frozen

    @classmethod
    def default(cls) -> "OperatorTable":
        return cls(
            DEFAULT_COMPARISON_OPERATORS,
            DEFAULT_LOGICAL_OPERATORS,
            DEFAULT_RELATION_OPERATORS,
        )

    def copy(self) -> "OperatorTable":
        return OperatorTable(
            self._comparison.values(),
            self._logical.values(),
            self._relation.values(),
        )

    def classify(self, token) -> Optional[str]:
        """Return the vocabulary ``token`` belongs to, or ``None``."""
        if not isinstance(token, str):
            return None
        if token in self._comparison:
            return COMPARISON
        if token in self._relation:
            return RELATION
        if token in self._logical:
            return LOGICAL
        return None

    def comparison(self, token: str) -> Optional[ComparisonOperator]:
        return self._comparison.get(token)

    def logical(self, token: str) -> Optional[LogicalOperator]:
        return self._logical.get(token)

    def relation(self, token: str) -> Optional[RelationOperator]:
        return self._relation.get(token)

    def register_comparison(self, operator: ComparisonOperator) -> None:
        self._register(operator.token, COMPARISON)
        self._comparison[operator.token] = operator

    def register_logical(self, operator: LogicalOperator) -> None:
        if operator.connector not in (AND, OR):
            raise ImproperlyConfigured(
                f"Logical operator '{operator.token}' must use the AND or OR connector"
            )
        self._register(operator.token, LOGICAL)
        self._logical[operator.token] = operator

    def register_relation(self, operator: RelationOperator) -> None:
        self._register(operator.token, RELATION)
        self._relation[operator.token] = operator

    def _register(self, token: str, category: str) -> None:
        if self._frozen:
            raise ImproperlyConfigured(
                "The default operator table is read-only; register on a copy()"
            )
        existing = self.classify(token)
        if existing is not None and existing != category:
            raise ImproperlyConfigured(
                f"Operator '{token}' is already registered as a {existing} operator"
            )


default_operators = OperatorTable(
    DEFAULT_COMPARISON_OPERATORS,
    DEFAULT_LOGICAL_OPERATORS,
    DEFAULT_RELATION_OPERATORS,
    frozen=True,
)
