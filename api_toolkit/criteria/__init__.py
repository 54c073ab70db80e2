"""
Criteria: filter compilation, eager-load planning, ordering and limits.
"""

from .api_criteria import ApiCriteria
from .columns import SearchableColumns
from .compiler import FilterCompiler
from .eager_loading import EagerLoadPlanner
from .expressions import ExpressionParser
from .operators import (
    ComparisonOperator,
    LogicalOperator,
    OperatorTable,
    RelationOperator,
    default_operators,
)
from .ordering import apply_limit, apply_order
from .relations import RelationInfo, RelationResolver

__all__ = [
    "ApiCriteria",
    "ComparisonOperator",
    "EagerLoadPlanner",
    "ExpressionParser",
    "FilterCompiler",
    "LogicalOperator",
    "OperatorTable",
    "RelationInfo",
    "RelationOperator",
    "RelationResolver",
    "SearchableColumns",
    "apply_limit",
    "apply_order",
    "default_operators",
]
