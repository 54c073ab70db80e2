import pytest
from django.core.exceptions import ImproperlyConfigured

from api_toolkit.criteria.operators import (
    AND,
    COMPARISON,
    LOGICAL,
    OR,
    RELATION,
    ComparisonOperator,
    LogicalOperator,
    OperatorTable,
    RelationOperator,
    default_operators,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "token,category",
    [
        ("$eq", COMPARISON),
        ("$neq", COMPARISON),
        ("$between", COMPARISON),
        ("$contains", COMPARISON),
        ("$notNull", COMPARISON),
        ("$or", LOGICAL),
        ("$and", LOGICAL),
        ("$has", RELATION),
        ("$hasnt", RELATION),
        ("title", None),
        ("$unknown", None),
        (3, None),
    ],
)
def test_classify_default_tokens(token, category):
    assert default_operators.classify(token) == category


def test_default_table_lookups():
    assert default_operators.comparison("$le").lookup == "lte"
    assert default_operators.comparison("$neq").negated is True
    assert default_operators.comparison("$like").lookup == "icontains"
    assert default_operators.logical("$or").connector == OR
    assert default_operators.logical("$and").connector == AND
    assert default_operators.relation("$hasnt").exists is False


def test_default_table_is_read_only():
    with pytest.raises(ImproperlyConfigured):
        default_operators.register_comparison(ComparisonOperator("$starts", "istartswith"))
    assert default_operators.classify("$starts") is None


def test_copy_accepts_registrations_without_touching_defaults():
    table = default_operators.copy()
    table.register_comparison(ComparisonOperator("$starts", "istartswith"))
    table.register_relation(RelationOperator("$with", exists=True))

    assert table.classify("$starts") == COMPARISON
    assert table.classify("$with") == RELATION
    assert default_operators.classify("$starts") is None
    assert default_operators.classify("$with") is None


def test_registering_token_in_another_vocabulary_fails():
    table = OperatorTable.default()
    with pytest.raises(ImproperlyConfigured):
        table.register_logical(LogicalOperator("$eq", AND))


def test_logical_operator_requires_known_connector():
    table = OperatorTable.default()
    with pytest.raises(ImproperlyConfigured):
        table.register_logical(LogicalOperator("$xor", "XOR"))


def test_reregistering_within_same_vocabulary_replaces_entry():
    table = OperatorTable.default()
    table.register_comparison(ComparisonOperator("$like", "contains"))
    assert table.comparison("$like").lookup == "contains"
