import pytest

from api_toolkit.criteria.expressions import (
    Condition,
    ExpressionParser,
    FieldScope,
    HasCheck,
    ImplicitEquality,
    LogicalGroup,
    RelationScope,
    is_empty,
)
from api_toolkit.criteria.operators import default_operators
from api_toolkit.criteria.relations import RelationResolver
from test_app.models import Post

pytestmark = pytest.mark.unit


@pytest.fixture
def parser():
    return ExpressionParser(default_operators, RelationResolver())


@pytest.mark.parametrize("value", [None, "", {}, []])
def test_empty_values(value, parser):
    assert is_empty(value)
    assert parser.parse(Post, value) == []


@pytest.mark.parametrize("value", [0, False])
def test_falsy_scalars_are_values(value):
    assert not is_empty(value)


def test_scalar_without_field_is_ignored(parser):
    assert parser.parse(Post, "hello") == []


def test_field_with_scalar_is_implicit_equality(parser):
    nodes = parser.parse(Post, {"title": "hello"})

    assert len(nodes) == 1
    scope = nodes[0]
    assert isinstance(scope, FieldScope)
    assert scope.children == [ImplicitEquality("title", "hello")]


def test_comparison_carries_field(parser):
    (scope,) = parser.parse(Post, {"views": {"$gt": 3}})
    (condition,) = scope.children

    assert isinstance(condition, Condition)
    assert condition.field == "views"
    assert condition.operator.token == "$gt"
    assert condition.value == 3


def test_logical_group_resets_field(parser):
    (group,) = parser.parse(Post, {"$or": {"title": "a", "views": 1}})

    assert isinstance(group, LogicalGroup)
    assert group.operator.token == "$or"
    assert [child.field for child in group.children] == ["title", "views"]


def test_relation_key_with_mapping_is_scoped_to_related_model(parser):
    (scope,) = parser.parse(Post, {"comments": {"body": "nice"}})

    assert isinstance(scope, RelationScope)
    assert scope.relation.name == "comments"
    assert scope.relation.related_model.__name__ == "Comment"
    assert isinstance(scope.children[0], FieldScope)


def test_relation_key_with_scalar_is_a_field(parser):
    (scope,) = parser.parse(Post, {"author": 3})

    assert isinstance(scope, FieldScope)
    assert scope.children == [ImplicitEquality("author", 3)]


def test_has_targets(parser):
    (check,) = parser.parse(Post, {"$has": {"comments": {"approved": True}, "ghosts": None}})

    assert isinstance(check, HasCheck)
    comments, ghosts = check.targets
    assert comments.relation is not None
    assert len(comments.filters) == 1
    assert ghosts.relation is None


def test_has_accepts_single_name(parser):
    (check,) = parser.parse(Post, {"$has": "tags"})

    assert [target.name for target in check.targets] == ["tags"]
    assert check.targets[0].filters == []


def test_classification_prefers_operators_over_fields(parser):
    nodes = parser.parse(Post, {"$eq": 1, "$and": {}, "$has": [], "title": "x"})

    assert [type(node) for node in nodes] == [Condition, LogicalGroup, HasCheck, FieldScope]
