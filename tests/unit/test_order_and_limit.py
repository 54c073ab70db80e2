import pytest

from api_toolkit.core.exceptions import InvalidFilterException
from api_toolkit.criteria.columns import SearchableColumns
from api_toolkit.criteria.ordering import apply_limit, apply_order, order_terms
from test_app.models import Author, Post

pytestmark = pytest.mark.unit


def test_single_ascending_sort():
    queryset = apply_order(Post.objects.all(), {"title": "asc"})
    assert queryset.query.order_by == ("title",)


def test_descending_sort():
    queryset = apply_order(Post.objects.all(), {"views": "desc", "title": "asc"})
    assert queryset.query.order_by == ("-views", "title")


def test_invalid_direction_is_skipped():
    queryset = apply_order(Post.objects.all(), {"bogus_direction": "sideways"})
    assert queryset.query.order_by == ()

    queryset = apply_order(Post.objects.all(), {"title": "sideways"})
    assert queryset.query.order_by == ()


def test_unsearchable_column_is_skipped():
    columns = SearchableColumns(["password"])
    queryset = apply_order(Author.objects.all(), {"password": "asc"}, columns)
    assert queryset.query.order_by == ()


def test_random_order():
    assert order_terms(Post, {"random": "asc"}) == ["?"]


def test_terms_append_to_existing_ordering():
    queryset = apply_order(Post.objects.order_by("-created_at"), {"title": "asc"})
    assert queryset.query.order_by == ("-created_at", "title")


def test_strict_mode_raises_on_invalid_direction():
    with pytest.raises(InvalidFilterException):
        order_terms(Post, {"title": "up"}, strict=True)


def test_limit():
    assert apply_limit(Post.objects.all(), 5).query.high_mark == 5


def test_missing_limit_is_a_no_op():
    queryset = Post.objects.all()
    assert apply_limit(queryset, None) is queryset
