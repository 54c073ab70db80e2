import pytest

from api_toolkit.criteria.columns import SearchableColumns, get_column_exclusions
from test_app.models import Author, Organization, Post

pytestmark = pytest.mark.unit


def test_qualified_exclusions_only_apply_to_their_table():
    exclusions = ["password", "test_app_organization.secret"]

    assert get_column_exclusions("test_app_organization", exclusions) == ["password", "secret"]
    assert get_column_exclusions("test_app_post", exclusions) == ["password"]


def test_columns_exclude_configured_names():
    columns = SearchableColumns(["password", "test_app_organization.secret"])

    assert "password" not in columns.for_model(Author)
    assert "name" in columns.for_model(Author)
    assert "secret" not in columns.for_model(Organization)


def test_foreign_keys_are_searchable_by_attname():
    columns = SearchableColumns()

    assert columns.is_searchable(Post, "author_id")
    assert not columns.is_searchable(Post, "author")
    assert not columns.is_searchable(Post, "tags")


def test_non_string_columns_are_not_searchable():
    assert not SearchableColumns().is_searchable(Post, 3)


def test_columns_are_memoized_per_instance():
    columns = SearchableColumns()
    assert columns.for_model(Post) is columns.for_model(Post)
