import pytest

from api_toolkit.core.cache import MetadataCache
from api_toolkit.criteria import ApiCriteria
from api_toolkit.criteria.relations import RelationResolver, get_relation_table
from api_toolkit.query import ApiQuery
from test_app.models import Attachment, Author, Comment, Post, Tag

pytestmark = pytest.mark.unit


def test_relation_table_lists_forward_and_reverse_relations():
    table = get_relation_table(Post)

    assert {"author", "tags", "comments", "attachments"} <= set(table)
    assert table["comments"].reverse
    assert table["comments"].many
    assert not table["author"].many
    assert table["tags"].related_model is Tag


def test_generic_foreign_key_is_polymorphic():
    relation = get_relation_table(Attachment)["target"]

    assert relation.polymorphic
    assert relation.related_model is None
    assert relation.correlated_queryset() is None


def test_resolver_answers_from_relation_table():
    resolver = RelationResolver()

    assert resolver.is_relation(Post, "comments")
    assert not resolver.is_relation(Post, "title")
    assert not resolver.is_relation(Post, "")
    assert not resolver.is_relation(Post, None)
    assert resolver.get_related_model(Post, "comments") is Comment
    assert resolver.get_related_model(Post, "title") is None


def test_unknown_filter_keys_leave_metadata_cache_untouched():
    cache = MetadataCache()

    for i in range(200):
        criteria = ApiCriteria(ApiQuery(filters={f"junk{i}": {"x": 1}}), cache=cache)
        criteria.apply_filters(Post.objects.all())

    assert len(cache.store) == 0


def test_reverse_accessor_names():
    resolver = RelationResolver()

    assert resolver.get_related_model(Author, "posts") is Post
    assert resolver.get_related_model(Tag, "posts") is Post
    assert resolver.is_polymorphic(Attachment, "target")
    assert not resolver.is_polymorphic(Post, "author")
