import pytest
from django.test import TestCase

from api_toolkit.core.exceptions import NotFoundException
from api_toolkit.query import ApiQuery
from api_toolkit.repositories import ApiRepository
from test_app.models import Post

pytestmark = pytest.mark.integration


class PostRepository(ApiRepository):
    model = Post


class ApiRepositoryTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.posts = [
            Post.objects.create(title=f"Post {index}", views=index, published=index % 2 == 0)
            for index in range(1, 8)
        ]

    def test_without_criteria_returns_everything(self):
        self.assertEqual(len(PostRepository().all()), 7)

    def test_with_api_criteria_filters_and_limits(self):
        query = ApiQuery(filters={"published": True}, order={"views": "desc"}, limit=2)
        posts = PostRepository().with_api_criteria(query).all()

        self.assertEqual([post.views for post in posts], [6, 4])

    def test_scope_by_ids(self):
        ids = [self.posts[0].pk, self.posts[1].pk]
        posts = PostRepository().scope_by_ids(ids).all()

        self.assertEqual(sorted(post.pk for post in posts), sorted(ids))

    def test_first_and_find(self):
        repository = PostRepository(ApiQuery(order={"views": "desc"}))

        self.assertEqual(repository.first().views, 7)
        self.assertEqual(PostRepository().find(self.posts[2].pk).title, "Post 3")

    def test_find_missing_raises_not_found(self):
        with self.assertRaises(NotFoundException):
            PostRepository().find(999)

    def test_paginate_uses_limit_and_page(self):
        query = ApiQuery(order={"views": "asc"}, limit=3, page=2)
        page = PostRepository().with_api_criteria(query).paginate()

        self.assertEqual([post.views for post in page.object_list], [4, 5, 6])
        self.assertEqual(page.paginator.count, 7)
        self.assertEqual(page.paginator.num_pages, 3)

    def test_repository_requires_model(self):
        with self.assertRaises(TypeError):
            ApiRepository()
