import pytest
from django.http import QueryDict
from django.test import SimpleTestCase, override_settings

from api_toolkit.core.exceptions import ErrorCode, InvalidInputException
from api_toolkit.query import ApiQueryParser, parse_order


class ApiQueryParserTests(SimpleTestCase):
    def parse(self, query_string):
        return ApiQueryParser().parse(QueryDict(query_string))

    def test_defaults(self):
        query = self.parse("")

        self.assertEqual(query.fields, [])
        self.assertEqual(query.resource_fields, {})
        self.assertEqual(query.filters, {})
        self.assertEqual(query.order, {})
        self.assertEqual(query.limit, 50)
        self.assertEqual(query.page, 1)

    def test_root_and_resource_fields(self):
        query = self.parse("fields=title, body&fields[authors]=name,email")

        self.assertEqual(query.get_fields(), ["title", "body"])
        self.assertEqual(query.get_fields("authors"), ["name", "email"])
        self.assertEqual(query.get_fields("tags"), [])

    def test_filters_are_decoded(self):
        query = self.parse('filters={"title":{"$like":"django"}}')
        self.assertEqual(query.filters, {"title": {"$like": "django"}})

    def test_order_limit_and_page(self):
        query = self.parse("order=title,views:desc&limit=10&page=3")

        self.assertEqual(query.order, {"title": "asc", "views": "desc"})
        self.assertEqual(query.limit, 10)
        self.assertEqual(query.page, 3)

    @override_settings(API_TOOLKIT={"parser": {"defaults": {"limit": 20}}})
    def test_default_limit_from_settings(self):
        self.assertEqual(self.parse("").limit, 20)

    def test_invalid_parameters_raise_invalid_input(self):
        with self.assertRaises(InvalidInputException) as ctx:
            self.parse("filters={not json&limit=0&page=abc")

        exc = ctx.exception
        self.assertEqual(exc.http_status, 422)
        self.assertEqual(exc.code, ErrorCode.INVALID_INPUT)
        self.assertEqual(set(exc.meta["errors"]), {"filters", "limit", "page"})

    def test_scalar_json_filters_are_rejected(self):
        with self.assertRaises(InvalidInputException):
            self.parse("filters=5")


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("name", {"name": "asc"}),
        ("name,created_at:desc", {"name": "asc", "created_at": "desc"}),
        ("random", {"random": "asc"}),
        (" , ", {}),
    ],
)
def test_parse_order(value, expected):
    assert parse_order(value) == expected
