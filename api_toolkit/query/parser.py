"""
Query-string parameter parsing.

Supported parameters::

    ?fields=title,author
    ?fields[users]=first_name,last_name
    ?filters={"title": {"$like": "django"}}
    ?order=title,created_at:desc
    ?order=random
    ?limit=25&page=2
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..core.exceptions import InvalidInputException
from ..core.settings import ApiToolkitSettings

logger = logging.getLogger(__name__)

RESOURCE_FIELDS_PATTERN = re.compile(r"^fields\[([^\[\]]+)\]$")


@dataclass
class ApiQuery:
    """Typed parameters parsed from one request."""

    fields: list[str] = field(default_factory=list)
    resource_fields: dict[str, list[str]] = field(default_factory=dict)
    filters: Any = field(default_factory=dict)
    order: dict[str, str] = field(default_factory=dict)
    limit: int = 50
    page: int = 1

    def get_fields(self, resource_type: Optional[str] = None) -> list[str]:
        """Fields requested for ``resource_type``, or for the root resource."""
        if resource_type:
            return list(self.resource_fields.get(resource_type, []))
        return list(self.fields)


class ApiQueryParser:
    """Validates and parses API query parameters into an ``ApiQuery``."""

    def __init__(self, settings: Optional[ApiToolkitSettings] = None):
        self.settings = settings or ApiToolkitSettings.load()

    def parse(self, params: Mapping[str, Any]) -> ApiQuery:
        errors = self.validate(params)
        if errors:
            logger.warning(f"Rejected query parameters: {sorted(errors)}")
            raise InvalidInputException(
                "The given query parameters are invalid.", meta={"errors": errors}
            )

        query = ApiQuery(limit=self.settings.default_limit)
        for key in params.keys():
            value = params.get(key)
            if key == "fields":
                query.fields = split_fields(value)
            else:
                match = RESOURCE_FIELDS_PATTERN.match(key)
                if match:
                    query.resource_fields[match.group(1).strip()] = split_fields(value)

        if params.get("filters"):
            query.filters = json.loads(params.get("filters"))
        if params.get("order"):
            query.order = parse_order(params.get("order"))
        if params.get("limit"):
            query.limit = int(str(params.get("limit")).strip())
        if params.get("page"):
            query.page = int(str(params.get("page")).strip())
        return query

    def validate(self, params: Mapping[str, Any]) -> dict[str, list[str]]:
        """Return validation errors keyed by parameter name."""
        errors: dict[str, list[str]] = {}

        for key in params.keys():
            if key == "fields" or RESOURCE_FIELDS_PATTERN.match(key):
                if not isinstance(params.get(key), str):
                    errors.setdefault(key, []).append(f"The {key} field must be a string.")

        if "order" in params and not isinstance(params.get("order"), str):
            errors.setdefault("order", []).append("The order field must be a string.")

        if params.get("filters") not in (None, ""):
            filters = params.get("filters")
            try:
                decoded = json.loads(filters) if isinstance(filters, str) else None
            except ValueError:
                decoded = None
            if not isinstance(decoded, (dict, list)):
                errors.setdefault("filters", []).append(
                    "The filters field must be a valid JSON string."
                )

        for name in ("limit", "page"):
            if params.get(name) in (None, ""):
                continue
            try:
                number = int(str(params.get(name)).strip())
            except ValueError:
                errors.setdefault(name, []).append(f"The {name} field must be an integer.")
                continue
            if number < 1:
                errors.setdefault(name, []).append(f"The {name} field must be at least 1.")

        return errors


def split_fields(value: Any) -> list[str]:
    if not isinstance(value, str):
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_order(value: str) -> dict[str, str]:
    """Parse ``"a,b:desc"`` into ``{"a": "asc", "b": "desc"}``."""
    order: dict[str, str] = {}
    for term in value.split(","):
        term = term.strip()
        if not term:
            continue
        column, _, direction = term.partition(":")
        order[column.strip()] = direction.strip() or "asc"
    return order
