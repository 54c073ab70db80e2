"""
Exception types for the API toolkit.

Every exception meant to reach an API client derives from ``ApiException``
and declares an internal ``ErrorCode`` and an HTTP status. Titles and
details default to the message table below and can be overridden per
instance.
"""

from enum import IntEnum
from typing import Any, Optional


class ErrorCode(IntEnum):
    """Internal error codes exposed in API error payloads."""

    UNHANDLED_ERROR = 10001
    BAD_REQUEST = 10100
    NOT_FOUND = 10103
    INVALID_INPUT = 10106
    INVALID_FILTER = 10108


ERROR_MESSAGES: dict[ErrorCode, dict[str, str]] = {
    ErrorCode.UNHANDLED_ERROR: {
        "title": "Unknown Error",
        "detail": "Oh no! Something has gone wrong!",
    },
    ErrorCode.BAD_REQUEST: {
        "title": "Bad Request",
        "detail": "There was an issue with the request, please try again",
    },
    ErrorCode.NOT_FOUND: {
        "title": "Not Found",
        "detail": "The requested resource could not be found",
    },
    ErrorCode.INVALID_INPUT: {
        "title": "Invalid Input",
        "detail": "The information supplied was invalid",
    },
    ErrorCode.INVALID_FILTER: {
        "title": "Invalid Filter",
        "detail": "The requested filter or ordering references an unknown field",
    },
}


class ApiException(Exception):
    """Base exception for errors rendered as structured API responses."""

    code: ErrorCode = ErrorCode.UNHANDLED_ERROR
    http_status: int = 500

    def __init__(
        self,
        detail: Optional[str] = None,
        meta: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.meta = meta
        self.headers = dict(headers or {})
        self._detail = detail
        super().__init__(self.detail)

    @property
    def title(self) -> str:
        return ERROR_MESSAGES.get(self.code, {}).get("title", "")

    @property
    def detail(self) -> str:
        if self._detail:
            return self._detail
        return ERROR_MESSAGES.get(self.code, {}).get("detail", "")

    def to_dict(self) -> dict[str, Any]:
        """Build the ``error`` payload, omitting empty members."""
        payload = {
            "status": self.http_status,
            "code": int(self.code),
            "title": self.title,
            "detail": self.detail,
            "meta": self.meta,
        }
        return {"error": {key: value for key, value in payload.items() if value}}


class BadRequestException(ApiException):
    code = ErrorCode.BAD_REQUEST
    http_status = 400


class NotFoundException(ApiException):
    code = ErrorCode.NOT_FOUND
    http_status = 404


class InvalidInputException(ApiException):
    """Raised when query parameters fail validation."""

    code = ErrorCode.INVALID_INPUT
    http_status = 422


class InvalidFilterException(ApiException):
    """Raised in strict mode when a filter or order references an unknown target."""

    code = ErrorCode.INVALID_FILTER
    http_status = 400

    def __init__(
        self,
        detail: Optional[str] = None,
        model_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ):
        self.model_name = model_name
        self.field_name = field_name
        meta = {"model": model_name, "field": field_name} if field_name else None
        super().__init__(detail, meta=meta)


class UnhandledException(ApiException):
    code = ErrorCode.UNHANDLED_ERROR
    http_status = 500
