"""
Request middleware.

``ParseApiQueryMiddleware`` parses the query string onto ``request.api_query``.
``ApiExceptionMiddleware`` renders exceptions raised by views as structured
JSON errors::

    {"error": {"status": 422, "code": 10106, "title": "...", "detail": "...", "meta": {...}}}
"""

import logging
from typing import Optional

import sentry_sdk
from django.conf import settings
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from .core.exceptions import ApiException, InvalidInputException, NotFoundException, UnhandledException
from .core.settings import ApiToolkitSettings
from .query import ApiQueryParser

logger = logging.getLogger(__name__)

API_QUERY_ATTR = "api_query"


def error_response(exception: ApiException) -> JsonResponse:
    response = JsonResponse(exception.to_dict(), status=exception.http_status)
    for header, value in exception.headers.items():
        response[header] = value
    return response


class ParseApiQueryMiddleware(MiddlewareMixin):
    """Attaches the parsed ``ApiQuery`` to every request."""

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        try:
            setattr(request, API_QUERY_ATTR, ApiQueryParser().parse(request.GET))
        except InvalidInputException as e:
            return error_response(e)
        return None


class ApiExceptionMiddleware(MiddlewareMixin):
    """Maps view exceptions to structured JSON error responses."""

    def process_exception(self, request: HttpRequest, exception: Exception) -> Optional[HttpResponse]:
        if isinstance(exception, ApiException):
            return error_response(exception)

        if isinstance(exception, Http404):
            return error_response(NotFoundException())

        logger.error(
            f"Unhandled exception on {request.method} {request.path}: {exception}",
            exc_info=exception,
        )
        if ApiToolkitSettings.load().report_to_sentry:
            sentry_sdk.capture_exception(exception)

        if settings.DEBUG:
            return None
        return error_response(UnhandledException())


def get_api_query(request: HttpRequest):
    """Parsed query of ``request``, parsing it when the middleware did not run."""
    api_query = getattr(request, API_QUERY_ATTR, None)
    if api_query is None:
        api_query = ApiQueryParser().parse(request.GET)
        setattr(request, API_QUERY_ATTR, api_query)
    return api_query
