"""
django-api-toolkit: query-string criteria, resources and structured API errors
for Django.

Public entry points are importable from their modules:

- ``api_toolkit.criteria.ApiCriteria``
- ``api_toolkit.query.ApiQueryParser``
- ``api_toolkit.resources.ApiResource``
- ``api_toolkit.repositories.ApiRepository``
- ``api_toolkit.middleware.ParseApiQueryMiddleware`` and ``ApiExceptionMiddleware``
"""

from .defaults import LIBRARY_VERSION

__version__ = LIBRARY_VERSION
