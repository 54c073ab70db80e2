from django.http import Http404, JsonResponse
from django.urls import path

from api_toolkit.core.exceptions import BadRequestException
from api_toolkit.middleware import get_api_query
from api_toolkit.repositories import ApiRepository

from .models import Post
from .resources import PostResource


class PostRepository(ApiRepository):
    model = Post


def list_posts(request):
    api_query = get_api_query(request)
    page = PostRepository().with_api_criteria(api_query).paginate()
    return JsonResponse(
        {
            "data": [PostResource.serialize(post, api_query) for post in page.object_list],
            "meta": {"page": page.number, "pages": page.paginator.num_pages},
        }
    )


def echo_query(request):
    api_query = request.api_query
    return JsonResponse(
        {
            "fields": api_query.fields,
            "resource_fields": api_query.resource_fields,
            "filters": api_query.filters,
            "order": api_query.order,
            "limit": api_query.limit,
            "page": api_query.page,
        }
    )


def bad_request(request):
    raise BadRequestException("Missing post reference.")


def missing(request):
    raise Http404("gone")


def crash(request):
    raise RuntimeError("boom")


urlpatterns = [
    path("posts/", list_posts),
    path("echo/", echo_query),
    path("bad-request/", bad_request),
    path("missing/", missing),
    path("crash/", crash),
]
