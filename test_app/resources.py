from api_toolkit.resources import ApiResource

from .models import (
    Author,
    Comment,
    Level1,
    Level2,
    Level3,
    Level4,
    Level5,
    Level6,
    Level7,
    Organization,
    Post,
    Tag,
)


class OrganizationResource(ApiResource):
    resource_type = "organizations"
    model = Organization
    fields = ["name", "authors"]
    default_fields = ["name"]


class AuthorResource(ApiResource):
    resource_type = "authors"
    model = Author
    fields = ["name", "email", "organization", "posts", "comments"]
    default_fields = ["name", "organization"]


class TagResource(ApiResource):
    resource_type = "tags"
    model = Tag
    fields = ["name", "posts"]
    default_fields = ["name"]


class PostResource(ApiResource):
    resource_type = "posts"
    model = Post
    fields = ["title", "body", "views", "published", "author", "tags", "comments", "attachments"]
    default_fields = ["title", "author"]


class CommentResource(ApiResource):
    resource_type = "comments"
    model = Comment
    fields = ["body", "approved", "post", "author"]
    default_fields = ["body", "author"]


class Level1Resource(ApiResource):
    resource_type = "level1"
    model = Level1
    fields = ["name", "next"]


class Level2Resource(ApiResource):
    resource_type = "level2"
    model = Level2
    fields = ["name", "next"]


class Level3Resource(ApiResource):
    resource_type = "level3"
    model = Level3
    fields = ["name", "next"]


class Level4Resource(ApiResource):
    resource_type = "level4"
    model = Level4
    fields = ["name", "next"]


class Level5Resource(ApiResource):
    resource_type = "level5"
    model = Level5
    fields = ["name", "next"]


class Level6Resource(ApiResource):
    resource_type = "level6"
    model = Level6
    fields = ["name", "next"]


class Level7Resource(ApiResource):
    resource_type = "level7"
    model = Level7
    fields = ["name"]
