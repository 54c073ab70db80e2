from django.contrib.contenttypes.fields import GenericForeignKey, GenericRelation
from django.contrib.contenttypes.models import ContentType
from django.db import models


class Organization(models.Model):
    name = models.CharField(max_length=100)
    secret = models.CharField(max_length=100, blank=True)

    class Meta:
        app_label = "test_app"


class Author(models.Model):
    name = models.CharField(max_length=100)
    email = models.EmailField(blank=True)
    password = models.CharField(max_length=128, blank=True)
    organization = models.ForeignKey(
        Organization,
        on_delete=models.SET_NULL,
        related_name="authors",
        null=True,
        blank=True,
    )

    class Meta:
        app_label = "test_app"


class Tag(models.Model):
    name = models.CharField(max_length=50)

    class Meta:
        app_label = "test_app"


class Attachment(models.Model):
    name = models.CharField(max_length=100)
    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveIntegerField()
    target = GenericForeignKey("content_type", "object_id")

    class Meta:
        app_label = "test_app"


class Post(models.Model):
    title = models.CharField(max_length=200)
    body = models.TextField(blank=True)
    views = models.IntegerField(default=0)
    published = models.BooleanField(default=False)
    metadata = models.JSONField(default=dict, blank=True)
    author = models.ForeignKey(
        Author, on_delete=models.CASCADE, related_name="posts", null=True, blank=True
    )
    tags = models.ManyToManyField(Tag, blank=True, related_name="posts")
    attachments = GenericRelation(Attachment)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "test_app"


class Comment(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(
        Author, on_delete=models.SET_NULL, related_name="comments", null=True, blank=True
    )
    body = models.TextField()
    approved = models.BooleanField(default=True)

    class Meta:
        app_label = "test_app"


class Level7(models.Model):
    name = models.CharField(max_length=50)

    class Meta:
        app_label = "test_app"


class Level6(models.Model):
    name = models.CharField(max_length=50)
    next = models.ForeignKey(Level7, on_delete=models.CASCADE, null=True)

    class Meta:
        app_label = "test_app"


class Level5(models.Model):
    name = models.CharField(max_length=50)
    next = models.ForeignKey(Level6, on_delete=models.CASCADE, null=True)

    class Meta:
        app_label = "test_app"


class Level4(models.Model):
    name = models.CharField(max_length=50)
    next = models.ForeignKey(Level5, on_delete=models.CASCADE, null=True)

    class Meta:
        app_label = "test_app"


class Level3(models.Model):
    name = models.CharField(max_length=50)
    next = models.ForeignKey(Level4, on_delete=models.CASCADE, null=True)

    class Meta:
        app_label = "test_app"


class Level2(models.Model):
    name = models.CharField(max_length=50)
    next = models.ForeignKey(Level3, on_delete=models.CASCADE, null=True)

    class Meta:
        app_label = "test_app"


class Level1(models.Model):
    name = models.CharField(max_length=50)
    next = models.ForeignKey(Level2, on_delete=models.CASCADE, null=True)

    class Meta:
        app_label = "test_app"
