"""
Shared fixtures: in-memory stand-ins for the DynamoDB adapters and the S3
uploader.
"""

import pytest

from blog_config import Settings
from blog_errors import Conflict, Unauthorized
from blog_storage import Post, User
from lambda_handler import BlogApp


class FakePostStore:
    def __init__(self):
        self.items: dict[str, Post] = {}
        self.calls: list[str] = []

    def get(self, post_id):
        self.calls.append("get")
        post = self.items.get(post_id)
        return Post(**vars(post)) if post else None

    def scan(self):
        self.calls.append("scan")
        return [Post(**vars(p)) for p in self.items.values()]

    def put(self, post, expected_owner=None):
        self.calls.append("put")
        if expected_owner is not None:
            stored = self.items.get(post.id)
            if stored is None or stored.email != expected_owner:
                raise Unauthorized("condition failed")
        self.items[post.id] = Post(**vars(post))

    def delete(self, post_id, expected_owner=None):
        self.calls.append("delete")
        if expected_owner is not None:
            stored = self.items.get(post_id)
            if stored is None or stored.email != expected_owner:
                raise Unauthorized("condition failed")
        self.items.pop(post_id, None)


class FakeUserStore:
    def __init__(self):
        self.items: dict[str, User] = {}
        self.calls: list[str] = []

    def get(self, email):
        self.calls.append("get")
        return self.items.get(email)

    def put(self, user, overwrite=True):
        self.calls.append("put")
        if not overwrite and user.email in self.items:
            raise Conflict(f"User {user.email} already exists")
        self.items[user.email] = user


class FakeUploader:
    def __init__(self):
        self.uploads: list[tuple] = []
        self.fail_with: Exception | None = None

    def upload(self, image, owner):
        if self.fail_with:
            raise self.fail_with
        self.uploads.append((owner, image))
        return f"https://test-bucket.s3.eu-west-1.amazonaws.com/images/{owner}/{len(self.uploads)}.png"


@pytest.fixture
def settings():
    return Settings(
        jwt_secret="test-jwt-secret-0123456789abcdef0123",
        password_secret="test-hash-secret-0123456789abcdef012",
        bucket="test-bucket",
        region="eu-west-1",
    )


@pytest.fixture
def post_store():
    return FakePostStore()


@pytest.fixture
def user_store():
    return FakeUserStore()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def app(settings, post_store, user_store, uploader):
    return BlogApp(settings, post_store=post_store, user_store=user_store, uploader=uploader)


@pytest.fixture
def token_for(app):
    signer = app.handlers["posts"].signer
    return lambda email: signer.sign(email)
