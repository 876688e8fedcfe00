# blog_handlers.py — post and user operations behind the dispatcher
import json
import logging
import uuid
from dataclasses import asdict

from blog_auth import TokenSigner, bearer_token, digests_match, hash_password
from blog_errors import AuthenticationError, EmptyUpdate, MalformedRequest, NotFound, Unauthorized
from blog_storage import Image, ImageUploader, Post, PostStore, User, UserStore
from multipart_form import parse_form

logger = logging.getLogger(__name__)


def _path_id(event: dict) -> str:
    post_id = (event.get("pathParameters") or {}).get("id")
    if not post_id:
        raise MalformedRequest("Missing post id in path")
    return post_id


def _text(form: dict, name: str) -> str | None:
    value = form.get(name)
    if value is not None and not isinstance(value, str):
        raise MalformedRequest(f"Field {name} must be text")
    return value or None


def _post_dict(post: Post) -> dict:
    return {k: v for k, v in asdict(post).items() if v is not None}


# ---------- Ownership ----------
class OwnershipGuard:
    def __init__(self, posts: PostStore):
        self.posts = posts

    def assert_ownership(self, email: str, post_id: str) -> Post:
        """Return the stored post if ``email`` owns it."""
        post = self.posts.get(post_id)
        if post is None:
            raise NotFound(f"Post {post_id} not found")
        if post.email != email:
            logger.warning("Ownership check failed for post %s", post_id)
            raise Unauthorized("unauthorized action")
        return post


# ---------- Posts ----------
class PostHandler:
    def __init__(self, posts: PostStore, uploader: ImageUploader, signer: TokenSigner):
        self.posts = posts
        self.uploader = uploader
        self.signer = signer
        self.guard = OwnershipGuard(posts)

    def _identity(self, event: dict) -> str:
        return self.signer.verify(bearer_token(event.get("headers")))

    def list_posts(self, event: dict) -> list[dict]:
        return [_post_dict(p) for p in self.posts.scan()]

    def get_post(self, event: dict) -> dict | None:
        post = self.posts.get(_path_id(event))
        return _post_dict(post) if post else None

    def delete_post(self, event: dict) -> str:
        post_id = _path_id(event)
        email = self._identity(event)
        self.guard.assert_ownership(email, post_id)
        self.posts.delete(post_id, expected_owner=email)
        return f"Deleted item {post_id}"

    def put_post(self, event: dict) -> str:
        """
        Create a post when the form carries no ``id``, update it otherwise.
        Updates are checked for ownership before anything is uploaded or written.
        """
        email = self._identity(event)
        form = parse_form(event)

        post_id = _text(form, "id")
        message = _text(form, "message")
        image = form.get("image")
        if isinstance(image, str) and image:
            raise MalformedRequest("Field image must be a file")
        if not isinstance(image, Image) or not image.content:
            image = None

        if post_id is None:
            post = Post(id=str(uuid.uuid4()), email=email, message=message)
            if image:
                post.imageUrl = self.uploader.upload(image, email)
            self.posts.put(post)
            logger.info("Created post %s", post.id)
            return f"Put item {post.id}"

        stored = self.guard.assert_ownership(email, post_id)
        if message is None and image is None:
            raise EmptyUpdate("Missing content to update in the post")

        post = Post(
            id=stored.id,
            email=stored.email,
            message=message if message is not None else stored.message,
            imageUrl=stored.imageUrl,
        )
        if image:
            post.imageUrl = self.uploader.upload(image, stored.email)
        self.posts.put(post, expected_owner=stored.email)
        logger.info("Updated post %s", post.id)
        return f"Put item {post.id}"


# ---------- Users ----------
class UserHandler:
    def __init__(self, users: UserStore, signer: TokenSigner, password_secret: str,
                 allow_overwrite: bool = False):
        self.users = users
        self.signer = signer
        self.password_secret = password_secret
        self.allow_overwrite = allow_overwrite

    def _credentials(self, event: dict) -> tuple[str, str]:
        try:
            data = json.loads(event.get("body") or "")
        except (TypeError, ValueError):
            raise MalformedRequest("Body must be JSON with email and password")
        if not isinstance(data, dict):
            raise MalformedRequest("Body must be JSON with email and password")

        email, password = data.get("email"), data.get("password")
        if not isinstance(email, str) or not email or not isinstance(password, str) or not password:
            raise MalformedRequest("email and password are required")
        return email, hash_password(password, self.password_secret)

    def signup(self, event: dict) -> str:
        email, digest = self._credentials(event)
        self.users.put(User(email=email, password=digest), overwrite=self.allow_overwrite)
        return "success"

    def login(self, event: dict) -> dict:
        email, digest = self._credentials(event)
        user = self.users.get(email)
        if user is None or not digests_match(user.password, digest):
            raise AuthenticationError("authentication_error")
        return {"token": self.signer.sign(email)}
