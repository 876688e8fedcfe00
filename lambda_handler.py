# lambda_handler.py — API Gateway entry point for the blog API
import json
import logging

from blog_auth import TokenSigner
from blog_config import Settings
from blog_errors import BlogError, UnsupportedRoute, error_body, status_for
from blog_handlers import PostHandler, UserHandler
from blog_storage import ImageUploader, PostStore, UserStore

log = logging.getLogger()
log.setLevel(logging.INFO)

HEADERS = {"Content-Type": "application/json"}

# (httpMethod, resource) -> (domain, handler method)
ROUTES = {
    ("GET", "/posts"): ("posts", "list_posts"),
    ("GET", "/posts/{id}"): ("posts", "get_post"),
    ("DELETE", "/posts/{id}"): ("posts", "delete_post"),
    ("PUT", "/posts"): ("posts", "put_post"),
    ("POST", "/users/signup"): ("users", "signup"),
    ("POST", "/users/login"): ("users", "login"),
}


class BlogApp:
    """Wires handlers to their clients. Clients are injectable for tests."""

    def __init__(self, settings: Settings, post_store=None, user_store=None, uploader=None):
        self.settings = settings
        post_store = post_store or PostStore.connect(settings.post_table, settings.region)
        user_store = user_store or UserStore.connect(settings.user_table, settings.region)
        uploader = uploader or ImageUploader.connect(settings.bucket, settings.region)

        signer = TokenSigner(settings.jwt_secret, settings.token_ttl_seconds)
        self.handlers = {
            "posts": PostHandler(post_store, uploader, signer),
            "users": UserHandler(user_store, signer, settings.password_secret,
                                 allow_overwrite=settings.allow_signup_overwrite),
        }

    def dispatch(self, event: dict):
        method, resource = event.get("httpMethod"), event.get("resource")
        route = ROUTES.get((method, resource))
        if route is None:
            raise UnsupportedRoute(f"Unsupported route: {method} {resource}")
        domain, name = route
        log.info("Dispatching %s %s", method, resource)
        return getattr(self.handlers[domain], name)(event)

    def handle(self, event: dict) -> dict:
        try:
            return _respond(200, self.dispatch(event))
        except BlogError as e:
            log.warning("request failed: %s: %s", e.kind, e.message)
            return _respond(status_for(e), error_body(e))
        except Exception as e:
            log.exception("error occurred")
            return _respond(status_for(e), error_body(e))


def _respond(code: int, data) -> dict:
    return {"statusCode": code, "headers": dict(HEADERS), "body": json.dumps(data)}


_app: BlogApp | None = None


def get_app() -> BlogApp:
    # built once per container, reused by warm invocations
    global _app
    if _app is None:
        settings = Settings.from_env()
        log.setLevel(settings.log_level)
        _app = BlogApp(settings)
    return _app


def lambda_handler(event, context, app: BlogApp | None = None):
    return (app or get_app()).handle(event or {})
