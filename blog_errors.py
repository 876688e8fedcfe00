# blog_errors.py — failure taxonomy shared by handlers and the dispatcher


class BlogError(Exception):
    """Base for every failure the API reports deliberately."""
    kind = "BlogError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class MalformedRequest(BlogError):
    kind = "MalformedRequest"


class InvalidToken(BlogError):
    kind = "InvalidToken"


class Unauthorized(BlogError):
    kind = "Unauthorized"


class NotFound(BlogError):
    kind = "NotFound"


class EmptyUpdate(BlogError):
    kind = "EmptyUpdate"


class AuthenticationError(BlogError):
    kind = "AuthenticationError"


class UnsupportedRoute(BlogError):
    kind = "UnsupportedRoute"


class Conflict(BlogError):
    kind = "Conflict"


def status_for(exc: Exception) -> int:
    if isinstance(exc, AuthenticationError):
        return 403
    return 400


def error_body(exc: Exception) -> dict:
    # Unclassified backend failures only expose their type.
    if isinstance(exc, BlogError):
        return exc.to_dict()
    return {"kind": "BackendError", "message": type(exc).__name__}
