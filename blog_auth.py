# blog_auth.py — bearer tokens and password digests
import hashlib
import hmac
import logging
import time

import jwt

from blog_errors import InvalidToken, MalformedRequest

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def header(headers: dict | None, name: str) -> str | None:
    """Case-insensitive header lookup (API Gateway keeps the client's casing)."""
    wanted = name.lower()
    for k, v in (headers or {}).items():
        if k.lower() == wanted:
            return v
    return None


def bearer_token(headers: dict | None) -> str:
    """Return the token segment of an ``Authorization: <scheme> <token>`` header."""
    value = header(headers, "Authorization")
    if not value:
        raise MalformedRequest("Missing Authorization header")
    parts = value.split(" ")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedRequest("Authorization header must look like '<scheme> <token>'")
    return parts[1]


class TokenSigner:
    def __init__(self, secret: str, ttl_seconds: int = 0):
        self.secret = secret
        self.ttl_seconds = ttl_seconds

    def sign(self, email: str) -> str:
        claims = {"email": email}
        if self.ttl_seconds > 0:
            claims["exp"] = int(time.time()) + self.ttl_seconds
        return jwt.encode(claims, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> str:
        """
        Decode ``token`` and return the email it was issued for.
        Any signature, expiry or shape problem is an InvalidToken.
        """
        try:
            claims = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token expired")
        except jwt.PyJWTError as e:
            logger.info("Token rejected: %s", type(e).__name__)
            raise InvalidToken("Invalid token")

        email = claims.get("email")
        if not email or not isinstance(email, str):
            raise InvalidToken("Invalid token")
        return email


def hash_password(password: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), password.encode("utf-8"), hashlib.sha256).hexdigest()


def digests_match(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
