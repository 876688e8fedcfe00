# blog_config.py — environment configuration for the blog Lambda
import os
from dataclasses import dataclass

from dotenv import load_dotenv

REQUIRED = ("JWT_SECRET_KEY", "PASSWORD_HASH_SECRET", "BLOG_BUCKET", "BLOG_REGION")
TRUTHY = {"1", "true", "yes", "on"}
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    password_secret: str
    bucket: str
    region: str
    post_table: str = "posts"
    user_table: str = "users"
    token_ttl_seconds: int = 0
    allow_signup_overwrite: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env=None) -> "Settings":
        """
        Build settings from the process environment (or a mapping, for tests).
        Missing required values are fatal: there is no fallback.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        missing = [name for name in REQUIRED if not env.get(name)]
        if missing:
            raise RuntimeError(f"Missing {', '.join(missing)} in environment")

        try:
            ttl = int(env.get("TOKEN_TTL_SECONDS") or 0)
        except ValueError:
            raise RuntimeError("TOKEN_TTL_SECONDS must be an integer")

        log_level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise RuntimeError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

        return cls(
            jwt_secret=env["JWT_SECRET_KEY"],
            password_secret=env["PASSWORD_HASH_SECRET"],
            bucket=env["BLOG_BUCKET"],
            region=env["BLOG_REGION"],
            post_table=env.get("POST_TABLE_NAME") or "posts",
            user_table=env.get("USER_TABLE_NAME") or "users",
            token_ttl_seconds=max(ttl, 0),
            allow_signup_overwrite=(env.get("ALLOW_SIGNUP_OVERWRITE") or "").strip().lower() in TRUTHY,
            log_level=log_level,
        )
