# blog_storage.py — DynamoDB adapters for posts/users and the S3 image uploader
import logging
import time
from dataclasses import dataclass

import boto3
from botocore.exceptions import ClientError

from blog_errors import Conflict, Unauthorized

logger = logging.getLogger(__name__)

CONDITION_FAILED = "ConditionalCheckFailedException"


def _condition_failed(err: ClientError) -> bool:
    return err.response.get("Error", {}).get("Code") == CONDITION_FAILED


# ---------- Records ----------
@dataclass
class Post:
    id: str
    email: str
    message: str | None = None
    imageUrl: str | None = None

    @classmethod
    def from_item(cls, item: dict) -> "Post":
        return cls(
            id=item["id"],
            email=item["email"],
            message=item.get("message"),
            imageUrl=item.get("imageUrl"),
        )

    def to_item(self) -> dict:
        # absent attributes are not written
        item = {"id": self.id, "email": self.email}
        if self.message is not None:
            item["message"] = self.message
        if self.imageUrl is not None:
            item["imageUrl"] = self.imageUrl
        return item


@dataclass
class User:
    email: str
    password: str


@dataclass
class Image:
    filename: str
    content: bytes
    content_type: str


# ---------- Posts ----------
class PostStore:
    """Typed wrapper over the post table, keyed by ``id``."""

    def __init__(self, table):
        self.table = table

    @classmethod
    def connect(cls, table_name: str, region: str) -> "PostStore":
        return cls(boto3.resource("dynamodb", region_name=region).Table(table_name))

    def get(self, post_id: str) -> Post | None:
        logger.debug("Fetching post %s", post_id)
        item = self.table.get_item(Key={"id": post_id}).get("Item")
        return Post.from_item(item) if item else None

    def scan(self) -> list[Post]:
        posts: list[Post] = []
        kwargs: dict = {}
        while True:
            resp = self.table.scan(**kwargs)
            posts += [Post.from_item(i) for i in resp.get("Items", [])]
            last = resp.get("LastEvaluatedKey")
            if not last:
                break
            kwargs["ExclusiveStartKey"] = last
        logger.info("Scanned %d posts", len(posts))
        return posts

    def put(self, post: Post, expected_owner: str | None = None) -> None:
        """
        Write ``post``. With ``expected_owner`` the write only lands if the
        stored item still belongs to that owner.
        """
        kwargs: dict = {"Item": post.to_item()}
        if expected_owner is not None:
            kwargs["ConditionExpression"] = "email = :owner"
            kwargs["ExpressionAttributeValues"] = {":owner": expected_owner}
        try:
            self.table.put_item(**kwargs)
        except ClientError as e:
            if _condition_failed(e):
                raise Unauthorized(f"Post {post.id} is no longer owned by the caller")
            raise
        logger.info("Put post %s", post.id)

    def delete(self, post_id: str, expected_owner: str | None = None) -> None:
        kwargs: dict = {"Key": {"id": post_id}}
        if expected_owner is not None:
            kwargs["ConditionExpression"] = "email = :owner"
            kwargs["ExpressionAttributeValues"] = {":owner": expected_owner}
        try:
            self.table.delete_item(**kwargs)
        except ClientError as e:
            if _condition_failed(e):
                raise Unauthorized(f"Post {post_id} is no longer owned by the caller")
            raise
        logger.info("Deleted post %s", post_id)


# ---------- Users ----------
class UserStore:
    """Typed wrapper over the user table, keyed by ``email``."""

    def __init__(self, table):
        self.table = table

    @classmethod
    def connect(cls, table_name: str, region: str) -> "UserStore":
        return cls(boto3.resource("dynamodb", region_name=region).Table(table_name))

    def get(self, email: str) -> User | None:
        item = self.table.get_item(Key={"email": email}).get("Item")
        if not item:
            return None
        return User(email=item["email"], password=item["password"])

    def put(self, user: User, overwrite: bool = True) -> None:
        kwargs: dict = {"Item": {"email": user.email, "password": user.password}}
        if not overwrite:
            kwargs["ConditionExpression"] = "attribute_not_exists(email)"
        try:
            self.table.put_item(**kwargs)
        except ClientError as e:
            if _condition_failed(e):
                raise Conflict(f"User {user.email} already exists")
            raise
        logger.info("Stored user record")


# ---------- Images (S3) ----------
class ImageUploader:
    """Stores images under ``images/{owner}/`` and returns their public URL."""

    def __init__(self, s3, bucket: str, region: str, clock=time.time):
        self.s3 = s3
        self.bucket = bucket
        self.region = region
        self.clock = clock

    @classmethod
    def connect(cls, bucket: str, region: str) -> "ImageUploader":
        return cls(boto3.client("s3", region_name=region), bucket, region)

    def public_url(self, owner: str, filename: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/images/{owner}/{filename}"

    def upload(self, image: Image, owner: str) -> str:
        key = int(self.clock() * 1000)
        ext = image.filename.rsplit(".", 1)[1] if "." in image.filename else ""
        filename = f"{key}.{ext}" if ext else str(key)

        logger.info("Uploading image %s to s3://%s/images/%s/", filename, self.bucket, owner)
        self.s3.put_object(
            Bucket=self.bucket,
            Key=f"images/{owner}/{filename}",
            Body=image.content,
            ContentType=image.content_type,
            ACL="public-read",
        )
        return self.public_url(owner, filename)
