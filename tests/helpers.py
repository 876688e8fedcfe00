"""
Builders for API Gateway proxy events used across the test suite.
"""

import base64
import json

from requests_toolbelt import MultipartEncoder


def event(method, resource, body=None, headers=None, path_id=None):
    return {
        "httpMethod": method,
        "resource": resource,
        "pathParameters": {"id": path_id} if path_id else None,
        "headers": headers or {},
        "body": body,
    }


def user_event(action, email, password):
    return event("POST", f"/users/{action}", body=json.dumps({"email": email, "password": password}))


def put_post_event(token=None, **fields):
    """Build a PUT /posts event with a base64 multipart body."""
    encoder = MultipartEncoder(fields={k: v for k, v in fields.items() if v is not None} or {"noop": ""})
    headers = {"Content-Type": encoder.content_type}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    body = base64.b64encode(encoder.to_string()).decode("ascii")
    return event("PUT", "/posts", body=body, headers=headers)


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def raw_put_post_event(parts, token=None, boundary="blogboundary"):
    """
    PUT /posts event from hand-written parts: ``(content_disposition, content_type, payload)``.
    Lets tests send bytes and header forms an encoder would not produce.
    """
    chunks = []
    for disposition, content_type, payload in parts:
        head = f"--{boundary}\r\nContent-Disposition: {disposition}\r\n"
        if content_type:
            head += f"Content-Type: {content_type}\r\n"
        chunks.append(head.encode("utf-8") + b"\r\n" + payload + b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode("utf-8"))

    headers = {"Content-Type": f"multipart/form-data; boundary={boundary}"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    body = base64.b64encode(b"".join(chunks)).decode("ascii")
    return event("PUT", "/posts", body=body, headers=headers)
