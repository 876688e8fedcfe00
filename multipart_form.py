# multipart_form.py — decode the base64 multipart body of PUT /posts
import base64
import binascii
import logging
from email.message import Message

from requests_toolbelt.multipart.decoder import MultipartDecoder, NonMultipartContentTypeException

from blog_auth import header
from blog_errors import MalformedRequest
from blog_storage import Image

logger = logging.getLogger(__name__)


def _disposition(part) -> tuple[str | None, str | None]:
    """Return ``(name, filename)`` from a part's Content-Disposition, quoted or not."""
    msg = Message()
    msg["Content-Disposition"] = part.headers.get(b"Content-Disposition", b"").decode("utf-8", errors="replace")
    name = msg.get_param("name", header="content-disposition")
    filename = msg.get_param("filename", header="content-disposition")
    if isinstance(name, tuple):
        name = name[2]
    if isinstance(filename, tuple):
        filename = filename[2]
    return name, filename


def parse_form(event: dict) -> dict:
    """
    Return ``{field_name: str | Image}`` for a multipart event body.
    File parts (those with a filename) become Image; the rest are text.
    """
    content_type = header(event.get("headers"), "Content-Type")
    if not content_type:
        raise MalformedRequest("Missing Content-Type header")

    try:
        body = base64.b64decode(event.get("body") or "", validate=True)
    except (binascii.Error, ValueError):
        raise MalformedRequest("Body is not valid base64")

    try:
        decoder = MultipartDecoder(body, content_type)
    except NonMultipartContentTypeException:
        raise MalformedRequest("Body must be multipart/form-data")
    except Exception as e:
        logger.warning("Multipart decode failed: %s", e)
        raise MalformedRequest("Could not decode multipart body")

    form: dict = {}
    for part in decoder.parts:
        name, filename = _disposition(part)
        if not name:
            continue
        if filename is not None:
            ctype = part.headers.get(b"Content-Type", b"application/octet-stream").decode("utf-8")
            form[name] = Image(filename=filename, content=part.content, content_type=ctype)
            continue
        try:
            form[name] = part.content.decode("utf-8")
        except UnicodeDecodeError:
            raise MalformedRequest(f"Field {name} is not valid UTF-8")
    logger.debug("Parsed form fields: %s", sorted(form))
    return form
