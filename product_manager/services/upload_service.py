"""Validation of the single image file a product request may carry.

The ``image_upload`` decorator runs before a view body. It reads the file
part into memory, checks type and size, and leaves the result on
``flask.g.image_upload`` (``None`` when the request had no file). Nothing is
written to disk; the buffer lives as long as the request.
"""
import functools
import io
import logging
from dataclasses import dataclass

from flask import Request, current_app, g, request

from product_manager.errors import ValidationError
from product_manager.services import image_service

logger = logging.getLogger(__name__)

FIELD_NAME = "image"
ALLOWED_EXTENSIONS = {"jpeg", "jpg", "png"}
ALLOWED_MIMETYPES = {
    "image/jpeg": "image/jpeg",
    "image/jpg": "image/jpeg",
    "image/png": "image/png",
}

WRONG_TYPE_MESSAGE = "Only .jpg, .jpeg, and .png files are allowed!"


class InMemoryUploadRequest(Request):
    """Keeps multipart file parts in memory instead of spooling to disk."""

    def _get_file_stream(
        self, total_content_length, content_type, filename=None, content_length=None
    ):
        return io.BytesIO()


@dataclass(frozen=True)
class UploadedImage:
    data: bytes
    filename: str
    mimetype: str  # normalised, image/jpeg or image/png

    @property
    def size(self):
        return len(self.data)


def too_large_message(max_bytes):
    return f"File too large (max {max_bytes // (1024 * 1024)} MB)"


def _extension(filename):
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def validate_file(data, filename, mimetype, max_bytes):
    """Check one file and return it as an UploadedImage.

    Raises:
        ValidationError naming whether the type or the size was wrong
    """
    mimetype = (mimetype or "").lower()
    if _extension(filename) not in ALLOWED_EXTENSIONS or mimetype not in ALLOWED_MIMETYPES:
        raise ValidationError(WRONG_TYPE_MESSAGE)

    if len(data) > max_bytes:
        raise ValidationError(too_large_message(max_bytes))

    mimetype = ALLOWED_MIMETYPES[mimetype]
    if not image_service.matches_content_type(data, mimetype):
        raise ValidationError("Invalid image file")

    return UploadedImage(data=data, filename=filename, mimetype=mimetype)


def read_upload(field=FIELD_NAME):
    """Pull the file part for ``field`` off the current request."""
    files = [f for f in request.files.getlist(field) if f and f.filename]
    if not files:
        return None
    if len(files) > 1:
        raise ValidationError("Only one image may be uploaded")

    max_bytes = current_app.config["UPLOAD_MAX_BYTES"]
    storage = files[0]
    # Read one byte past the limit so oversize files are caught without
    # buffering all of them.
    data = storage.stream.read(max_bytes + 1)
    uploaded = validate_file(data, storage.filename, storage.mimetype, max_bytes)
    logger.debug("Accepted upload %s (%d bytes)", uploaded.filename, uploaded.size)
    return uploaded


def image_upload(field=FIELD_NAME):
    """Decorator: validate the request's image before the view runs."""

    def decorator(view):
        @functools.wraps(view)
        def wrapped(*args, **kwargs):
            g.image_upload = read_upload(field)
            return view(*args, **kwargs)

        return wrapped

    return decorator
