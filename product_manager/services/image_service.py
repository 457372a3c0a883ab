import io
from PIL import Image as PILImage


# Pillow format name per accepted content type
FORMATS = {"image/jpeg": "JPEG", "image/png": "PNG"}


def detect_format(image_bytes):
    """Return the Pillow format name of the image, or None if it isn't one."""
    try:
        img = PILImage.open(io.BytesIO(image_bytes))
        img.verify()  # verify it's a real image
    except Exception:
        return None
    return img.format


def matches_content_type(image_bytes, content_type):
    """True when the bytes decode as the format the content type declares.

    Bytes are never re-encoded; the upload goes to the host as received.
    """
    expected = FORMATS.get(content_type)
    return expected is not None and detect_format(image_bytes) == expected
