"""Error types raised by services and translated at the API boundary."""


class CatalogError(Exception):
    """Base error. Carries the HTTP status and a caller-safe message."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Missing or malformed input, including rejected uploads."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(CatalogError):
    status_code = 404
    default_message = "Product not found"


class UpstreamError(CatalogError):
    """The image host refused or failed an upload."""

    status_code = 500
    default_message = "Image upload failed"


class ServerError(CatalogError):
    status_code = 500
    default_message = "Server error"
