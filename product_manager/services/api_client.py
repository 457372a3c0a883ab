"""HTTP client the UI uses to talk to the product API."""
import logging
import httpx
from flask import current_app

logger = logging.getLogger(__name__)

API_PREFIX = "/api/Products"
GENERIC_FAILURE = "Something went wrong"
TRANSPORT_FAILURE = "Server error"


class ApiError(Exception):
    """A failed envelope or a transport failure, ready to show the user."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProductApiClient:
    def __init__(self, base_url, transport=None, timeout=10.0):
        self._client = httpx.Client(
            base_url=base_url, transport=transport, timeout=timeout
        )

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method, path, **kwargs):
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Product API %s %s failed: %s", method, path, e)
            raise ApiError(TRANSPORT_FAILURE) from e

        try:
            data = resp.json()
        except ValueError:
            raise ApiError(TRANSPORT_FAILURE, resp.status_code)

        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("message") if isinstance(data, dict) else None
            raise ApiError(message or GENERIC_FAILURE, resp.status_code)
        return data

    def list_products(self):
        return self._request("GET", API_PREFIX)["products"]

    def get_product(self, product_id):
        return self._request("GET", f"{API_PREFIX}/{product_id}")["product"]

    def create_product(self, fields, image=None):
        return self._request(
            "POST", API_PREFIX, data=fields, files=_files(image)
        )["product"]

    def update_product(self, product_id, fields, image=None):
        return self._request(
            "PUT", f"{API_PREFIX}/{product_id}", data=fields, files=_files(image)
        )["product"]

    def delete_product(self, product_id):
        return self._request("DELETE", f"{API_PREFIX}/{product_id}")["product"]


def _files(image):
    """Multipart file part from a werkzeug FileStorage, if one was chosen."""
    if image is None or not image.filename:
        return None
    return {"image": (image.filename, image.read(), image.mimetype)}


def get_api_client():
    """Client for the configured API, or for this app in-process."""
    base_url = current_app.config["PRODUCT_API_URL"]
    timeout = current_app.config["API_TIMEOUT"]
    if base_url:
        return ProductApiClient(base_url, timeout=timeout)
    transport = httpx.WSGITransport(app=current_app._get_current_object())
    return ProductApiClient("http://localhost", transport=transport, timeout=timeout)
