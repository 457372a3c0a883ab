"""JSON API over the product collection.

Every response is an envelope ``{success, message?, product?, products?}``.
Errors raised by the services are translated here; nothing internal is
ever returned to the caller.
"""
import logging
from flask import current_app, g, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from product_manager.blueprints.api import api_bp
from product_manager.errors import CatalogError, ServerError, ValidationError
from product_manager.services import product_service
from product_manager.services.upload_service import image_upload, too_large_message

logger = logging.getLogger(__name__)


def envelope(status_code=200, message=None, **payload):
    body = {"success": 200 <= status_code < 300}
    if message:
        body["message"] = message
    body.update(payload)
    return body, status_code


@api_bp.route("/Products", methods=["GET"])
def list_products():
    products = product_service.list_products()
    return envelope(products=[p.to_dict() for p in products])


@api_bp.route("/Products/<product_id>", methods=["GET"])
def get_product(product_id):
    product = product_service.get_product(product_id)
    return envelope(product=product.to_dict())


@api_bp.route("/Products", methods=["POST"])
@image_upload()
def create_product():
    product = product_service.create_product(request.form, g.image_upload)
    return envelope(201, product=product.to_dict())


@api_bp.route("/Products/<product_id>", methods=["PUT"])
@image_upload()
def update_product(product_id):
    product = product_service.update_product(product_id, request.form, g.image_upload)
    return envelope(product=product.to_dict())


@api_bp.route("/Products/<product_id>", methods=["DELETE"])
def delete_product(product_id):
    snapshot = product_service.delete_product(product_id)
    return envelope(message="Product deleted successfully", product=snapshot)


@api_bp.errorhandler(CatalogError)
def handle_catalog_error(e):
    return envelope(e.status_code, message=e.message)


@api_bp.errorhandler(RequestEntityTooLarge)
def handle_too_large(e):
    message = too_large_message(current_app.config["UPLOAD_MAX_BYTES"])
    return handle_catalog_error(ValidationError(message))


@api_bp.app_errorhandler(HTTPException)
def handle_routing_error(e):
    """404/405 from URL matching happen before any blueprint is selected."""
    if not request.path.startswith("/api/"):
        return e
    body, status_code = envelope(e.code, message=e.name)
    headers = {}
    if getattr(e, "valid_methods", None):
        headers["Allow"] = ", ".join(e.valid_methods)
    return body, status_code, headers


@api_bp.errorhandler(Exception)
def handle_unexpected(e):
    if isinstance(e, HTTPException):
        return envelope(e.code, message=e.name)
    logger.exception("Unhandled error in %s %s", request.method, request.path)
    return handle_catalog_error(ServerError())
