import logging
import re
from datetime import date, datetime, timezone

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from product_manager.errors import NotFoundError, ServerError, ValidationError
from product_manager.extensions import db
from product_manager.models.product import Product
from product_manager.services import storage_service

logger = logging.getLogger(__name__)

FIELDS = ("title", "description", "status", "date")

# A bare day, optionally followed by a T/space separated time part
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}(?:[T ].+)?")


def clean_fields(form, partial=False):
    """Validate scalar product fields from a submitted form.

    With ``partial`` set, absent fields are skipped; fields that are present
    must still be valid. Returns a dict of the accepted values.
    """
    values = {}
    for name in FIELDS:
        raw = form.get(name)
        if raw is None:
            if partial:
                continue
            raise ValidationError(f"{name.capitalize()} is required")

        value = raw.strip()
        if not value:
            raise ValidationError(f"{name.capitalize()} is required")
        values[name] = value

    status = values.get("status")
    if status is not None and status not in Product.VALID_STATUSES:
        raise ValidationError("Status must be 'active' or 'inactive'")

    if "date" in values:
        values["date"] = _normalize_date(values["date"])

    return values


def _normalize_date(value):
    """Accept YYYY-MM-DD, or a full ISO timestamp, and store YYYY-MM-DD."""
    error = ValidationError("Date must be a valid YYYY-MM-DD date")
    if not DATE_RE.fullmatch(value):
        raise error
    try:
        if len(value) == 10:
            return date.fromisoformat(value).isoformat()
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value).date().isoformat()
    except ValueError as e:
        raise error from e


def list_products():
    """All products, oldest first. An empty catalog is reported as an error."""
    products = Product.query.order_by(Product.created_at.asc()).all()
    if not products:
        raise ValidationError("no products found")
    return products


def get_product(product_id):
    product = db.session.get(Product, product_id)
    if not product:
        raise NotFoundError()
    return product


def create_product(form, uploaded):
    """Upload the image, then persist a new product pointing at it."""
    if uploaded is None:
        raise ValidationError("Image is required")
    values = clean_fields(form)

    storage_key, image_url = storage_service.upload_product_image(uploaded)

    product = Product(image=image_url, **values)
    db.session.add(product)
    _commit_or_discard(storage_key)

    logger.info("Created product %s", product.id)
    return product


def update_product(product_id, form, uploaded=None):
    """Merge submitted fields into an existing product.

    Absent fields keep their stored value. A new image replaces the URL;
    the previous remote object is left on the host.
    """
    product = get_product(product_id)
    values = clean_fields(form, partial=True)

    storage_key = None
    if uploaded is not None:
        storage_key, product.image = storage_service.upload_product_image(uploaded)

    for name, value in values.items():
        setattr(product, name, value)
    product.updated_at = datetime.now(timezone.utc)
    _commit_or_discard(storage_key)

    changed = list(values) + (["image"] if storage_key else [])
    logger.info("Updated product %s (%s)", product.id, ", ".join(changed) or "no changes")
    return product


def delete_product(product_id):
    """Remove a product and return a snapshot of what was deleted.

    Lookup and removal are a single DELETE ... RETURNING statement, so a row
    removed by another writer in the meantime is reported as not found.
    """
    stmt = (
        delete(Product)
        .where(Product.id == product_id)
        .returning(*Product.__table__.c)
    )
    try:
        row = db.session.execute(stmt).mappings().first()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Store delete failed")
        raise ServerError() from e

    if row is None:
        raise NotFoundError()
    _commit_or_discard(None)

    logger.info("Deleted product %s", product_id)
    return Product(**row).to_dict()


def get_stats():
    """Product counts by status."""
    rows = (
        db.session.query(Product.status, db.func.count(Product.id))
        .group_by(Product.status)
        .all()
    )
    return dict(rows)


def _commit_or_discard(storage_key):
    """Commit the session; on failure roll back and drop a fresh upload."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Store write failed")
        if storage_key:
            storage_service.discard(storage_key)
        raise ServerError() from e
