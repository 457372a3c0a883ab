import io
from unittest.mock import patch

import pytest
from PIL import Image as PILImage

from product_manager import create_app
from product_manager.extensions import db as _db
from product_manager.models.product import Product


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    yield _db


@pytest.fixture(autouse=True)
def _clean_products(app):
    """Each test starts and ends with an empty products table."""
    yield
    _db.session.rollback()
    Product.query.delete()
    _db.session.commit()


@pytest.fixture
def image_host():
    """Replace the S3 put with a mock; URLs still come from S3_PUBLIC_URL."""
    with patch("product_manager.services.storage_service.upload") as upload, patch(
        "product_manager.services.storage_service.delete"
    ) as delete:
        upload.delete = delete
        yield upload


def _image_bytes(fmt, size=(8, 8)):
    buffer = io.BytesIO()
    PILImage.new("RGB", size, (200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return _image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return _image_bytes("JPEG")


@pytest.fixture
def make_product(db):
    """Insert a product directly into the store."""

    def _make(**overrides):
        fields = {
            "title": "Linen Table Runner",
            "description": "Stone-washed linen.",
            "status": "active",
            "date": "2025-02-03",
            "image": "https://cdn.example.test/products/original.png",
        }
        fields.update(overrides)
        product = Product(**fields)
        db.session.add(product)
        db.session.commit()
        return product

    return _make
