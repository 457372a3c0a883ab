from product_manager.models.product import Product  # noqa: F401
