from flask import Blueprint

dashboard_bp = Blueprint("dashboard", __name__)

from product_manager.blueprints.dashboard import views  # noqa: F401, E402
