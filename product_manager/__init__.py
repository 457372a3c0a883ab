import os
from flask import Flask
from dotenv import load_dotenv

load_dotenv()


def create_app(config_name=None):
    from product_manager.services.upload_service import InMemoryUploadRequest

    flask_app = Flask(__name__)
    flask_app.request_class = InMemoryUploadRequest

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV")
        if not config_name:
            # Default to production on managed platforms to avoid accidental
            # debug mode/weak defaults when env selection is omitted.
            if os.environ.get("PORT"):
                config_name = "production"
            else:
                config_name = "development"

    from product_manager.config import config_map

    config_cls = config_map.get(config_name, config_map["development"])
    flask_app.config.from_object(config_cls)

    if hasattr(config_cls, "init_app"):
        config_cls.init_app(flask_app)

    # Initialize extensions
    from product_manager.extensions import db, migrate, init_cors

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    init_cors(flask_app)

    # Import models so Alembic sees them
    from product_manager.models import Product  # noqa: F401

    # Register blueprints
    from product_manager.blueprints.api import api_bp
    from product_manager.blueprints.dashboard import dashboard_bp

    flask_app.register_blueprint(api_bp, url_prefix="/api")
    flask_app.register_blueprint(dashboard_bp)

    # Register CLI commands
    from product_manager.cli import register_cli

    register_cli(flask_app)

    # Serve static files efficiently in production with WhiteNoise
    if not flask_app.debug and not flask_app.testing:
        from whitenoise import WhiteNoise

        flask_app.wsgi_app = WhiteNoise(
            flask_app.wsgi_app,
            root=os.path.join(flask_app.static_folder),
            prefix="static/",
            max_age=31536000,  # 1 year cache for hashed assets
        )

    # Health check
    @flask_app.route("/health")
    def health():
        checks = {"status": "ok"}
        try:
            db.session.execute(db.text("SELECT 1"))
            checks["db"] = "ok"
        except Exception:
            flask_app.logger.exception("Health check DB probe failed")
            checks["db"] = "error"
            checks["status"] = "degraded"
        status_code = 200 if checks["status"] == "ok" else 503
        return checks, status_code

    return flask_app
