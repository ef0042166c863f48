"""Application factory for Storefront."""
from __future__ import annotations

from flask import Flask, redirect, url_for

from .config import Config
from .extensions import db
from .logging_service import log_manager
from .shop.catalog import load_catalog


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application.

    Raises :class:`~storefront.shop.catalog.CatalogError` when the configured
    catalog cannot be loaded.
    """
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config.from_object(config_class)

    app.extensions["catalog"] = load_catalog(app.config.get("CATALOG_PATH"))

    db.init_app(app)
    log_manager.init_app(app)

    with app.app_context():
        db.create_all()

    from .shop import bp as shop_bp
    from .logging import bp as logging_bp

    app.register_blueprint(shop_bp, url_prefix="/shop")
    app.register_blueprint(logging_bp, url_prefix="/logs")

    for component in ("Shop", "Logging"):
        log_manager.register_component(component)

    @app.route("/")
    def home():
        """Send visitors straight to the shop catalog."""
        return redirect(url_for("shop.catalog"))

    @app.context_processor
    def inject_globals() -> dict[str, object]:
        """Inject shared template variables."""
        return {
            "environment": app.config.get("ENVIRONMENT", "development"),
            "log_levels": log_manager.available_levels,
            "log_components": log_manager.available_components,
        }

    return app
