"""Application factory for the memory album service."""

from __future__ import annotations

import logging

from flask import Flask

from .config import get_config
from .extensions import db, migrate
from .routes import api_bp


def create_app(config_name: str | None = None) -> Flask:
    """Build and configure the Flask application instance."""
    app = Flask(__name__)
    config_obj = get_config(config_name)
    app.config.from_object(config_obj)

    configure_logging(app)
    register_extensions(app)
    register_blueprints(app)

    return app


def configure_logging(app: Flask) -> None:
    """Apply the configured level to the application logger."""
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if isinstance(level, int):
        app.logger.setLevel(level)


def register_extensions(app: Flask) -> None:
    """Initialize application extensions."""
    db.init_app(app)
    migrate.init_app(app, db)


def register_blueprints(app: Flask) -> None:
    """Register application blueprints."""
    app.register_blueprint(api_bp)
