"""Flask application factory."""

import logging

import structlog
from flask import Flask, jsonify
from flask_migrate import Migrate
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from cadence import __version__
from cadence.config import Settings, get_settings
from cadence.exceptions import CadenceError
from cadence.models import db

logger = structlog.get_logger()

migrate = Migrate()


def configure_logging(json_logs: bool = False, debug: bool = False) -> None:
    """Configure structlog once for the process."""
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        cache_logger_on_first_use=True,
    )


def _database_config(settings: Settings) -> dict:
    engine_options = {}
    if not settings.database_url.startswith("sqlite"):
        engine_options["pool_pre_ping"] = True

    return {
        "SQLALCHEMY_DATABASE_URI": settings.database_url,
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "SQLALCHEMY_ENGINE_OPTIONS": engine_options,
    }


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CadenceError)
    def handle_cadence_error(error: CadenceError):
        return jsonify(error.to_dict()), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description}), error.code


def create_app(config_override: dict | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_override: Optional config values for testing

    Returns:
        Configured Flask application
    """
    settings = get_settings()
    configure_logging(json_logs=settings.log_json, debug=settings.debug)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.config.update(_database_config(settings))

    if config_override:
        app.config.update(config_override)

    db.init_app(app)
    migrate.init_app(app, db)

    from cadence.api import api_bp
    app.register_blueprint(api_bp, url_prefix=settings.api_prefix)
    _register_error_handlers(app)

    @app.get("/health")
    def health_check():
        """Liveness plus a database round trip."""
        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("health_database_unreachable", error_type=type(e).__name__)
            return {"status": "degraded", "database": "unreachable", "version": __version__}, 503

        return {"status": "healthy", "database": "ok", "version": __version__}

    logger.debug("app_created", env=settings.app_env, api_prefix=settings.api_prefix)
    return app
