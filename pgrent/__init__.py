# pgrent/__init__.py
from __future__ import annotations

import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from .config import Config
from .errors import register_error_handlers
from .extensions import db, jwt


def _get_allowed_origins(app: Flask) -> list[str]:
    """Allowed CORS origins from config; local dev servers are always allowed."""
    default = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    extra = app.config.get("CORS_ALLOWED_ORIGINS", "")
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(default + extra_list))


def _configure_logging(app: Flask) -> None:
    """JSON logs to stdout."""
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    """Enable CORS for API routes."""
    CORS(
        app,
        resources={r"/api/*": {"origins": _get_allowed_origins(app)}},
        supports_credentials=True,
        methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "X-Requested-With",
            "X-PG-Location-Id",
        ],
        expose_headers=["Content-Type"],
        max_age=86400,
    )


def _register_blueprints(app: Flask) -> None:
    from .routes import current_bills, pending_payments

    prefix = app.config.get("API_PREFIX", "/api/v1")
    for module in (pending_payments, current_bills):
        app.register_blueprint(module.bp, url_prefix=prefix)
        app.logger.info("Registered blueprint %s at %s", module.bp.name, prefix)

    @app.get(f"{prefix}/health")
    def health():
        return jsonify(status="ok")


def create_app(config_object: Optional[object] = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)

    if not app.config.get("SECRET_KEY") and not app.config.get("TESTING"):
        raise ValueError("SECRET_KEY environment variable must be set")
    if not app.config.get("JWT_SECRET_KEY"):
        app.config["JWT_SECRET_KEY"] = app.config["SECRET_KEY"]
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        os.makedirs(app.instance_path, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(app.instance_path, "pgrent.db")

    _configure_logging(app)
    _configure_cors(app)

    db.init_app(app)
    jwt.init_app(app)

    from .notifications.service import LogNotificationSender

    app.extensions.setdefault("notification_sender", LogNotificationSender())

    _register_blueprints(app)
    register_error_handlers(app)

    from .cli import register_commands

    register_commands(app)

    return app
