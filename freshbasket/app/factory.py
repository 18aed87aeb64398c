from __future__ import annotations

import locale
import logging
from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from freshbasket.app.config import Config
from freshbasket.app.extensions import db, migrate, cors
from freshbasket.app.common.errors import ApiError, error_payload
from freshbasket.app.common.request_context import current_request_id, init_request_id, mirror_request_id
from freshbasket.app.api.register import register_api_blueprints
from freshbasket.app.cli import cli_bp
from freshbasket.app.ui import ui_bp
from freshbasket.catalog.fetchers import EXTENSION_KEY, build_fetcher


def _set_collation(name: str) -> None:
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error:
        logging.getLogger(__name__).warning("Unsupported collation locale %r; names sort by code point", name)


def _wants_json() -> bool:
    return request.path.startswith("/api")


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    _set_collation(app.config.get("COLLATION_LOCALE", ""))

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}})

    app.extensions[EXTENSION_KEY] = build_fetcher(app.config)

    @app.template_filter("money")
    def money(value) -> str:
        return f"${value:.2f}"

    @app.context_processor
    def inject_nav():
        return {
            "nav_items": [
                {"name": "Home", "endpoint": "ui.home"},
                {"name": "Products", "endpoint": "ui.products_page"},
                {"name": "About", "endpoint": "ui.about_page"},
            ],
        }

    # Request id
    @app.before_request
    def _before_request():
        init_request_id()

    @app.after_request
    def _after_request(response):
        return mirror_request_id(response)

    # Health endpoint
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    register_api_blueprints(app)
    app.register_blueprint(ui_bp)

    # CLI (flask seed)
    app.register_blueprint(cli_bp)

    # Error handlers
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict(current_request_id())), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        if not _wants_json():
            return render_template("pages/error.html", error=err), status
        # Normalize Werkzeug errors into our JSON shape
        payload = error_payload("http_error", err.description, {"name": err.name}, current_request_id())
        return jsonify(payload), status

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        if not _wants_json():
            return render_template("pages/error.html", error=None), 500
        payload = error_payload("internal_error", "Internal server error", None, current_request_id())
        return jsonify(payload), 500

    return app
