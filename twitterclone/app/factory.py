from __future__ import annotations

import logging
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from twitterclone.app.config import Config, check_secrets, get_config
from twitterclone.app.extensions import db, migrate, cors
from twitterclone.app.common.auth import TokenService
from twitterclone.app.common.errors import ApiError, StorageError
from twitterclone.app.common.request_context import init_request_id, current_request_id, REQUEST_ID_HEADER
from twitterclone.app.store.sql import SqlStore
from twitterclone.app.api.register import register_api_blueprints
from twitterclone.app.cli import cli_bp


def create_app(config_object: type[Config] | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or get_config())
    check_secrets(app.config)

    logging.basicConfig(
        level=getattr(logging, app.config["LOG_LEVEL"], logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    # Chosen once here; handlers never look at the environment mode.
    app.extensions["store"] = SqlStore(db)
    app.extensions["token_service"] = TokenService(
        app.config["JWT_SECRET"],
        expires_in=app.config["JWT_EXPIRES_SECONDS"],
        algorithm=app.config["JWT_ALGORITHM"],
    )

    # Request id
    @app.before_request
    def _before_request():
        init_request_id()

    @app.after_request
    def _after_request(resp):
        rid = current_request_id()
        if rid:
            resp.headers[REQUEST_ID_HEADER] = rid
        return resp

    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    register_api_blueprints(app)

    # CLI (flask init-db, flask seed)
    app.register_blueprint(cli_bp)

    # Error handlers
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if isinstance(err, StorageError):
            app.logger.error("Storage failure during %s", err.operation)
        return jsonify(err.to_dict(current_request_id())), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        # Normalize Werkzeug errors into our JSON shape
        payload = {
            "error": {
                "code": "http_error",
                "message": err.description,
                "details": {"name": err.name},
                "request_id": current_request_id(),
            }
        }
        return jsonify(payload), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        db.session.rollback()
        payload = {
            "error": {
                "code": "internal_error",
                "message": "Internal server error",
                "details": {},
                "request_id": current_request_id(),
            }
        }
        return jsonify(payload), 500

    return app
