from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def ok(status: int = 200, **data):
    return jsonify({"success": True, **data}), status


def error_body(kind: str, message: str) -> dict:
    return {"success": False, "error": kind, "message": message}


def register_error_handlers(app: Flask) -> None:
    """Render every failure as the JSON error envelope."""

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("%s: %s", type(e).__name__, e)
        return jsonify(error_body(e.kind, str(e))), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        kind = (e.name or "error").lower().replace(" ", "_")
        return jsonify(error_body(kind, e.description or e.name)), e.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        message = str(e) if app.config.get("DEBUG") else "Internal server error"
        return jsonify(error_body("internal_error", message)), 500
