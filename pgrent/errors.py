# pgrent/errors.py
from flask import jsonify


class PgRentError(Exception):
    """Base exception for billing and reconciliation errors."""

    status_code = 500
    error = "server_error"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(PgRentError):
    """Malformed or contradictory input, rejected before touching the store."""

    status_code = 400
    error = "validation_error"


class NotFoundError(PgRentError):
    """Referenced tenant, room or bill does not exist or is soft-deleted."""

    status_code = 404
    error = "not_found"


class ConflictError(PgRentError):
    """A bill already exists for the tenant in the requested month."""

    status_code = 409
    error = "conflict"


class PreconditionFailedError(PgRentError):
    """The request is well formed but the data cannot satisfy it."""

    status_code = 422
    error = "precondition_failed"


def register_error_handlers(app):
    @app.errorhandler(PgRentError)
    def pg_rent_error(e):
        return jsonify(error=e.error, message=e.message), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        msg = getattr(e, "description", "Bad Request")
        return jsonify(error="bad_request", message=msg), 400

    @app.errorhandler(401)
    def unauthorized(e): return jsonify(error="unauthorized"), 401

    @app.errorhandler(403)
    def forbidden(e): return jsonify(error="forbidden"), 403

    @app.errorhandler(404)
    def not_found(e): return jsonify(error="not_found"), 404

    @app.errorhandler(405)
    def method_not_allowed(e): return jsonify(error="method_not_allowed"), 405

    @app.errorhandler(422)
    def unprocessable(e): return jsonify(error="unprocessable"), 422

    @app.errorhandler(500)
    def server_error(e):
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify(error="server_error"), 500
