# pgrent/security.py
from functools import wraps

from flask import g, jsonify, request

LOCATION_HEADER = "X-PG-Location-Id"


def require_location(fn):
    """Usage: @require_location; the PG location id ends up in ``g.pg_id``."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        raw = (request.headers.get(LOCATION_HEADER) or "").strip()
        if not raw:
            return jsonify(error="validation_error", message=f"{LOCATION_HEADER} header is required"), 400
        try:
            pg_id = int(raw)
        except ValueError:
            return jsonify(error="validation_error", message=f"{LOCATION_HEADER} must be an integer"), 400
        if pg_id < 1:
            return jsonify(error="validation_error", message=f"{LOCATION_HEADER} must be positive"), 400
        g.pg_id = pg_id
        return fn(*args, **kwargs)
    return wrapper
