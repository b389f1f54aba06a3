from flask import Blueprint, g, jsonify, request
from flask_jwt_extended import jwt_required

from ..billing import bill_splitter
from ..errors import ValidationError
from ..security import require_location

bp = Blueprint("current_bills", __name__)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


@bp.post("/current-bills")
@jwt_required()
@require_location
def create_current_bill():
    """Create an individual bill or split one equally across a room."""
    result = bill_splitter.create_current_bill(_json_body(), g.pg_id)
    if result.split:
        message = f"Bill split equally among {result.tenant_count} tenant(s)"
    else:
        message = "Current bill created successfully"
    return jsonify({"success": True, "message": message, "data": result.serialize()}), 201


@bp.get("/current-bills")
@jwt_required()
@require_location
def list_current_bills():
    try:
        page = int(request.args.get("page", 1))
        limit = int(request.args.get("limit", 10))
    except ValueError:
        raise ValidationError("page and limit must be integers")

    bills, pagination = bill_splitter.list_bills(
        g.pg_id,
        tenant_id=request.args.get("tenant_id", type=int),
        room_id=request.args.get("room_id", type=int),
        month=request.args.get("month"),
        year=request.args.get("year", type=int),
        start_date=request.args.get("start_date"),
        end_date=request.args.get("end_date"),
        page=page,
        limit=limit,
    )
    return jsonify({
        "success": True,
        "data": [b.serialize() for b in bills],
        "pagination": pagination,
    })


@bp.get("/current-bills/by-month/<month>/<int:year>")
@jwt_required()
@require_location
def current_bills_by_month(month, year):
    bills, summary = bill_splitter.bills_for_month(
        g.pg_id, month, year, tenant_id=request.args.get("tenant_id", type=int)
    )
    return jsonify({
        "success": True,
        "data": [b.serialize() for b in bills],
        "summary": summary,
    })


@bp.get("/current-bills/<int:bill_id>")
@jwt_required()
@require_location
def get_current_bill(bill_id):
    return jsonify({"success": True, "data": bill_splitter.get_bill(bill_id, pg_id=g.pg_id).serialize()})


@bp.patch("/current-bills/<int:bill_id>")
@jwt_required()
@require_location
def update_current_bill(bill_id):
    bill = bill_splitter.update_bill(bill_id, _json_body(), pg_id=g.pg_id)
    return jsonify({
        "success": True,
        "message": "Current bill updated successfully",
        "data": bill.serialize(),
    })


@bp.delete("/current-bills/<int:bill_id>")
@jwt_required()
@require_location
def delete_current_bill(bill_id):
    bill_splitter.delete_bill(bill_id, pg_id=g.pg_id)
    return jsonify({"success": True, "message": "Current bill deleted successfully"})
