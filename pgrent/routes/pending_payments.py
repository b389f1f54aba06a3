from datetime import date

from flask import Blueprint, g, jsonify, request
from flask_jwt_extended import jwt_required

from ..billing import aggregator
from ..billing.bill_splitter import parse_date
from ..security import require_location

bp = Blueprint("pending_payments", __name__)


def _as_of():
    """Reference date from ``?as_of=YYYY-MM-DD``, today when absent."""
    raw = request.args.get("as_of")
    return parse_date(raw, "as_of") if raw else date.today()


@bp.get("/tenants/pending-payments")
@jwt_required()
@require_location
def list_pending_payments():
    report = aggregator.pending_report(g.pg_id, now=_as_of())
    payload = report.serialize()
    return jsonify({
        "success": True,
        "data": payload["data"],
        "summary": payload["summary"],
        "status_counts": payload["status_counts"],
        "skipped_tenants": payload["skipped_tenants"],
        "as_of": payload["as_of"],
    })


@bp.get("/tenants/pending-payments/<int:tenant_id>")
@jwt_required()
@require_location
def get_tenant_pending_payment(tenant_id):
    view = aggregator.tenant_pending_view(tenant_id, pg_id=g.pg_id, now=_as_of())
    return jsonify({"success": True, "data": view.serialize()})


@bp.get("/tenants/pending-payments/due-tomorrow/list")
@jwt_required()
@require_location
def list_due_tomorrow():
    due = aggregator.tenants_due_in(1, pg_id=g.pg_id, now=_as_of())
    return jsonify({"success": True, "data": due, "count": len(due)})
