"""Shared ("current") bills: room splits, individual bills and their lifecycle.

A tenant has at most one live bill per calendar month. A room split is
all-or-nothing: the month check for every occupant and every insert run in
one transaction, and any conflict or failure rolls the whole set back.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..errors import ConflictError, NotFoundError, PreconditionFailedError, ValidationError
from ..extensions import db
from ..models import CurrentBill, Room, Tenant, TenantStatus
from .money import MAX_AMOUNT, ZERO, format_money, split_amount, sum_money, to_money
from .schedule import month_anchor, next_month

logger = logging.getLogger(__name__)


@dataclass
class BillCreation:
    bills: List[CurrentBill] = field(default_factory=list)
    bill_date: Optional[date] = None
    split: bool = False
    total_bill_amount: object = None
    bill_per_tenant: object = None

    @property
    def tenant_count(self):
        return len(self.bills)

    def serialize(self):
        if not self.split:
            return self.bills[0].serialize()
        return {
            "bills": [bill.serialize() for bill in self.bills],
            "total_bill_amount": format_money(self.total_bill_amount),
            "bill_per_tenant": format_money(self.bill_per_tenant),
            "tenant_count": self.tenant_count,
            "bill_date": self.bill_date.isoformat(),
        }


def parse_date(value, field_name):
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format")


def _parse_id(value, field_name):
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def _positive_amount(value, field_name="bill_amount"):
    if value is None:
        raise ValidationError(f"{field_name} is required")
    amount = to_money(value, field_name)
    if amount <= ZERO:
        raise ValidationError("Bill amount must be greater than 0")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Bill amount must not exceed {MAX_AMOUNT}")
    return amount


def _month_range(bill_date):
    start = month_anchor(bill_date)
    return start, next_month(start)


def _bill_in_month_query(tenant_id, bill_date):
    start, end = _month_range(bill_date)
    return CurrentBill.query.filter(
        CurrentBill.tenant_id == tenant_id,
        CurrentBill.is_deleted.is_(False),
        CurrentBill.bill_date >= start,
        CurrentBill.bill_date < end,
    )


def bill_exists_for_month(tenant_id, bill_date, exclude_id=None):
    query = _bill_in_month_query(tenant_id, bill_date)
    if exclude_id is not None:
        query = query.filter(CurrentBill.id != exclude_id)
    return db.session.query(query.exists()).scalar()


def _month_label(bill_date):
    return bill_date.strftime("%B %Y")


def create_current_bill(payload, pg_id, today=None):
    """Create a room split or an individual bill from a request payload.

    Exactly one mode must be selected: ``room_id`` with ``split_equally``
    true, or ``tenant_id`` alone.
    """
    room_id = _parse_id(payload.get("room_id"), "room_id")
    tenant_id = _parse_id(payload.get("tenant_id"), "tenant_id")
    split_equally = payload.get("split_equally") is True

    if split_equally and room_id is not None and tenant_id is None:
        mode = "room"
    elif tenant_id is not None and room_id is None and not split_equally:
        mode = "individual"
    else:
        raise ValidationError(
            "Invalid parameters. Either provide room_id with split_equally=true for room bill, "
            "or tenant_id for individual bill"
        )

    amount = _positive_amount(payload.get("bill_amount"))
    if payload.get("bill_date"):
        bill_date = parse_date(payload["bill_date"], "bill_date")
    else:
        bill_date = today or date.today()
    if pg_id is None:
        raise ValidationError("pg_id is required")
    remarks = payload.get("remarks")

    if mode == "room":
        return create_room_bill(room_id, pg_id, amount, bill_date, remarks)
    return create_individual_bill(tenant_id, pg_id, amount, bill_date, remarks)


def create_room_bill(room_id, pg_id, total_amount, bill_date, remarks=None):
    """Split ``total_amount`` equally across the room's active occupants."""
    try:
        room = (
            Room.query.filter(Room.id == room_id, Room.pg_id == pg_id, Room.is_deleted.is_(False))
            .with_for_update()
            .first()
        )
        if room is None:
            raise NotFoundError(f"Room with ID {room_id} not found")

        tenants = (
            Tenant.query.filter(
                Tenant.room_id == room_id,
                Tenant.pg_id == pg_id,
                Tenant.status == TenantStatus.ACTIVE,
                Tenant.is_deleted.is_(False),
            )
            .order_by(Tenant.id)
            .with_for_update()
            .all()
        )
        if not tenants:
            raise PreconditionFailedError(f"No active tenants found in room {room_id}")

        for tenant in tenants:
            if bill_exists_for_month(tenant.id, bill_date):
                raise ConflictError(
                    f"Room already has a bill for {_month_label(bill_date)}. "
                    f"Tenant {tenant.name} already has a bill for this month."
                )

        share = split_amount(total_amount, len(tenants))
        bills = [
            CurrentBill(
                tenant_id=tenant.id,
                pg_id=pg_id,
                bill_amount=share,
                bill_date=bill_date,
                remarks=remarks,
            )
            for tenant in tenants
        ]
        db.session.add_all(bills)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Split bill of %s across %d tenant(s) of room %s for %s",
        total_amount, len(bills), room_id, _month_label(bill_date),
    )
    return BillCreation(
        bills=bills,
        bill_date=bill_date,
        split=True,
        total_bill_amount=total_amount,
        bill_per_tenant=share,
    )


def create_individual_bill(tenant_id, pg_id, amount, bill_date, remarks=None):
    try:
        tenant = (
            Tenant.query.filter(
                Tenant.id == tenant_id, Tenant.pg_id == pg_id, Tenant.is_deleted.is_(False)
            )
            .with_for_update()
            .first()
        )
        if tenant is None:
            raise NotFoundError(f"Tenant with ID {tenant_id} not found")
        if bill_exists_for_month(tenant.id, bill_date):
            raise ConflictError(f"{tenant.name} already has a bill for {_month_label(bill_date)}")

        bill = CurrentBill(
            tenant_id=tenant.id,
            pg_id=pg_id,
            bill_amount=amount,
            bill_date=bill_date,
            remarks=remarks,
        )
        db.session.add(bill)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return BillCreation(bills=[bill], bill_date=bill_date)


def _live_bill(bill_id, pg_id=None):
    query = CurrentBill.query.filter(CurrentBill.id == bill_id, CurrentBill.is_deleted.is_(False))
    if pg_id is not None:
        query = query.filter(CurrentBill.pg_id == pg_id)
    bill = query.first()
    if bill is None:
        raise NotFoundError(f"Current bill with ID {bill_id} not found")
    return bill


def get_bill(bill_id, pg_id=None):
    return _live_bill(bill_id, pg_id)


def _month_number(month):
    if isinstance(month, int) or str(month).isdigit():
        number = int(month)
    else:
        try:
            number = datetime.strptime(str(month).strip().capitalize(), "%B").month
        except ValueError:
            raise ValidationError(f"Unknown month: {month}")
    if not 1 <= number <= 12:
        raise ValidationError(f"Unknown month: {month}")
    return number


def list_bills(pg_id, tenant_id=None, room_id=None, month=None, year=None,
               start_date=None, end_date=None, page=1, limit=10):
    """Live bills of a location with optional filters, newest bill date first."""
    page = max(1, int(page))
    limit = max(1, min(int(limit), 200))

    query = CurrentBill.query.filter(CurrentBill.pg_id == pg_id, CurrentBill.is_deleted.is_(False))
    if tenant_id:
        query = query.filter(CurrentBill.tenant_id == tenant_id)
    if room_id:
        query = query.join(Tenant, CurrentBill.tenant_id == Tenant.id).filter(Tenant.room_id == room_id)

    if month and year:
        start = date(int(year), _month_number(month), 1)
        query = query.filter(CurrentBill.bill_date >= start, CurrentBill.bill_date < next_month(start))
    elif start_date and end_date:
        query = query.filter(
            CurrentBill.bill_date >= parse_date(start_date, "start_date"),
            CurrentBill.bill_date <= parse_date(end_date, "end_date"),
        )

    total = query.count()
    bills = (
        query.order_by(CurrentBill.bill_date.desc(), CurrentBill.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
        .all()
    )
    pagination = {
        "total": total,
        "page": page,
        "limit": limit,
        "pages": (total + limit - 1) // limit,
    }
    return bills, pagination


def bills_for_month(pg_id, month, year, tenant_id=None):
    start = date(int(year), _month_number(month), 1)
    query = CurrentBill.query.filter(
        CurrentBill.pg_id == pg_id,
        CurrentBill.is_deleted.is_(False),
        CurrentBill.bill_date >= start,
        CurrentBill.bill_date < next_month(start),
    )
    if tenant_id:
        query = query.filter(CurrentBill.tenant_id == tenant_id)
    bills = query.order_by(CurrentBill.created_at.desc(), CurrentBill.id.desc()).all()
    summary = {
        "month": start.month,
        "year": start.year,
        "total_bills": len(bills),
        "total_amount": format_money(sum_money(b.bill_amount for b in bills)),
    }
    return bills, summary


def update_bill(bill_id, data, pg_id=None):
    try:
        bill = _live_bill(bill_id, pg_id)
        if "bill_amount" in data:
            bill.bill_amount = _positive_amount(data["bill_amount"])
        if data.get("bill_date"):
            new_date = parse_date(data["bill_date"], "bill_date")
            if bill_exists_for_month(bill.tenant_id, new_date, exclude_id=bill.id):
                raise ConflictError(f"Tenant already has a bill for {_month_label(new_date)}")
            bill.bill_date = new_date
        if "remarks" in data:
            bill.remarks = data["remarks"]
        bill.updated_at = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return bill


def delete_bill(bill_id, pg_id=None):
    """Soft delete; the row stays in the table with ``is_deleted`` set."""
    try:
        bill = _live_bill(bill_id, pg_id)
        bill.is_deleted = True
        bill.updated_at = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return bill
