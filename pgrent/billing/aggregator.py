"""Property-wide pending-payment reports.

The full report runs the schedule, matcher and classifier for every active
tenant of a PG location. The due-soon and overdue views are narrower date
filters over the payment records themselves and feed the notification
triggers.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List

from dateutil.relativedelta import relativedelta

from ..errors import NotFoundError, PreconditionFailedError
from ..extensions import db
from ..models import PaymentStatus, RentPayment, Room, Tenant, TenantStatus
from .classifier import OverallStatus, TenantReconciliation, classify_tenant, resolve_rent
from .matcher import latest_record
from .money import ZERO, format_money, sum_money
from .schedule import as_date

logger = logging.getLogger(__name__)


@dataclass
class TenantPendingView:
    tenant: Tenant
    reconciliation: TenantReconciliation

    @property
    def overall_status(self):
        return self.reconciliation.overall_status

    @property
    def total_due(self):
        return self.reconciliation.total_due

    def serialize(self):
        tenant = self.tenant
        data = {
            "tenant_id": tenant.id,
            "tenant_name": tenant.name,
            "room_id": tenant.room_id,
            "room_no": tenant.room.room_no if tenant.room else None,
            "check_in_date": tenant.check_in_date.isoformat() if tenant.check_in_date else None,
        }
        data.update(self.reconciliation.serialize())
        return data


@dataclass
class PendingReport:
    pg_id: int
    as_of: date
    tenants: List[TenantPendingView] = field(default_factory=list)
    status_counts: Dict[str, int] = field(default_factory=dict)
    skipped_tenants: List[int] = field(default_factory=list)

    @property
    def total_due(self):
        return sum((view.total_due for view in self.tenants), ZERO)

    @property
    def summary(self):
        return {
            "total_tenants": len(self.tenants),
            "total_pending_amount": format_money(self.total_due),
            "overdue_tenants": sum(1 for v in self.tenants if v.reconciliation.has_overdue_month),
            "partial_payment_tenants": sum(
                1 for v in self.tenants if v.overall_status == OverallStatus.PARTIAL_PAYMENTS
            ),
        }

    def serialize(self):
        return {
            "pg_id": self.pg_id,
            "as_of": self.as_of.isoformat(),
            "data": [view.serialize() for view in self.tenants],
            "summary": self.summary,
            "status_counts": dict(self.status_counts),
            "skipped_tenants": list(self.skipped_tenants),
        }


def _today(now):
    return as_date(now) if now is not None else date.today()


def reconcile_tenant(tenant, records, now=None):
    rent = tenant.room.rent_price if tenant.room else None
    reconciliation = classify_tenant(tenant.check_in_date, rent, records, now=_today(now))
    return TenantPendingView(tenant=tenant, reconciliation=reconciliation)


def _active_tenants_query(pg_id=None):
    query = (
        Tenant.query.join(Room, Tenant.room_id == Room.id)
        .filter(
            Tenant.status == TenantStatus.ACTIVE,
            Tenant.is_deleted.is_(False),
            Room.is_deleted.is_(False),
        )
    )
    if pg_id is not None:
        query = query.filter(Tenant.pg_id == pg_id)
    return query.order_by(Tenant.id)


def _payments_by_tenant(tenant_ids):
    """Live payment records per tenant, newest payment first."""
    grouped = defaultdict(list)
    if not tenant_ids:
        return grouped
    records = (
        RentPayment.query.filter(
            RentPayment.tenant_id.in_(tenant_ids),
            RentPayment.is_deleted.is_(False),
        )
        .order_by(RentPayment.tenant_id, RentPayment.payment_date.desc(), RentPayment.id.desc())
        .all()
    )
    for record in records:
        grouped[record.tenant_id].append(record)
    return grouped


def _rank_key(view):
    return (-view.total_due, -OverallStatus.rank(view.overall_status), view.tenant.id)


def pending_report(pg_id, now=None):
    """Reconcile every active tenant of ``pg_id`` and rank those with issues."""
    as_of = _today(now)
    tenants = _active_tenants_query(pg_id).all()
    payments = _payments_by_tenant([t.id for t in tenants])

    report = PendingReport(pg_id=pg_id, as_of=as_of)
    report.status_counts = {status: 0 for status in OverallStatus.ORDER}
    for tenant in tenants:
        try:
            view = reconcile_tenant(tenant, payments[tenant.id], now=as_of)
        except PreconditionFailedError as e:
            logger.info("Skipping tenant %s in pending report: %s", tenant.id, e.message)
            report.skipped_tenants.append(tenant.id)
            continue
        report.status_counts[view.overall_status] += 1
        if view.reconciliation.has_issues:
            report.tenants.append(view)

    report.tenants.sort(key=_rank_key)
    return report


def tenant_pending_view(tenant_id, pg_id=None, now=None):
    """Reconciliation view for a single tenant."""
    query = Tenant.query.filter(Tenant.id == tenant_id, Tenant.is_deleted.is_(False))
    if pg_id is not None:
        query = query.filter(Tenant.pg_id == pg_id)
    tenant = query.first()
    if tenant is None:
        raise NotFoundError(f"Tenant with ID {tenant_id} not found")
    if tenant.room is None or tenant.room.is_deleted:
        raise PreconditionFailedError(f"Tenant {tenant_id} has no room to bill rent for")

    records = _payments_by_tenant([tenant.id])[tenant.id]
    if tenant.status != TenantStatus.ACTIVE:
        # Checked-out tenants owe nothing further through this view
        rent = resolve_rent(tenant.room.rent_price)
        reconciliation = TenantReconciliation(monthly_rent=rent, latest_payment=latest_record(records))
        return TenantPendingView(tenant=tenant, reconciliation=reconciliation)
    return reconcile_tenant(tenant, records, now=now)


def _latest_by_tenant(tenants):
    payments = _payments_by_tenant([t.id for t in tenants])
    return {t.id: latest_record(payments[t.id]) for t in tenants}


def tenants_due_in(days, pg_id=None, now=None):
    """Tenants whose next rent falls due exactly ``days`` after ``now``.

    The next due date is the day after the latest record's covered period
    ends; tenants without such a record are not included.
    """
    today = _today(now)
    tenants = _active_tenants_query(pg_id).all()
    latest = _latest_by_tenant(tenants)

    due = []
    for tenant in tenants:
        record = latest[tenant.id]
        if record is None or record.end_date is None:
            continue
        next_due = record.end_date + relativedelta(days=1)
        if (next_due - today).days != days:
            continue
        rent = tenant.room.rent_price if tenant.room else None
        due.append({
            "tenant_id": tenant.id,
            "tenant_name": tenant.name,
            "user_id": tenant.user_id,
            "room_no": tenant.room.room_no if tenant.room else None,
            "last_payment_end_date": record.end_date.isoformat(),
            "next_due_date": next_due.isoformat(),
            "days_remaining": days,
            "monthly_rent": format_money(rent),
        })
    return due


def overdue_tenants(pg_id=None, now=None):
    """Tenants holding PENDING or PARTIAL records whose period already ended."""
    today = _today(now)
    tenants = _active_tenants_query(pg_id).all()
    payments = _payments_by_tenant([t.id for t in tenants])

    overdue = []
    for tenant in tenants:
        late = [
            r for r in payments[tenant.id]
            if r.status in PaymentStatus.OUTSTANDING
            and r.end_date is not None
            and r.end_date < today
            and r.outstanding_amount is not None
        ]
        if not late:
            continue
        amount = sum_money(r.outstanding_amount for r in late)
        if amount <= ZERO:
            continue
        overdue.append({
            "tenant_id": tenant.id,
            "tenant_name": tenant.name,
            "user_id": tenant.user_id,
            "room_no": tenant.room.room_no if tenant.room else None,
            "amount": format_money(amount),
            "overdue_days": max((today - r.end_date).days for r in late),
            "payment_ids": sorted(r.id for r in late),
        })
    return overdue


def location_ids_with_active_tenants():
    rows = (
        db.session.query(Tenant.pg_id)
        .filter(Tenant.status == TenantStatus.ACTIVE, Tenant.is_deleted.is_(False))
        .distinct()
        .order_by(Tenant.pg_id)
        .all()
    )
    return [row[0] for row in rows]
