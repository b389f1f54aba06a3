"""Per-month payment state and overall tenant status.

``classify_tenant`` is pure: it receives the tenant's move-in date, the
current room rent, the tenant's rent-payment records and an explicit
reference date, and returns a ``TenantReconciliation``.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from ..errors import PreconditionFailedError
from ..models.rent_payment import PaymentStatus
from .matcher import latest_record, match_payments
from .money import ZERO, format_money, to_money
from .schedule import as_date, billing_months, month_end, month_key


class MonthStatus:
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    PENDING = "PENDING"
    MISSING = "MISSING"


class OverallStatus:
    PAID = "PAID"
    PENDING = "PENDING"
    PARTIAL_PAYMENTS = "PARTIAL_PAYMENTS"
    MISSING_PAYMENTS = "MISSING_PAYMENTS"

    # Lowest to highest precedence
    ORDER = (PAID, PENDING, PARTIAL_PAYMENTS, MISSING_PAYMENTS)

    @classmethod
    def rank(cls, status):
        return cls.ORDER.index(status)


@dataclass
class MonthDue:
    anchor: date
    status: str
    expected_amount: object
    paid_amount: object
    due_amount: object
    is_overdue: bool
    payment_id: Optional[int] = None

    @property
    def month(self):
        return month_key(self.anchor)

    def serialize(self):
        return {
            "month": self.month,
            "anchor": self.anchor.isoformat(),
            "status": self.status,
            "expected_amount": format_money(self.expected_amount),
            "paid_amount": format_money(self.paid_amount),
            "due_amount": format_money(self.due_amount),
            "is_overdue": self.is_overdue,
            "payment_id": self.payment_id,
        }


@dataclass
class TenantReconciliation:
    monthly_rent: object
    overall_status: str = OverallStatus.PAID
    missing_months: List[MonthDue] = field(default_factory=list)
    partial_months: List[MonthDue] = field(default_factory=list)
    latest_payment: object = None
    total_due: object = ZERO
    next_due_date: Optional[date] = None

    @property
    def has_issues(self):
        latest_outstanding = (
            self.latest_payment is not None
            and self.latest_payment.status in PaymentStatus.OUTSTANDING
        )
        return bool(self.missing_months or self.partial_months or latest_outstanding)

    @property
    def has_overdue_month(self):
        return any(m.is_overdue for m in self.missing_months + self.partial_months)

    def serialize(self):
        return {
            "monthly_rent": format_money(self.monthly_rent),
            "overall_status": self.overall_status,
            "total_due": format_money(self.total_due),
            "has_issues": self.has_issues,
            "missing_months": [m.serialize() for m in self.missing_months],
            "partial_months": [m.serialize() for m in self.partial_months],
            "latest_payment": self.latest_payment.serialize() if self.latest_payment else None,
            "next_due_date": self.next_due_date.isoformat() if self.next_due_date else None,
        }


def resolve_rent(rent_price):
    """Current room rent as money; zero or unset cannot be billed."""
    if rent_price is None:
        raise PreconditionFailedError("room rent is not set")
    rent = to_money(rent_price, "rent_price")
    if rent <= ZERO:
        raise PreconditionFailedError("room rent must be greater than 0")
    return rent


def _classify_month(anchor, record, rent, now):
    overdue = month_end(anchor) < now

    if record is None:
        return MonthDue(anchor, MonthStatus.MISSING, rent, ZERO, rent, overdue)

    actual = to_money(record.actual_rent_amount) if record.actual_rent_amount is not None else rent
    if record.status == PaymentStatus.PENDING:
        return MonthDue(anchor, MonthStatus.PENDING, actual, ZERO, actual, overdue, record.id)
    if record.status == PaymentStatus.PARTIAL:
        paid = to_money(record.amount_paid or 0)
        due = max(actual - paid, ZERO)
        return MonthDue(anchor, MonthStatus.PARTIAL, actual, paid, due, overdue, record.id)
    return None


def _overall_status(missing, partial, latest):
    candidates = [OverallStatus.PAID]
    if missing:
        candidates.append(OverallStatus.MISSING_PAYMENTS)
    if any(m.status == MonthStatus.PARTIAL for m in partial):
        candidates.append(OverallStatus.PARTIAL_PAYMENTS)
    if any(m.status == MonthStatus.PENDING for m in partial):
        candidates.append(OverallStatus.PENDING)
    if latest is not None and latest.status == PaymentStatus.PARTIAL:
        candidates.append(OverallStatus.PARTIAL_PAYMENTS)
    if latest is not None and latest.status == PaymentStatus.PENDING:
        candidates.append(OverallStatus.PENDING)
    return max(candidates, key=OverallStatus.rank)


def classify_tenant(check_in, rent_price, records, now=None):
    """Reconcile expected months since ``check_in`` against ``records``.

    Raises ``PreconditionFailedError`` when the rent is zero or unset.
    """
    rent = resolve_rent(rent_price)
    now = as_date(now) if now is not None else date.today()

    matched = match_payments(records)
    latest = latest_record(records)

    missing, partial, listed = [], [], []
    for anchor in billing_months(check_in, now):
        if anchor > now:
            continue
        record = matched.get((anchor.year, anchor.month))
        entry = _classify_month(anchor, record, rent, now)
        if entry is None:
            continue
        if entry.status == MonthStatus.MISSING:
            missing.append(entry)
        else:
            partial.append(entry)
            listed.append(record)

    total = sum((m.due_amount for m in missing), ZERO) + sum((m.due_amount for m in partial), ZERO)
    if latest is not None and latest.status == PaymentStatus.PENDING:
        if not any(r is latest for r in listed):
            total += to_money(latest.actual_rent_amount) if latest.actual_rent_amount is not None else rent

    next_due = None
    if latest is not None and latest.end_date is not None:
        next_due = latest.end_date + relativedelta(days=1)

    return TenantReconciliation(
        monthly_rent=rent,
        overall_status=_overall_status(missing, partial, latest),
        missing_months=missing,
        partial_months=partial,
        latest_payment=latest,
        total_due=total,
        next_due_date=next_due,
    )
