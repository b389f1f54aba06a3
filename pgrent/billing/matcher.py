"""Map rent-payment records onto billing months.

The payments table allows more than one record per month (corrections,
retries). Each month collapses to a single representative record, and a
PAID record never hides an unresolved one for the same month.
"""
from datetime import datetime

from ..models.rent_payment import PaymentStatus
from .schedule import as_date

# Records with these statuses settle nothing and never represent a month
_NON_SETTLING = (PaymentStatus.FAILED, PaymentStatus.REFUNDED)


def _recency_key(record):
    return (record.payment_date or datetime.min, record.id or 0)


def live_records(records):
    """Non-tombstoned records, most recent payment first."""
    alive = [r for r in records if not r.is_deleted]
    return sorted(alive, key=_recency_key, reverse=True)


def latest_record(records):
    alive = live_records(records)
    return alive[0] if alive else None


def record_month(record):
    """``(year, month)`` of the period a record pays for, or ``None``."""
    period = record.start_date or as_date(record.payment_date)
    if period is None:
        return None
    return (period.year, period.month)


def match_payments(records):
    """Collapse records to ``{(year, month): record}``.

    Records are visited newest first. The first record seen for a month is
    kept, except that a non-PAID record replaces a PAID one.
    """
    matched = {}
    for record in live_records(records):
        if record.status in _NON_SETTLING:
            continue
        key = record_month(record)
        if key is None:
            continue
        current = matched.get(key)
        if current is None:
            matched[key] = record
        elif current.status == PaymentStatus.PAID and record.status != PaymentStatus.PAID:
            matched[key] = record
    return matched
