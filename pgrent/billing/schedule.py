"""Expected billing months for a tenant.

A billing month is represented by its first-of-month ``date`` anchor.
"""
from datetime import date, datetime

from dateutil.relativedelta import relativedelta


def as_date(value):
    """Normalise a ``datetime`` to its calendar date (midnight)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def month_anchor(value):
    return as_date(value).replace(day=1)


def next_month(anchor):
    return anchor + relativedelta(months=1)


def month_end(anchor):
    """Last day of the month starting at ``anchor``."""
    return next_month(anchor) - relativedelta(days=1)


def month_key(anchor):
    return f"{anchor.year:04d}-{anchor.month:02d}"


def billing_months(check_in, now=None):
    """Month anchors from the check-in month through ``now``'s month, inclusive.

    The check-in month is always included, even for a mid-month move-in.
    Nothing after ``now``'s month is ever produced; a check-in later than
    ``now``'s month yields an empty list.
    """
    if check_in is None:
        return []
    current = month_anchor(check_in)
    last = month_anchor(now if now is not None else date.today())

    months = []
    while current <= last:
        months.append(current)
        current = next_month(current)
    return months
