"""Payment notifications: who to notify, what to say, and delivery bookkeeping."""
import logging
from dataclasses import dataclass, field
from datetime import date

from flask import current_app

from ..billing import aggregator
from ..billing.money import format_money
from ..billing.schedule import as_date

logger = logging.getLogger(__name__)


class TriggerReason:
    DUE_SOON = "DUE_SOON"
    OVERDUE = "OVERDUE"
    PENDING = "PENDING"


class LogNotificationSender:
    """Default sender: records the request in the log and reports success."""

    def send(self, user_id, notification):
        logger.info(
            "Notification for user %s [%s]: %s | %s",
            user_id, notification["type"], notification["title"], notification["body"],
        )
        return True


def get_sender():
    sender = current_app.extensions.get("notification_sender")
    if sender is None:
        sender = LogNotificationSender()
        current_app.extensions["notification_sender"] = sender
    return sender


@dataclass
class Notice:
    user_id: int
    tenant_id: int
    notification: dict = field(default_factory=dict)


def _currency():
    return current_app.config.get("CURRENCY_SYMBOL", "₹")


def due_soon_payload(entry):
    amount = entry["monthly_rent"]
    days = entry["days_remaining"]
    return {
        "title": "Payment Due Soon",
        "body": f"Reminder: Your rent of {_currency()}{amount} is due in {days} days",
        "type": "PAYMENT_DUE_SOON",
        "data": {
            "tenant_id": entry["tenant_id"],
            "amount": amount,
            "due_date": entry["next_due_date"],
            "days_remaining": days,
        },
    }


def overdue_payload(entry):
    amount = entry["amount"]
    days = entry["overdue_days"]
    return {
        "title": "Payment Overdue",
        "body": (
            f"Your payment of {_currency()}{amount} is {days} days overdue. "
            "Please pay immediately to avoid penalties."
        ),
        "type": "PAYMENT_OVERDUE",
        "data": {
            "tenant_id": entry["tenant_id"],
            "amount": amount,
            "overdue_days": days,
            "payment_ids": entry["payment_ids"],
        },
    }


def pending_payload(view):
    tenant = view.tenant
    amount = format_money(view.total_due)
    due_date = view.reconciliation.next_due_date
    body = f"Hi {tenant.name}, you have a pending payment of {_currency()}{amount}."
    if due_date is not None:
        body += f" Due date: {due_date.strftime('%d/%m/%Y')}"
    return {
        "title": "Payment Pending",
        "body": body,
        "type": "PENDING_PAYMENT",
        "data": {
            "tenant_id": tenant.id,
            "amount": amount,
            "overall_status": view.overall_status,
            "due_date": due_date.isoformat() if due_date else None,
        },
    }


def collect_notices(reason, now, pg_id=None):
    """Build one notice per tenant that should hear about ``reason``.

    Tenants without a linked user account cannot be reached and are left
    out entirely.
    """
    if reason == TriggerReason.DUE_SOON:
        days = current_app.config.get("DUE_SOON_DAYS", 3)
        entries = aggregator.tenants_due_in(days, pg_id=pg_id, now=now)
        return [
            Notice(e["user_id"], e["tenant_id"], due_soon_payload(e))
            for e in entries if e["user_id"] is not None
        ]

    if reason == TriggerReason.OVERDUE:
        entries = aggregator.overdue_tenants(pg_id=pg_id, now=now)
        return [
            Notice(e["user_id"], e["tenant_id"], overdue_payload(e))
            for e in entries if e["user_id"] is not None
        ]

    if reason == TriggerReason.PENDING:
        locations = [pg_id] if pg_id is not None else aggregator.location_ids_with_active_tenants()
        notices = []
        for location_id in locations:
            report = aggregator.pending_report(location_id, now=now)
            for view in report.tenants:
                if view.tenant.user_id is None:
                    continue
                notices.append(Notice(view.tenant.user_id, view.tenant.id, pending_payload(view)))
        return notices

    raise ValueError(f"Unknown trigger reason: {reason}")


def run_trigger(reason, now=None, sender=None):
    """Send every notice for ``reason``; a failed delivery does not stop the batch."""
    now = as_date(now) if now is not None else date.today()
    sender = sender or get_sender()
    notices = collect_notices(reason, now)
    logger.info("Found %d tenant(s) to notify for %s", len(notices), reason)

    sent = 0
    for notice in notices:
        try:
            delivered = sender.send(notice.user_id, notice.notification)
        except Exception:
            logger.exception(
                "Failed to send %s notification to tenant %s", reason, notice.tenant_id
            )
            continue
        if delivered:
            sent += 1
        else:
            logger.warning(
                "Sender declined %s notification for tenant %s", reason, notice.tenant_id
            )

    logger.info("Sent %d of %d %s notification(s)", sent, len(notices), reason)
    return {"total": len(notices), "sent": sent}


def send_payment_due_soon_notifications(now=None, sender=None):
    return run_trigger(TriggerReason.DUE_SOON, now=now, sender=sender)


def send_overdue_payment_notifications(now=None, sender=None):
    return run_trigger(TriggerReason.OVERDUE, now=now, sender=sender)


def send_pending_payment_notifications(now=None, sender=None):
    return run_trigger(TriggerReason.PENDING, now=now, sender=sender)
