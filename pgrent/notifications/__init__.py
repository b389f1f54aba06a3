from .service import (
    LogNotificationSender,
    Notice,
    TriggerReason,
    collect_notices,
    get_sender,
    run_trigger,
    send_overdue_payment_notifications,
    send_payment_due_soon_notifications,
    send_pending_payment_notifications,
)
