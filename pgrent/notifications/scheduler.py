"""Cron-scheduled notification jobs on an APScheduler background scheduler."""
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from . import service

logger = logging.getLogger(__name__)

# name -> {"func", "cron"}
SCHEDULED_JOBS = {}


def run_cron(name, expr):
    """Register ``func`` under ``name`` with a 5-field cron expression."""
    if len(expr.strip().split()) != 5:
        raise ValueError("Invalid cron expression (expected 5 fields)")

    def wrapper(func):
        SCHEDULED_JOBS[name] = {"func": func, "cron": expr}
        return func
    return wrapper


@run_cron("payment-due-soon", "0 9 * * *")
def payment_due_soon_job():
    return service.send_payment_due_soon_notifications()


@run_cron("overdue-payments", "0 10 * * *")
def overdue_payments_job():
    return service.send_overdue_payment_notifications()


@run_cron("pending-payments", "0 9 * * mon")
def pending_payments_job():
    return service.send_pending_payment_notifications()


def run_job(app, name):
    """Run one registered job inside an application context."""
    job = SCHEDULED_JOBS[name]
    with app.app_context():
        logger.info("Running scheduled job %s", name)
        try:
            return job["func"]()
        except Exception:
            logger.exception("Scheduled job %s failed", name)
            raise


def init_scheduler(app):
    timezone = app.config.get("SCHEDULER_TIMEZONE", "Asia/Kolkata")
    scheduler = BackgroundScheduler(timezone=timezone)
    for name, job in SCHEDULED_JOBS.items():
        scheduler.add_job(
            run_job,
            trigger=CronTrigger.from_crontab(job["cron"], timezone=timezone),
            args=(app, name),
            id=name,
            name=name,
            coalesce=True,
            misfire_grace_time=600,
            max_instances=1,
            replace_existing=True,
        )
        logger.info("Registered job %s (%s, %s)", name, job["cron"], timezone)

    scheduler.start()
    app.extensions["scheduler"] = scheduler
    return scheduler
