import time

import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext

from .extensions import db
from .notifications import scheduler

jobs = AppGroup("jobs", help="Scheduled notification jobs.")


@click.command("init-db")
@with_appcontext
def init_db():
    """Create all tables."""
    db.create_all()
    click.echo("Database tables created.")


@jobs.command("list")
def list_jobs():
    tz = current_app.config.get("SCHEDULER_TIMEZONE")
    for name, job in scheduler.SCHEDULED_JOBS.items():
        click.echo(f"{name}\t{job['cron']}\t{tz}")


@jobs.command("run")
@click.argument("name", type=click.Choice(sorted(scheduler.SCHEDULED_JOBS)))
def run_job(name):
    """Fire one job now."""
    result = scheduler.run_job(current_app._get_current_object(), name)
    click.echo(f"{name}: sent {result['sent']} of {result['total']}")


@jobs.command("serve")
def serve():
    """Run the cron scheduler in the foreground.

    Start exactly one of these per deployment; web workers never schedule.
    """
    sched = scheduler.init_scheduler(current_app._get_current_object())
    click.echo(f"Scheduler started with {len(sched.get_jobs())} job(s).")
    try:
        while True:
            time.sleep(3600)
    except (KeyboardInterrupt, SystemExit):
        sched.shutdown()
        click.echo("Scheduler stopped.")


def register_commands(app):
    app.cli.add_command(init_db)
    app.cli.add_command(jobs)
