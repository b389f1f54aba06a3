# Tests for the flask CLI commands


def test_init_db(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "Database tables created." in result.output


def test_jobs_list(app):
    result = app.test_cli_runner().invoke(args=["jobs", "list"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "payment-due-soon\t0 9 * * *\tAsia/Kolkata" in lines
    assert len(lines) == 3


def test_jobs_run(app):
    result = app.test_cli_runner().invoke(args=["jobs", "run", "pending-payments"])
    assert result.exit_code == 0
    assert "pending-payments: sent 0 of 0" in result.output


def test_jobs_run_rejects_unknown_job(app):
    result = app.test_cli_runner().invoke(args=["jobs", "run", "rent-hike"])
    assert result.exit_code != 0


def test_app_factory_never_starts_scheduler(app):
    assert "scheduler" not in app.extensions


def test_jobs_serve_runs_one_scheduler_until_interrupted(app, monkeypatch):
    from pgrent import cli

    def interrupt(seconds):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli.time, "sleep", interrupt)
    result = app.test_cli_runner().invoke(args=["jobs", "serve"])

    assert result.exit_code == 0
    assert "Scheduler started with 3 job(s)." in result.output
    assert "Scheduler stopped." in result.output
    assert app.extensions["scheduler"].running is False
