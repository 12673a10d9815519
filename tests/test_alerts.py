"""
Tests for the per-item alert sweeps and the scheduler wiring.
"""
from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import select

from taskvora.jobs.alerts import send_password_expiry_alerts, send_reminder_alerts
from taskvora.jobs.scheduler import safe_job, setup_jobs
from taskvora.models.email_log import EMAIL_PASSWORD_ALERT, EMAIL_REMINDER_ALERT, EmailLog


class TestPasswordExpiryAlerts:

    async def test_one_email_per_item(self, db, session_factory, mailer, make_user, add_password, today):
        user = await make_user()
        await add_password(user, today + timedelta(days=1), app_name="Jira")
        await add_password(user, today + timedelta(days=3), app_name="Slack")
        await add_password(user, today + timedelta(days=4), app_name="Outside")

        sent = await send_password_expiry_alerts(session_factory=session_factory, mailer=mailer, today=today)

        assert sent == 2
        subjects = [m["subject"] for m in mailer.to("ana@company.com")]
        assert subjects == [
            "⚠️ URGENT - 🔔 Password Expiry Reminder: Jira",
            "🔔 Password Expiry Reminder: Slack",
        ]

    async def test_body_mentions_days_and_date(self, session_factory, mailer, make_user, add_password, today):
        user = await make_user()
        await add_password(user, today + timedelta(days=2), app_name="VPN")

        await send_password_expiry_alerts(session_factory=session_factory, mailer=mailer, today=today)

        body = mailer.sent[0]["body"]
        assert body.startswith("Hello Ana Souza,")
        assert "VPN will expire in 2 day(s) on 2025-06-17" in body

    async def test_logs_only_successful_sends(self, db, session_factory, mailer, make_user, add_password, today):
        ana = await make_user()
        bia = await make_user(email="bia@company.com", employee_id="EMP002", full_name="Bia")
        await add_password(ana, today)
        await add_password(bia, today)
        mailer.raise_for.add("bia@company.com")

        sent = await send_password_expiry_alerts(session_factory=session_factory, mailer=mailer, today=today)

        assert sent == 1
        logs = (await db.execute(select(EmailLog))).scalars().all()
        assert [(log.user_id, log.email_type) for log in logs] == [(ana.id, EMAIL_PASSWORD_ALERT)]


class TestReminderAlerts:

    async def test_skips_completed_and_far_reminders(
        self, db, session_factory, mailer, make_user, add_reminder, today
    ):
        user = await make_user()
        await add_reminder(user, today, title="Today")
        await add_reminder(user, today + timedelta(days=3), title="Edge")
        await add_reminder(user, today + timedelta(days=1), title="Done", completed=True)
        await add_reminder(user, today + timedelta(days=5), title="Far")

        sent = await send_reminder_alerts(session_factory=session_factory, mailer=mailer, today=today)

        assert sent == 2
        assert [m["subject"] for m in mailer.sent] == ["📅 Reminder: Today", "📅 Reminder: Edge"]
        assert "Due in: 3 day(s)" in mailer.sent[1]["body"]
        types = (await db.execute(select(EmailLog.email_type))).scalars().all()
        assert types == [EMAIL_REMINDER_ALERT, EMAIL_REMINDER_ALERT]


class TestScheduler:

    def test_registers_three_jobs(self):
        sched = setup_jobs(AsyncIOScheduler(), start=False)

        jobs = {job.id: job for job in sched.get_jobs()}

        assert set(jobs) == {"daily_digest", "password_alerts", "reminder_alerts"}
        assert isinstance(jobs["daily_digest"].trigger, IntervalTrigger)
        assert jobs["daily_digest"].trigger.interval == timedelta(hours=24)
        assert isinstance(jobs["password_alerts"].trigger, CronTrigger)
        assert isinstance(jobs["reminder_alerts"].trigger, CronTrigger)

    async def test_safe_job_swallows_errors(self):
        @safe_job
        async def boom():
            raise RuntimeError("smtp exploded")

        assert await boom() is None

    async def test_safe_job_passes_result_through(self):
        @safe_job
        async def fine():
            return 7

        assert await fine() == 7
