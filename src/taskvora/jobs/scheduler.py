"""
taskvora/jobs/scheduler.py: Jobs periódicos de notificação.

Dois mecanismos independentes, com granularidades diferentes:
  • daily_digest    → a cada NOTIFY_INTERVAL_HOURS, 1º disparo ~1min após o boot
                      (um e-mail AGREGADO por usuário)
  • password_alerts → todo dia às PASSWORD_ALERT_HOUR (um e-mail POR senha)
  • reminder_alerts → todo dia às REMINDER_ALERT_HOUR (um e-mail POR lembrete)

Um processo só: duas instâncias rodando = e-mails duplicados.
"""
import functools
from datetime import datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from taskvora.config import settings
from taskvora.jobs.alerts import send_password_expiry_alerts, send_reminder_alerts
from taskvora.services.notification_service import send_daily_notifications

scheduler = AsyncIOScheduler()


def safe_job(func):
    """Erro dentro do job vira log, o próximo disparo continua agendado."""
    @functools.wraps(func)
    async def _wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger.exception(f"❌ Job {func.__name__} falhou: {e}")
            return None
    return _wrapper


@safe_job
async def daily_digest_job():
    return await send_daily_notifications(settings.NOTIFY_DAYS_AHEAD)


@safe_job
async def password_alerts_job():
    return await send_password_expiry_alerts()


@safe_job
async def reminder_alerts_job():
    return await send_reminder_alerts()


def setup_jobs(sched: AsyncIOScheduler = scheduler, start: bool = True) -> AsyncIOScheduler:
    sched.add_job(
        daily_digest_job,
        trigger=IntervalTrigger(hours=settings.NOTIFY_INTERVAL_HOURS),
        next_run_time=datetime.now() + timedelta(seconds=settings.NOTIFY_INITIAL_DELAY_SECONDS),
        id="daily_digest",
        name="Resumo diário agregado",
        replace_existing=True,
        misfire_grace_time=300,
    )

    sched.add_job(
        password_alerts_job,
        trigger=CronTrigger(hour=settings.PASSWORD_ALERT_HOUR, minute=0),
        id="password_alerts",
        name="Alertas de senha por item",
        replace_existing=True,
        misfire_grace_time=300,
    )

    sched.add_job(
        reminder_alerts_job,
        trigger=CronTrigger(hour=settings.REMINDER_ALERT_HOUR, minute=0),
        id="reminder_alerts",
        name="Alertas de lembrete por item",
        replace_existing=True,
        misfire_grace_time=300,
    )

    if start:
        sched.start()
    logger.info(
        f"⏰ Jobs agendados:\n"
        f"   • daily_digest    → a cada {settings.NOTIFY_INTERVAL_HOURS}h "
        f"(1º em {settings.NOTIFY_INITIAL_DELAY_SECONDS}s, janela {settings.NOTIFY_DAYS_AHEAD}d)\n"
        f"   • password_alerts → todo dia às {settings.PASSWORD_ALERT_HOUR:02d}:00\n"
        f"   • reminder_alerts → todo dia às {settings.REMINDER_ALERT_HOUR:02d}:00"
    )
    return sched
