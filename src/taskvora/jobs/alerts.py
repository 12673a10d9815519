"""
taskvora/jobs/alerts.py: Varreduras por item (um e-mail por senha / por lembrete).

Convive com o resumo agregado de notification_service de propósito:
  - 09:00 → senhas expirando em até 3 dias; as que vencem em até 1 dia
            saem com assunto de urgência
  - 10:00 → lembretes não concluídos em até 3 dias

Quem tem 3 senhas na janela recebe 3 e-mails aqui E um resumo no job
agregado. Não unificar sem decidir o volume de e-mails desejado.
"""
from datetime import date
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

from taskvora.database import AsyncSessionLocal
from taskvora.models.email_log import EMAIL_PASSWORD_ALERT, EMAIL_REMINDER_ALERT
from taskvora.services.email_service import get_email_service
from taskvora.services.notification_service import SIGNATURE, Mailer, dispatch_email, format_date
from taskvora.services.status import days_remaining, local_today
from taskvora.services.windows import DueReminder, ExpiringPassword, due_reminders, expiring_passwords

PASSWORD_ALERT_DAYS = 3
PASSWORD_CRITICAL_DAYS = 1
REMINDER_ALERT_DAYS = 3


def password_alert_subject(item: ExpiringPassword, critical: bool = False) -> str:
    prefix = "⚠️ URGENT - " if critical else ""
    return f"{prefix}🔔 Password Expiry Reminder: {item.app_name}"


def password_alert_body(item: ExpiringPassword, today: Optional[date] = None) -> str:
    days = max(0, days_remaining(item.expiry_date, today or local_today()))
    return (
        f"Hello {item.full_name},\n\n"
        f"Your password for {item.app_name} will expire in {days} day(s) "
        f"on {format_date(item.expiry_date)}.\n\n"
        f"Please update your password before it expires.\n\n"
        f"Regards,\n{SIGNATURE}"
    )


def reminder_alert_subject(item: DueReminder) -> str:
    return f"📅 Reminder: {item.title}"


def reminder_alert_body(item: DueReminder, today: Optional[date] = None) -> str:
    days = max(0, days_remaining(item.reminder_date, today or local_today()))
    details = f"Details: {item.description}\n\n" if item.description else ""
    return (
        f"Hello {item.full_name},\n\n"
        f"This is a reminder for: {item.title}\n\n"
        f"{details}"
        f"Due in: {days} day(s)\n"
        f"Due Date: {format_date(item.reminder_date)}\n\n"
        f"Regards,\n{SIGNATURE}"
    )


async def send_password_expiry_alerts(
    *,
    session_factory: async_sessionmaker = AsyncSessionLocal,
    mailer: Optional[Mailer] = None,
    today: Optional[date] = None,
) -> int:
    """Um e-mail por senha expirando em até 3 dias. Retorna quantos foram enviados."""
    mailer = mailer or get_email_service()
    logger.info("🔄 Verificando senhas expirando…")

    async with session_factory() as db:
        expiring = await expiring_passwords(db, PASSWORD_ALERT_DAYS, today=today)
        critical_ids = {
            p.id for p in await expiring_passwords(db, PASSWORD_CRITICAL_DAYS, today=today)
        }

        sent = 0
        for item in expiring:
            ok = await dispatch_email(
                db, mailer, item.user_id, item.email,
                password_alert_subject(item, critical=item.id in critical_ids),
                password_alert_body(item, today),
                EMAIL_PASSWORD_ALERT,
            )
            sent += int(ok)

    logger.info(f"✅ {sent}/{len(expiring)} alerta(s) de expiração enviados ({len(critical_ids)} crítico(s))")
    return sent


async def send_reminder_alerts(
    *,
    session_factory: async_sessionmaker = AsyncSessionLocal,
    mailer: Optional[Mailer] = None,
    today: Optional[date] = None,
) -> int:
    """Um e-mail por lembrete não concluído nos próximos 3 dias."""
    mailer = mailer or get_email_service()
    logger.info("🔄 Verificando lembretes próximos…")

    async with session_factory() as db:
        upcoming = await due_reminders(db, REMINDER_ALERT_DAYS, today=today)

        sent = 0
        for item in upcoming:
            ok = await dispatch_email(
                db, mailer, item.user_id, item.email,
                reminder_alert_subject(item),
                reminder_alert_body(item, today),
                EMAIL_REMINDER_ALERT,
            )
            sent += int(ok)

    logger.info(f"✅ {sent}/{len(upcoming)} lembrete(s) enviados")
    return sent
