"""
taskvora/services/notification_service.py: Resumo por e-mail de senhas
expirando e lembretes próximos.

Regra de ouro: no máximo UM e-mail por usuário por execução, não importa
quantas senhas/lembretes ele tenha na janela.

Fluxo:
  1. Busca senhas expirando e lembretes próximos em [hoje, hoje+N]
  2. Agrupa por e-mail do dono
  3. Escolhe o assunto (só senhas / só lembretes / ambos) e monta o corpo
  4. Envia um e-mail por usuário, falha de um não pula os outros
  5. Grava um EmailLog por envio bem-sucedido

Não há controle de "já enviado hoje": rodar de novo no mesmo dia reenvia.
"""
from datetime import date
from typing import Optional, Protocol

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskvora.config import settings
from taskvora.database import AsyncSessionLocal
from taskvora.exceptions import NotFoundError
from taskvora.models.email_log import EMAIL_DAILY_DIGEST, EMAIL_NOTIFICATION, EmailLog
from taskvora.models.user import User
from taskvora.services.email_service import get_email_service
from taskvora.services.status import days_remaining, local_today
from taskvora.services.windows import DueReminder, ExpiringPassword, due_reminders, expiring_passwords

SUBJECT_PASSWORDS = "Your password is expiring soon - please change it"
SUBJECT_REMINDERS = "Your meeting in 2-3 days - Be Ready"
SUBJECT_BOTH = "Taskvora - Password expiring soon & meeting in 2-3 days - Be Ready"
SUBJECT_SUMMARY = "Taskvora - Your notification summary"

SIGNATURE = "-- Taskvora"


class Mailer(Protocol):
    async def send(self, to: str, subject: str, body: str) -> bool: ...


class UserDigest(BaseModel):
    user_id: int
    email: str
    full_name: str
    passwords: list[ExpiringPassword] = []
    reminders: list[DueReminder] = []

    @property
    def has_items(self) -> bool:
        return bool(self.passwords or self.reminders)


# ---------------------------------------------------------------------------
# Montagem do e-mail
# ---------------------------------------------------------------------------

def format_date(value: date) -> str:
    return value.isoformat()


def _days_text(days: int) -> str:
    return "today" if days == 0 else f"in {days} day(s)"


def choose_subject(digest: UserDigest) -> str:
    if digest.passwords and not digest.reminders:
        return SUBJECT_PASSWORDS
    if digest.reminders and not digest.passwords:
        return SUBJECT_REMINDERS
    return SUBJECT_BOTH


def build_email_content(digest: UserDigest, days_ahead: int, today: Optional[date] = None) -> str:
    """
    Corpo em texto puro. Os dias restantes são recalculados AQUI, na hora de
    montar o e-mail, e não herdados da consulta.
    """
    today = today or local_today()
    lines = [f"Hi {digest.full_name or 'there'},", ""]

    if digest.passwords:
        lines.append("Your password is expiring soon - please change it.")
        lines.append("")
        lines.append(f"The following passwords will expire in the next {days_ahead} day(s):")
        for item in digest.passwords:
            days = max(0, days_remaining(item.expiry_date, today))
            lines.append(
                f"• {item.app_name} ({item.username}) - expires "
                f"{format_date(item.expiry_date)} ({_days_text(days)})"
            )
        lines.append("")
        lines.append("Please update these passwords in Taskvora to keep your accounts secure.")
        lines.append("")

    if digest.reminders:
        lines.append(f"Your meeting / task is in the next {days_ahead} day(s) - Be Ready.")
        lines.append("")
        for item in digest.reminders:
            days = max(0, days_remaining(item.reminder_date, today))
            lines.append(f"• {item.title} - {format_date(item.reminder_date)} ({_days_text(days)})")
        lines.append("")
        lines.append("Be prepared. Open your Taskvora dashboard to view details.")
        lines.append("")

    lines.append(SIGNATURE)
    return "\n".join(lines)


def build_empty_summary(full_name: str, days_ahead: int) -> str:
    return (
        f"Hi {full_name or 'there'},\n\n"
        f"You have no passwords expiring in the next {days_ahead} days "
        f"and no upcoming reminders in that period.\n\n"
        f"{SIGNATURE}"
    )


# ---------------------------------------------------------------------------
# Agrupamento
# ---------------------------------------------------------------------------

def group_by_user(
    passwords: list[ExpiringPassword],
    reminders: list[DueReminder],
) -> dict[str, UserDigest]:
    """Um UserDigest por e-mail de dono, na ordem em que aparecem."""
    digests: dict[str, UserDigest] = {}

    def _entry(email: str, user_id: int, full_name: str) -> UserDigest:
        if email not in digests:
            digests[email] = UserDigest(user_id=user_id, email=email, full_name=full_name)
        return digests[email]

    for pwd in passwords:
        if not pwd.email:
            continue
        _entry(pwd.email, pwd.user_id, pwd.full_name).passwords.append(pwd)

    for rem in reminders:
        if not rem.email:
            continue
        _entry(rem.email, rem.user_id, rem.full_name).reminders.append(rem)

    return digests


async def collect_digests(
    db: AsyncSession,
    days_ahead: int,
    user_id: Optional[int] = None,
    today: Optional[date] = None,
) -> dict[str, UserDigest]:
    passwords = await expiring_passwords(db, days_ahead, user_id=user_id, today=today)
    reminders = await due_reminders(db, days_ahead, user_id=user_id, today=today)
    return group_by_user(passwords, reminders)


# ---------------------------------------------------------------------------
# Envio
# ---------------------------------------------------------------------------

async def dispatch_email(
    db: AsyncSession,
    mailer: Mailer,
    user_id: int,
    to: str,
    subject: str,
    body: str,
    email_type: str,
) -> bool:
    """Envia e registra no EmailLog. Nunca levanta por causa do transporte nem do log."""
    try:
        sent = await mailer.send(to, subject, body)
    except Exception as e:
        logger.error(f"❌ Falha ao enviar e-mail para {to}: {e}")
        return False

    if sent:
        try:
            db.add(EmailLog(user_id=user_id, email_type=email_type))
            await db.commit()
        except SQLAlchemyError as e:
            # o e-mail já saiu: perder o registro não pode travar os próximos envios
            await db.rollback()
            logger.error(f"❌ EmailLog não gravado para {to} ({email_type}): {e}")
    return sent


async def send_daily_notifications(
    days_ahead: Optional[int] = None,
    *,
    session_factory: async_sessionmaker = AsyncSessionLocal,
    mailer: Optional[Mailer] = None,
    today: Optional[date] = None,
) -> int:
    """
    Envia o resumo agregado para todos os usuários com algo na janela.
    Retorna quantos e-mails foram enviados.
    """
    days_ahead = settings.NOTIFY_DAYS_AHEAD if days_ahead is None else days_ahead
    mailer = mailer or get_email_service()
    sent_count = 0

    async with session_factory() as db:
        digests = await collect_digests(db, days_ahead, today=today)

        for digest in digests.values():
            if not digest.has_items:
                continue

            body = build_email_content(digest, days_ahead, today=today)
            if await dispatch_email(
                db, mailer, digest.user_id, digest.email,
                choose_subject(digest), body, EMAIL_DAILY_DIGEST,
            ):
                sent_count += 1
                logger.info(
                    f"📧 Resumo enviado para {digest.email} "
                    f"({len(digest.passwords)} senha(s), {len(digest.reminders)} lembrete(s))"
                )

    logger.info(f"✅ Resumo diário: {sent_count}/{len(digests)} e-mail(s) enviados (janela {days_ahead}d)")
    return sent_count


async def send_notification_to_user(
    db: AsyncSession,
    user_id: int,
    days_ahead: Optional[int] = None,
    *,
    mailer: Optional[Mailer] = None,
    today: Optional[date] = None,
) -> dict:
    """
    "Me mande agora" do dashboard: mesmo resumo, só para um usuário.
    Sem nada na janela, manda um resumo dizendo que não há nada pendente.
    """
    days_ahead = settings.NOTIFY_DAYS_AHEAD if days_ahead is None else days_ahead
    mailer = mailer or get_email_service()

    user = await db.scalar(select(User).where(User.id == user_id))
    if not user or not user.email:
        raise NotFoundError("User or email not found")

    digests = await collect_digests(db, days_ahead, user_id=user_id, today=today)
    digest = digests.get(user.email) or UserDigest(
        user_id=user.id, email=user.email, full_name=user.full_name
    )

    if not digest.has_items:
        sent = await dispatch_email(
            db, mailer, user.id, user.email, SUBJECT_SUMMARY,
            build_empty_summary(user.full_name, days_ahead), EMAIL_NOTIFICATION,
        )
        return {"sent": sent, "message": "Summary email sent (no expiring items)."}

    sent = await dispatch_email(
        db, mailer, user.id, user.email, choose_subject(digest),
        build_email_content(digest, days_ahead, today=today), EMAIL_NOTIFICATION,
    )
    return {
        "sent": sent,
        "passwords": len(digest.passwords),
        "reminders": len(digest.reminders),
    }
