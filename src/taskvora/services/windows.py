"""
taskvora/services/windows.py: Itens que vencem na janela [hoje, hoje+N].

Usado pelas notificações (todos os usuários) e pelas listagens
"expirando"/"próximos" (um usuário só, via user_id).

Janela inclusiva nas duas pontas: vence hoje → entra; vence em N dias → entra;
já venceu → fica de fora (a listagem mostra "overdue", a janela não).
"""
from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.models.app_password import AppPassword
from taskvora.models.reminder import Reminder
from taskvora.models.user import User
from taskvora.services.status import local_today


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ExpiringPassword(BaseModel):
    id: int
    user_id: int
    app_name: str
    username: str
    website_url: str = ""
    expiry_date: date
    days_before_reminder: int = 7
    category: Optional[str] = None
    email: str
    full_name: str


class DueReminder(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    reminder_date: date
    priority: str = "medium"
    category: Optional[str] = None
    email: str
    full_name: str


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def window_bounds(days: int, today: Optional[date] = None) -> tuple[date, date]:
    start = today or local_today()
    return start, start + timedelta(days=days)


async def expiring_passwords(
    db: AsyncSession,
    days: int,
    user_id: Optional[int] = None,
    today: Optional[date] = None,
) -> list[ExpiringPassword]:
    """Senhas com expiry_date em [hoje, hoje+days], com email/nome do dono."""
    start, end = window_bounds(days, today)

    query = (
        select(AppPassword, User.email, User.full_name)
        .join(User, AppPassword.user_id == User.id)
        .where(AppPassword.expiry_date >= start, AppPassword.expiry_date <= end)
        .order_by(AppPassword.expiry_date.asc(), AppPassword.id.asc())
    )
    if user_id is not None:
        query = query.where(AppPassword.user_id == user_id)

    result = await db.execute(query)
    return [
        ExpiringPassword(
            id=pwd.id,
            user_id=pwd.user_id,
            app_name=pwd.app_name,
            username=pwd.username,
            website_url=pwd.website_url or "",
            expiry_date=pwd.expiry_date,
            days_before_reminder=pwd.days_before_reminder,
            category=pwd.category,
            email=email,
            full_name=full_name,
        )
        for pwd, email, full_name in result.all()
    ]


async def due_reminders(
    db: AsyncSession,
    days: int,
    user_id: Optional[int] = None,
    today: Optional[date] = None,
) -> list[DueReminder]:
    """Lembretes não concluídos com reminder_date em [hoje, hoje+days]."""
    start, end = window_bounds(days, today)

    query = (
        select(Reminder, User.email, User.full_name)
        .join(User, Reminder.user_id == User.id)
        .where(
            Reminder.is_completed == False,  # noqa: E712
            Reminder.reminder_date >= start,
            Reminder.reminder_date <= end,
        )
        .order_by(Reminder.reminder_date.asc(), Reminder.id.asc())
    )
    if user_id is not None:
        query = query.where(Reminder.user_id == user_id)

    result = await db.execute(query)
    return [
        DueReminder(
            id=rem.id,
            user_id=rem.user_id,
            title=rem.title,
            description=rem.description,
            reminder_date=rem.reminder_date,
            priority=rem.priority,
            category=rem.category,
            email=email,
            full_name=full_name,
        )
        for rem, email, full_name in result.all()
    ]
