"""
taskvora/controllers/reminder_controller.py: CRUD de lembretes.

reminder_date precisa ser uma data válida e não pode estar no passado
(hoje é aceito). Concluir é irreversível.
"""
from datetime import date, datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.exceptions import NotFoundError, ValidationError
from taskvora.models.reminder import Reminder
from taskvora.services.status import (
    ReminderStatus,
    local_today,
    reminder_status,
    safe_days_remaining,
    to_date,
)
from taskvora.services.windows import DueReminder, due_reminders

Priority = Literal["low", "medium", "high"]


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ReminderWrite(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    reminder_date: Union[date, str]
    priority: Priority = "medium"
    category: Optional[str] = None


class ReminderRead(BaseModel):
    id: int
    title: str
    description: Optional[str]
    reminder_date: date
    priority: str
    category: Optional[str]
    is_completed: bool
    completed_at: Optional[datetime]
    created_at: datetime
    days_left: Optional[int]
    status: Optional[ReminderStatus]


class UpcomingReminderRead(DueReminder):
    days_left: int
    status: ReminderStatus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def validate_reminder_date(value: Union[date, str, None], today: Optional[date] = None) -> date:
    parsed = to_date(value)
    if parsed is None or parsed < (today or local_today()):
        raise ValidationError("Invalid reminder date")
    return parsed


def _annotate(rem: Reminder, today: Optional[date]) -> ReminderRead:
    days_left = safe_days_remaining(rem.reminder_date, today)
    return ReminderRead(
        id=rem.id,
        title=rem.title,
        description=rem.description,
        reminder_date=rem.reminder_date,
        priority=rem.priority,
        category=rem.category,
        is_completed=rem.is_completed,
        completed_at=rem.completed_at,
        created_at=rem.created_at,
        days_left=days_left,
        status=reminder_status(days_left, rem.is_completed) if days_left is not None else None,
    )


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class ReminderController:

    @staticmethod
    async def _get_owned(db: AsyncSession, user_id: int, reminder_id: int) -> Reminder:
        rem = await db.scalar(
            select(Reminder).where(Reminder.id == reminder_id, Reminder.user_id == user_id)
        )
        if not rem:
            raise NotFoundError("Reminder not found")
        return rem

    @staticmethod
    async def add(
        db: AsyncSession,
        user_id: int,
        data: ReminderWrite,
        today: Optional[date] = None,
    ) -> Reminder:
        """Lança ValidationError se a data for inválida ou estiver no passado."""
        rem = Reminder(
            user_id=user_id,
            title=data.title,
            description=data.description,
            reminder_date=validate_reminder_date(data.reminder_date, today),
            priority=data.priority,
            category=data.category,
        )
        db.add(rem)
        await db.commit()
        await db.refresh(rem)
        return rem

    @staticmethod
    async def list_for_user(
        db: AsyncSession,
        user_id: int,
        today: Optional[date] = None,
    ) -> list[ReminderRead]:
        result = await db.execute(
            select(Reminder)
            .where(Reminder.user_id == user_id)
            .order_by(Reminder.reminder_date.asc(), Reminder.id.asc())
        )
        return [_annotate(r, today) for r in result.scalars().all()]

    @staticmethod
    async def upcoming(
        db: AsyncSession,
        user_id: int,
        days: int = 7,
        today: Optional[date] = None,
    ) -> list[UpcomingReminderRead]:
        """Lembretes não concluídos do usuário em [hoje, hoje+days]."""
        today = today or local_today()
        rows = await due_reminders(db, days, user_id=user_id, today=today)
        out = []
        for row in rows:
            days_left = safe_days_remaining(row.reminder_date, today)
            out.append(UpcomingReminderRead(
                **row.model_dump(), days_left=days_left, status=reminder_status(days_left)
            ))
        return out

    @staticmethod
    async def update(
        db: AsyncSession,
        user_id: int,
        reminder_id: int,
        data: ReminderWrite,
        today: Optional[date] = None,
    ) -> Reminder:
        """Edita os campos do lembrete. Não mexe em is_completed."""
        rem = await ReminderController._get_owned(db, user_id, reminder_id)

        rem.title = data.title
        rem.description = data.description
        rem.reminder_date = validate_reminder_date(data.reminder_date, today)
        rem.priority = data.priority
        rem.category = data.category

        await db.commit()
        await db.refresh(rem)
        return rem

    @staticmethod
    async def mark_complete(db: AsyncSession, user_id: int, reminder_id: int) -> Reminder:
        """Transição de mão única. Concluir de novo mantém o completed_at original."""
        rem = await ReminderController._get_owned(db, user_id, reminder_id)
        if not rem.is_completed:
            rem.is_completed = True
            rem.completed_at = datetime.utcnow()
            await db.commit()
            await db.refresh(rem)
        return rem

    @staticmethod
    async def delete(db: AsyncSession, user_id: int, reminder_id: int) -> None:
        rem = await ReminderController._get_owned(db, user_id, reminder_id)
        await db.delete(rem)
        await db.commit()
