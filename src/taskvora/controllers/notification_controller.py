"""
taskvora/controllers/notification_controller.py: Contador de e-mails e "me mande agora".
"""
from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.models.email_log import EmailLog
from taskvora.services.notification_service import Mailer, send_notification_to_user


class NotificationController:

    @staticmethod
    async def email_count(db: AsyncSession, user_id: int) -> int:
        count = await db.scalar(
            select(func.count(EmailLog.id)).where(EmailLog.user_id == user_id)
        )
        return count or 0

    @staticmethod
    async def send_now(
        db: AsyncSession,
        user_id: int,
        days_ahead: Optional[int] = None,
        mailer: Optional[Mailer] = None,
        today: Optional[date] = None,
    ) -> dict:
        """Lança NotFoundError se o usuário não existir."""
        return await send_notification_to_user(
            db, user_id, days_ahead, mailer=mailer, today=today
        )
