"""
taskvora/models/email_log.py: Log imutável de e-mails enviados.

Só insert. Serve para o contador de e-mails do dashboard.
"""
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from taskvora.database import Base

EMAIL_NOTIFICATION = "notification"      # "me mande agora" do dashboard
EMAIL_DAILY_DIGEST = "daily_digest"      # resumo agregado por usuário
EMAIL_PASSWORD_ALERT = "password_alert"  # varredura das 9h, um por senha
EMAIL_REMINDER_ALERT = "reminder_alert"  # varredura das 10h, um por lembrete


class EmailLog(Base):
    __tablename__ = "email_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    email_type: Mapped[str] = mapped_column(String(50), nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
