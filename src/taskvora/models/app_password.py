"""
taskvora/models/app_password.py: Senhas de aplicações guardadas pelos usuários.

A senha fica SEMPRE cifrada (Fernet) em encrypted_password.
days_left e status não são persistidos: são calculados na leitura
a partir de expiry_date (ver services/status.py).
"""
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskvora.database import Base


class AppPassword(Base):
    __tablename__ = "app_passwords"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    app_name: Mapped[str] = mapped_column(String(200), nullable=False)
    website_url: Mapped[str] = mapped_column(String(500), default="")
    username: Mapped[str] = mapped_column(String(200), nullable=False)

    # Token Fernet, nunca texto puro
    encrypted_password: Mapped[str] = mapped_column(Text, nullable=False)

    expiry_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    days_before_reminder: Mapped[int] = mapped_column(Integer, default=7)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str] = mapped_column(Text, default="")
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
