"""
taskvora/controllers/password_controller.py: CRUD das senhas de aplicações.

Regras:
  - a senha só entra no banco cifrada (CredentialCipher)
  - expiry_date ausente, inválida ou no passado vira "daqui a 1 ano"
    (correção automática, não erro)
  - days_left / status calculados na leitura
  - tudo filtrado pelo dono (user_id), id de outro usuário = não encontrado
"""
from datetime import date, datetime
from typing import Optional, Union

from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.exceptions import DecryptionError, NotFoundError
from taskvora.models.app_password import AppPassword
from taskvora.services.crypto import CredentialCipher, get_cipher
from taskvora.services.status import (
    PasswordStatus,
    local_today,
    password_status,
    safe_days_remaining,
    to_date,
)
from taskvora.services.windows import ExpiringPassword, expiring_passwords

DEFAULT_REMINDER_DAYS = 7


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class PasswordWrite(BaseModel):
    app_name: str = Field(min_length=1, max_length=200)
    website_url: Optional[str] = ""
    username: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=1)
    expiry_date: Optional[Union[date, str]] = None
    days_before_reminder: Optional[int] = Field(default=DEFAULT_REMINDER_DAYS, ge=0)
    category: Optional[str] = None
    notes: Optional[str] = ""
    is_favorite: bool = False


class PasswordRead(BaseModel):
    id: int
    app_name: str
    website_url: str
    username: str
    password: Optional[str]  # None se o token não decifrar com a chave atual
    expiry_date: date
    days_before_reminder: int
    category: Optional[str]
    notes: str
    is_favorite: bool
    created_at: datetime
    days_left: Optional[int]
    status: Optional[PasswordStatus]


class ExpiringPasswordRead(ExpiringPassword):
    days_left: int
    status: PasswordStatus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def one_year_from(day: date) -> date:
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        # 29/02 → 28/02 do ano seguinte
        return day.replace(year=day.year + 1, day=28)


def normalize_expiry(value: Optional[Union[date, str]], today: Optional[date] = None) -> date:
    """Data válida e >= hoje é mantida; qualquer outra coisa vira hoje + 1 ano."""
    today = today or local_today()
    parsed = to_date(value)
    if parsed is None or parsed < today:
        return one_year_from(today)
    return parsed


def _annotate(pwd: AppPassword, cipher: CredentialCipher, today: Optional[date]) -> PasswordRead:
    try:
        plain = cipher.decrypt(pwd.encrypted_password)
    except DecryptionError:
        logger.warning(f"⚠️  Senha #{pwd.id} não decifrou com a ENCRYPTION_KEY atual")
        plain = None

    days_left = safe_days_remaining(pwd.expiry_date, today)
    return PasswordRead(
        id=pwd.id,
        app_name=pwd.app_name,
        website_url=pwd.website_url or "",
        username=pwd.username,
        password=plain,
        expiry_date=pwd.expiry_date,
        days_before_reminder=pwd.days_before_reminder,
        category=pwd.category,
        notes=pwd.notes or "",
        is_favorite=pwd.is_favorite,
        created_at=pwd.created_at,
        days_left=days_left,
        status=password_status(days_left) if days_left is not None else None,
    )


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class PasswordController:

    @staticmethod
    async def _get_owned(db: AsyncSession, user_id: int, password_id: int) -> AppPassword:
        pwd = await db.scalar(
            select(AppPassword).where(AppPassword.id == password_id, AppPassword.user_id == user_id)
        )
        if not pwd:
            raise NotFoundError("Password not found")
        return pwd

    @staticmethod
    async def add(
        db: AsyncSession,
        user_id: int,
        data: PasswordWrite,
        cipher: Optional[CredentialCipher] = None,
        today: Optional[date] = None,
    ) -> AppPassword:
        cipher = cipher or get_cipher()
        pwd = AppPassword(
            user_id=user_id,
            app_name=data.app_name,
            website_url=data.website_url or "",
            username=data.username,
            encrypted_password=cipher.encrypt(data.password),
            expiry_date=normalize_expiry(data.expiry_date, today),
            days_before_reminder=(
                DEFAULT_REMINDER_DAYS if data.days_before_reminder is None else data.days_before_reminder
            ),
            category=data.category,
            notes=data.notes or "",
            is_favorite=data.is_favorite,
        )
        db.add(pwd)
        await db.commit()
        await db.refresh(pwd)
        return pwd

    @staticmethod
    async def list_for_user(
        db: AsyncSession,
        user_id: int,
        cipher: Optional[CredentialCipher] = None,
        today: Optional[date] = None,
    ) -> list[PasswordRead]:
        """Todas as senhas do usuário, decifradas e anotadas, por validade crescente."""
        cipher = cipher or get_cipher()
        result = await db.execute(
            select(AppPassword)
            .where(AppPassword.user_id == user_id)
            .order_by(AppPassword.expiry_date.asc(), AppPassword.id.asc())
        )
        return [_annotate(p, cipher, today) for p in result.scalars().all()]

    @staticmethod
    async def expiring(
        db: AsyncSession,
        user_id: int,
        days: int = 7,
        today: Optional[date] = None,
    ) -> list[ExpiringPasswordRead]:
        """Senhas do usuário vencendo em [hoje, hoje+days], sem o valor decifrado."""
        today = today or local_today()
        rows = await expiring_passwords(db, days, user_id=user_id, today=today)
        out = []
        for row in rows:
            days_left = safe_days_remaining(row.expiry_date, today)
            out.append(ExpiringPasswordRead(
                **row.model_dump(), days_left=days_left, status=password_status(days_left)
            ))
        return out

    @staticmethod
    async def update(
        db: AsyncSession,
        user_id: int,
        password_id: int,
        data: PasswordWrite,
        cipher: Optional[CredentialCipher] = None,
        today: Optional[date] = None,
    ) -> AppPassword:
        """Substitui todos os campos. A senha é cifrada de novo."""
        cipher = cipher or get_cipher()
        pwd = await PasswordController._get_owned(db, user_id, password_id)

        pwd.app_name = data.app_name
        pwd.website_url = data.website_url or ""
        pwd.username = data.username
        pwd.encrypted_password = cipher.encrypt(data.password)
        pwd.expiry_date = normalize_expiry(data.expiry_date, today)
        pwd.days_before_reminder = (
            DEFAULT_REMINDER_DAYS if data.days_before_reminder is None else data.days_before_reminder
        )
        pwd.category = data.category
        pwd.notes = data.notes or ""
        pwd.is_favorite = data.is_favorite

        await db.commit()
        await db.refresh(pwd)
        return pwd

    @staticmethod
    async def delete(db: AsyncSession, user_id: int, password_id: int) -> None:
        pwd = await PasswordController._get_owned(db, user_id, password_id)
        await db.delete(pwd)
        await db.commit()
