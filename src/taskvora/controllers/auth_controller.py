"""
taskvora/controllers/auth_controller.py: Registro, login e perfil de usuários.
"""
from datetime import datetime
from typing import Optional

from loguru import logger
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.config import settings
from taskvora.exceptions import (
    DuplicateEmailError,
    DuplicateEmployeeIdError,
    InvalidCredentialsError,
    NotFoundError,
)
from taskvora.models.user import ROLE_ADMIN, ROLE_EMPLOYEE, User
from taskvora.services.jwt_service import create_token
from taskvora.services.passwords import PasswordHasher, get_hasher, verify_and_maybe_rehash


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class UserRegister(BaseModel):
    employee_id: str = Field(min_length=1, max_length=50)
    full_name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    department: Optional[str] = None
    password: str = Field(min_length=1)


class UserLogin(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: int
    employee_id: str
    full_name: str
    email: str
    department: Optional[str]
    role: str
    created_at: datetime

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_email(email: str) -> str:
    """E-mails são gravados e comparados em minúsculas."""
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class AuthController:

    @staticmethod
    async def _check_duplicates(db: AsyncSession, email: str, employee_id: str):
        if await db.scalar(select(User).where(func.lower(User.email) == email)):
            raise DuplicateEmailError(email)
        if await db.scalar(select(User).where(User.employee_id == employee_id)):
            raise DuplicateEmployeeIdError(employee_id)

    @staticmethod
    async def register(
        db: AsyncSession,
        data: UserRegister,
        hasher: Optional[PasswordHasher] = None,
    ) -> User:
        """
        Cria conta de funcionário.
        Lança DuplicateEmailError / DuplicateEmployeeIdError, nessa ordem.
        """
        hasher = hasher or get_hasher()
        email = normalize_email(data.email)

        await AuthController._check_duplicates(db, email, data.employee_id)

        user = User(
            employee_id=data.employee_id,
            full_name=data.full_name,
            email=email,
            department=data.department,
            role=ROLE_EMPLOYEE,
            password_hash=hasher.hash(data.password),
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            # outro registro com o mesmo e-mail/matrícula entrou entre a checagem e o commit
            await db.rollback()
            await AuthController._check_duplicates(db, email, data.employee_id)
            raise
        await db.refresh(user)
        logger.info(f"👤 Usuário registrado: {user.email} ({user.employee_id})")
        return user

    @staticmethod
    async def authenticate(
        db: AsyncSession,
        email: str,
        password: str,
        hasher: Optional[PasswordHasher] = None,
    ) -> User:
        """Lança InvalidCredentialsError se e-mail ou senha não batem."""
        user = await db.scalar(select(User).where(func.lower(User.email) == normalize_email(email)))
        if not user:
            raise InvalidCredentialsError()

        verified = await verify_and_maybe_rehash(db, user, password, hasher)
        if not verified:
            logger.warning(f"🚫 Login falhou para {email}")
            raise InvalidCredentialsError()
        return verified

    @staticmethod
    async def login(
        db: AsyncSession,
        email: str,
        password: str,
        hasher: Optional[PasswordHasher] = None,
    ) -> dict:
        """Autentica e retorna JWT + dados públicos do usuário."""
        user = await AuthController.authenticate(db, email, password, hasher)
        return {
            **create_token(user),
            "user": UserRead.model_validate(user).model_dump(mode="json"),
        }

    @staticmethod
    async def get_profile(db: AsyncSession, user_id: int) -> User:
        user = await db.scalar(select(User).where(User.id == user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    async def ensure_admin(db: AsyncSession, hasher: Optional[PasswordHasher] = None) -> bool:
        """
        Cria o admin inicial se ainda não existir (chamado no startup).
        Retorna True se criou.
        """
        hasher = hasher or get_hasher()

        admin_email = normalize_email(settings.ADMIN_EMAIL)
        if await db.scalar(select(User).where(func.lower(User.email) == admin_email)):
            logger.info(f"✅ Admin já existe ({settings.ADMIN_EMAIL})")
            return False

        db.add(User(
            employee_id=settings.ADMIN_EMPLOYEE_ID,
            full_name=settings.ADMIN_FULL_NAME,
            email=admin_email,
            department=settings.ADMIN_DEPARTMENT,
            role=ROLE_ADMIN,
            password_hash=hasher.hash(settings.ADMIN_PASSWORD, rounds=settings.BCRYPT_ADMIN_ROUNDS),
        ))
        await db.commit()
        logger.info(f"🔑 Admin inicial criado ({settings.ADMIN_EMAIL})")
        return True
