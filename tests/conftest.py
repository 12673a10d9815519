"""
Pytest configuration and fixtures for Taskvora tests.

Every test gets its own SQLite file, a recording mailer and a fixed "today",
so nothing depends on the wall clock or on a real SMTP server.
"""
import os
from datetime import date

import pytest
from cryptography.fernet import Fernet

# Settings() is built at import time, env must be ready before importing taskvora
os.environ.setdefault("ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef0123456789abcdef")
os.environ.setdefault("ADMIN_PASSWORD", "Admin@123")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASSWORD"] = ""
os.environ["SCHEDULER_ENABLED"] = "false"

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from taskvora.database import enable_sqlite_foreign_keys, init_db  # noqa: E402
from taskvora.models.user import ROLE_EMPLOYEE, User  # noqa: E402
from taskvora.services.crypto import CredentialCipher  # noqa: E402
from taskvora.services.passwords import PasswordHasher  # noqa: E402


class RecordingMailer:
    """Email gateway double: records every message, can fail or raise per recipient."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail_for: set[str] = set()
        self.raise_for: set[str] = set()

    async def send(self, to: str, subject: str, body: str) -> bool:
        if to in self.raise_for:
            raise ConnectionError(f"SMTP down for {to}")
        if to in self.fail_for:
            return False
        self.sent.append({"to": to, "subject": subject, "body": body})
        return True

    def to(self, address: str) -> list[dict]:
        return [m for m in self.sent if m["to"] == address]


@pytest.fixture
def today() -> date:
    return date(2025, 6, 15)


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'taskvora_test.db'}")
    enable_sqlite_foreign_keys(eng)
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4, legacy_rounds=(10, 8, 6))


@pytest.fixture
def cipher() -> CredentialCipher:
    return CredentialCipher(Fernet.generate_key().decode())


@pytest.fixture
def make_user(db, hasher):
    """Factory that persists a user and returns it."""
    async def _make(
        email: str = "ana@company.com",
        employee_id: str = "EMP001",
        full_name: str = "Ana Souza",
        password: str = "S3nha!forte",
        rounds: int | None = None,
    ) -> User:
        user = User(
            employee_id=employee_id,
            full_name=full_name,
            email=email,
            department="IT",
            role=ROLE_EMPLOYEE,
            password_hash=hasher.hash(password, rounds=rounds),
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make


@pytest.fixture
def add_password(db, cipher):
    """Inserts a credential row directly (no expiry normalisation)."""
    from taskvora.models.app_password import AppPassword

    async def _add(user: User, expiry_date: date, app_name: str = "Jira", username: str = "ana") -> AppPassword:
        pwd = AppPassword(
            user_id=user.id,
            app_name=app_name,
            username=username,
            encrypted_password=cipher.encrypt("hunter2"),
            expiry_date=expiry_date,
        )
        db.add(pwd)
        await db.commit()
        await db.refresh(pwd)
        return pwd

    return _add


@pytest.fixture
def add_reminder(db):
    """Inserts a reminder row directly (past dates allowed)."""
    from taskvora.models.reminder import Reminder

    async def _add(user: User, reminder_date: date, title: str = "Sprint review", completed: bool = False) -> Reminder:
        rem = Reminder(
            user_id=user.id,
            title=title,
            reminder_date=reminder_date,
            is_completed=completed,
        )
        db.add(rem)
        await db.commit()
        await db.refresh(rem)
        return rem

    return _add
