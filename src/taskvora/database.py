"""
taskvora/database.py: Conexão assíncrona com SQLite via SQLAlchemy.
"""
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from taskvora.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=False)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


class Base(DeclarativeBase):
    pass


def enable_sqlite_foreign_keys(async_engine: AsyncEngine):
    """SQLite só respeita ON DELETE CASCADE com PRAGMA foreign_keys ligado."""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(engine)


async def init_db(async_engine: AsyncEngine = engine):
    """Cria todas as tabelas se não existirem."""
    from taskvora.models import user, app_password, reminder, uploaded_file, email_log  # noqa: F401
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(async_engine: AsyncEngine = engine):
    await async_engine.dispose()


async def get_db():
    """Dependency FastAPI para injetar sessão DB."""
    async with AsyncSessionLocal() as session:
        yield session
