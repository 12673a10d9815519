"""
taskvora/main.py: Ponto de entrada do Taskvora.

Inicializa o banco, garante o admin inicial, registra as rotas e sobe o
APScheduler com os jobs de notificação por e-mail.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from taskvora import __version__
from taskvora.config import settings
from taskvora.controllers.auth_controller import AuthController
from taskvora.database import AsyncSessionLocal, close_db, init_db
from taskvora.jobs.scheduler import scheduler, setup_jobs
from taskvora.routes.auth_routes import router as auth_router
from taskvora.routes.file_routes import router as file_router
from taskvora.routes.notification_routes import router as notification_router
from taskvora.routes.password_routes import router as password_router
from taskvora.routes.reminder_routes import router as reminder_router
from taskvora.services.email_service import get_email_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ---------- Startup ----------
    logger.info(f"🚀 {settings.APP_NAME} iniciando…")
    await init_db()
    async with AsyncSessionLocal() as db:
        await AuthController.ensure_admin(db)

    if not get_email_service().is_configured:
        logger.warning("📧 SMTP não configurado, e-mails em modo demo (só log)")

    if settings.SCHEDULER_ENABLED:
        setup_jobs(scheduler)
    else:
        logger.info("⏸️  Scheduler desabilitado (SCHEDULER_ENABLED=false)")

    yield

    # ---------- Shutdown ----------
    if scheduler.running:
        scheduler.shutdown(wait=False)
    await close_db()
    logger.info("🛑 Taskvora encerrado.")


app = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    description="Senhas de aplicações com validade e lembretes com aviso por e-mail.",
    lifespan=lifespan,
    docs_url="/docs" if settings.APP_ENV == "development" else None,
    redoc_url=None,
)

app.include_router(auth_router)
app.include_router(password_router)
app.include_router(reminder_router)
app.include_router(notification_router)
app.include_router(file_router)


@app.get("/api/health", tags=["Health"])
async def health():
    return {"status": "OK", "service": "Taskvora", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "taskvora.main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.APP_ENV == "development",
    )
