"""
taskvora/routes/notification_routes.py: Contador de e-mails e disparos manuais.

  GET  /api/notifications/email-count  → quantos e-mails o usuário já recebeu
  POST /api/notifications/send-now     → resumo só para o usuário logado
  POST /api/notifications/run-digest   → (admin) dispara o resumo de todos em background
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.controllers.notification_controller import NotificationController
from taskvora.database import get_db
from taskvora.exceptions import NotFoundError
from taskvora.jobs.scheduler import daily_digest_job
from taskvora.middlewares.auth import current_user_id, require_admin

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("/email-count", summary="Total de e-mails recebidos")
async def email_count(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return {"count": await NotificationController.email_count(db, user_id)}


@router.post("/send-now", summary="Enviar resumo agora")
async def send_now(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        result = await NotificationController.send_now(db, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if not result["sent"]:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to send notification email. Please contact your administrator.",
        )
    return {
        "success": True,
        "message": "Notification email sent to your registered email.",
        **result,
    }


@router.post("/run-digest", summary="Disparar resumo diário (admin)")
async def run_digest(background_tasks: BackgroundTasks, _: dict = Depends(require_admin)):
    background_tasks.add_task(daily_digest_job)
    return {"success": True, "message": "Daily digest started in background."}
