"""
taskvora/routes/reminder_routes.py: Lembretes do usuário logado.

  POST   /api/reminders                → cria (data não pode estar no passado)
  GET    /api/reminders                → lista com days_left/status
  GET    /api/reminders/upcoming       → não concluídos em ?days=7
  PUT    /api/reminders/{id}           → edita
  PUT    /api/reminders/{id}/complete  → conclui (irreversível)
  DELETE /api/reminders/{id}           → remove
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.controllers.reminder_controller import ReminderController, ReminderWrite
from taskvora.database import get_db
from taskvora.exceptions import NotFoundError, ValidationError
from taskvora.middlewares.auth import current_user_id

router = APIRouter(prefix="/api/reminders", tags=["Reminders"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Criar lembrete")
async def add_reminder(
    body: ReminderWrite,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        rem = await ReminderController.add(db, user_id, body)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "message": "Reminder added successfully", "id": rem.id}


@router.get("", summary="Listar lembretes")
async def list_reminders(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return {"success": True, "reminders": await ReminderController.list_for_user(db, user_id)}


@router.get("/upcoming", summary="Lembretes próximos")
async def upcoming_reminders(
    days: int = Query(7, ge=0),
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    reminders = await ReminderController.upcoming(db, user_id, days)
    return {"success": True, "reminders": reminders, "count": len(reminders)}


@router.put("/{reminder_id}", summary="Editar lembrete")
async def update_reminder(
    reminder_id: int,
    body: ReminderWrite,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        await ReminderController.update(db, user_id, reminder_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "message": "Reminder updated successfully"}


@router.put("/{reminder_id}/complete", summary="Concluir lembrete")
async def complete_reminder(
    reminder_id: int,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        await ReminderController.mark_complete(db, user_id, reminder_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Reminder marked as complete"}


@router.delete("/{reminder_id}", summary="Remover lembrete")
async def delete_reminder(
    reminder_id: int,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        await ReminderController.delete(db, user_id, reminder_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Reminder deleted successfully"}
