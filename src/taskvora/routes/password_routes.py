"""
taskvora/routes/password_routes.py: Senhas de aplicações do usuário logado.

  POST   /api/passwords            → adiciona (cifra a senha)
  GET    /api/passwords            → lista decifrada, com days_left/status
  GET    /api/passwords/expiring   → vencendo em ?days=7
  PUT    /api/passwords/{id}       → substitui todos os campos
  DELETE /api/passwords/{id}       → remove
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.controllers.password_controller import PasswordController, PasswordWrite
from taskvora.database import get_db
from taskvora.exceptions import NotFoundError
from taskvora.middlewares.auth import current_user_id

router = APIRouter(prefix="/api/passwords", tags=["Passwords"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Adicionar senha")
async def add_password(
    body: PasswordWrite,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    pwd = await PasswordController.add(db, user_id, body)
    return {"success": True, "message": "Password added successfully", "id": pwd.id}


@router.get("", summary="Listar senhas")
async def list_passwords(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return {"success": True, "passwords": await PasswordController.list_for_user(db, user_id)}


@router.get("/expiring", summary="Senhas expirando")
async def expiring_passwords(
    days: int = Query(7, ge=0),
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    passwords = await PasswordController.expiring(db, user_id, days)
    return {"success": True, "passwords": passwords, "count": len(passwords)}


@router.put("/{password_id}", summary="Atualizar senha")
async def update_password(
    password_id: int,
    body: PasswordWrite,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        await PasswordController.update(db, user_id, password_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Password updated successfully"}


@router.delete("/{password_id}", summary="Remover senha")
async def delete_password(
    password_id: int,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        await PasswordController.delete(db, user_id, password_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Password deleted successfully"}
