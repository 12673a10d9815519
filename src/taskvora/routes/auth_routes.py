"""
taskvora/routes/auth_routes.py: Registro, login e perfil.

  POST /api/auth/register  → cria conta de funcionário
  POST /api/auth/login     → JWT de 24h
  GET  /api/auth/profile   → dados do usuário logado
"""
from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.controllers.auth_controller import AuthController, UserLogin, UserRead, UserRegister
from taskvora.database import get_db
from taskvora.exceptions import (
    DuplicateEmailError,
    DuplicateEmployeeIdError,
    InvalidCredentialsError,
    NotFoundError,
)
from taskvora.middlewares.auth import current_user_id

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Registrar usuário")
async def register(body: UserRegister, db: AsyncSession = Depends(get_db)):
    try:
        await AuthController.register(db, body)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DuplicateEmployeeIdError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return {"success": True, "message": "User registered successfully"}


@router.post("/login", summary="Autenticar e obter JWT")
async def login(body: UserLogin, db: AsyncSession = Depends(get_db)):
    try:
        data = await AuthController.login(db, body.email, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    logger.info(f"🔓 Login: {body.email}")
    return {"success": True, "message": "Login successful", **data}


@router.get("/profile", summary="Perfil do usuário logado")
async def profile(user_id: int = Depends(current_user_id), db: AsyncSession = Depends(get_db)):
    try:
        user = await AuthController.get_profile(db, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "user": UserRead.model_validate(user)}
