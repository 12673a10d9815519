"""
taskvora/services/jwt_service.py: Criação e validação de JWTs de sessão de usuário.
"""
from datetime import datetime, timedelta, timezone

import jwt

from taskvora.config import settings
from taskvora.models.user import User


def create_token(user: User) -> dict:
    """
    Cria JWT para um usuário autenticado.
    Retorna dict com access_token e expires_in_hours.
    """
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=settings.JWT_EXPIRE_HOURS)

    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "employee_id": user.employee_id,
        "iat": now,
        "exp": expires_at,
    }

    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in_hours": settings.JWT_EXPIRE_HOURS,
    }


def verify_token(token: str) -> dict:
    """
    Valida JWT e retorna payload.
    Lança jwt.ExpiredSignatureError ou jwt.InvalidTokenError se inválido.
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
