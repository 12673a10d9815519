"""
taskvora/middlewares/auth.py: Autenticação das rotas por JWT Bearer.

O token vem de POST /api/auth/login e carrega:
  sub (id do usuário), email, role, employee_id
"""
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskvora.models.user import ROLE_ADMIN
from taskvora.services.jwt_service import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


async def require_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> dict:
    """
    Valida o Bearer JWT. Retorna o payload com sub (id do usuário) e role.
    Lança 401 se ausente, inválido ou expirado.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token missing.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return verify_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired. Please log in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token.",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def current_user_id(payload: dict = Depends(require_user)) -> int:
    return int(payload["sub"])


async def require_admin(payload: dict = Depends(require_user)) -> dict:
    if payload.get("role") != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required.",
        )
    return payload
