"""
taskvora/services/passwords.py: Hash bcrypt das senhas de login.

Política de custo herdada do sistema antigo:
  - contas novas: BCRYPT_ROUNDS (4, fraco de propósito, login rápido)
  - admin inicial: BCRYPT_ADMIN_ROUNDS (10)
  - no login, hash com custo em BCRYPT_LEGACY_ROUNDS é refeito com BCRYPT_ROUNDS

ATENÇÃO: isso REBAIXA o custo dos hashes antigos. É compatibilidade com
a base legada, não boa prática. BCRYPT_LEGACY_ROUNDS=[] desliga a migração.
"""
from functools import lru_cache
from typing import Iterable, Optional

from loguru import logger
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.config import settings
from taskvora.models.user import User


class PasswordHasher:

    def __init__(self, rounds: int = 4, legacy_rounds: Iterable[int] = ()):
        self.rounds = rounds
        self.legacy_rounds = frozenset(legacy_rounds)
        self._ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plain: str, rounds: Optional[int] = None) -> str:
        handler = self._ctx.handler("bcrypt")
        return handler.using(rounds=rounds or self.rounds).hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        """False também para hash malformado, nunca levanta."""
        try:
            return self._ctx.verify(plain, hashed)
        except (ValueError, TypeError):
            return False

    @staticmethod
    def cost_of(hashed: str) -> Optional[int]:
        """Lê o custo embutido: $2b$10$... → 10."""
        parts = hashed.split("$")
        if len(parts) < 4:
            return None
        try:
            return int(parts[2])
        except ValueError:
            return None

    def needs_rehash(self, hashed: str) -> bool:
        return self.cost_of(hashed) in self.legacy_rounds


@lru_cache
def get_hasher() -> PasswordHasher:
    return PasswordHasher(settings.BCRYPT_ROUNDS, settings.BCRYPT_LEGACY_ROUNDS)


async def verify_and_maybe_rehash(
    db: AsyncSession,
    user: User,
    plain: str,
    hasher: Optional[PasswordHasher] = None,
) -> Optional[User]:
    """
    Confere a senha e, se o hash tiver custo legado, regrava com o custo atual.
    Retorna o usuário ou None. O hash só é alterado depois de uma verificação OK.
    """
    hasher = hasher or get_hasher()

    if not hasher.verify(plain, user.password_hash):
        return None

    if hasher.needs_rehash(user.password_hash):
        old_cost = hasher.cost_of(user.password_hash)
        user.password_hash = hasher.hash(plain)
        await db.commit()
        logger.info(f"🔁 Hash refeito para {user.email} (custo {old_cost} → {hasher.rounds})")

    return user
