"""
taskvora/services/crypto.py: Criptografia Fernet (AES-128-CBC + HMAC-SHA256).

A ENCRYPTION_KEY fica APENAS no .env, nunca no banco.
O servidor consegue decifrar tudo: não é um cofre zero-knowledge.
"""
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from taskvora.config import settings
from taskvora.exceptions import DecryptionError


class CredentialCipher:
    """Cifra/decifra as senhas de aplicações com uma chave fixa injetada."""

    def __init__(self, key: str):
        try:
            self._fernet = Fernet(key.encode())
        except Exception as e:
            raise RuntimeError(
                f"❌ ENCRYPTION_KEY inválida!\n"
                f"Gere uma com: python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\"\n"
                f"Erro: {e}"
            )

    def encrypt(self, plain_text: str) -> str:
        """Cifra texto puro → retorna string base64 segura para o banco."""
        return self._fernet.encrypt(plain_text.encode()).decode()

    def decrypt(self, cipher_text: str) -> str:
        """Decifra valor do banco → texto puro. Lança DecryptionError se chave errada."""
        try:
            return self._fernet.decrypt(cipher_text.encode()).decode()
        except (InvalidToken, TypeError, ValueError):
            raise DecryptionError("Falha ao decifrar: token inválido ou ENCRYPTION_KEY incorreta.")


@lru_cache
def get_cipher() -> CredentialCipher:
    """Cipher do processo, montado com a chave do .env."""
    return CredentialCipher(settings.ENCRYPTION_KEY)


def rotate_key(old_key: str, new_key: str, cipher_text: str) -> str:
    """
    Utilitário para rotação emergencial da ENCRYPTION_KEY.
    Decifra com a chave antiga e cifra com a nova.

    USO: Execute via script admin, nunca via API.
    """
    plain = CredentialCipher(old_key).decrypt(cipher_text)
    return CredentialCipher(new_key).encrypt(plain)
