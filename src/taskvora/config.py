"""
taskvora/config.py: Configurações centralizadas via .env
"""
from cryptography.fernet import Fernet
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "taskvora"
    APP_ENV: str = "development"
    APP_PORT: int = 5001

    # Chave Fernet das senhas salvas, NUNCA muda após o primeiro deploy
    # Gere com: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"
    ENCRYPTION_KEY: str

    # JWT das sessões de usuário
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24

    # Custo do bcrypt para contas novas (baixo de propósito) e para o admin inicial
    BCRYPT_ROUNDS: int = 4
    BCRYPT_ADMIN_ROUNDS: int = 10
    # Hashes com esses custos são refeitos com BCRYPT_ROUNDS no próximo login
    BCRYPT_LEGACY_ROUNDS: list[int] = [10, 8, 6]

    # Admin criado no primeiro startup
    ADMIN_PASSWORD: str
    ADMIN_EMAIL: str = "admin@company.com"
    ADMIN_EMPLOYEE_ID: str = "ADMIN001"
    ADMIN_FULL_NAME: str = "System Admin"
    ADMIN_DEPARTMENT: str = "IT"

    # SMTP, sem usuário/senha o envio entra em modo demo (só loga)
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM: str = "Taskvora <no-reply@taskvora.local>"
    SMTP_TIMEOUT_SECONDS: int = 30

    # Notificações
    NOTIFY_DAYS_AHEAD: int = 3
    NOTIFY_INTERVAL_HOURS: int = 24
    NOTIFY_INITIAL_DELAY_SECONDS: int = 60
    PASSWORD_ALERT_HOUR: int = 9
    REMINDER_ALERT_HOUR: int = 10
    SCHEDULER_ENABLED: bool = True

    # Banco
    DATABASE_URL: str = "sqlite+aiosqlite:///./taskvora.db"

    @field_validator("ENCRYPTION_KEY")
    @classmethod
    def encryption_key_must_be_fernet(cls, v: str) -> str:
        try:
            Fernet(v.encode())
        except Exception:
            raise ValueError(
                "ENCRYPTION_KEY inválida. Gere uma com: "
                "python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\""
            )
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def jwt_secret_must_be_strong(cls, v: str) -> str:
        if not v or v in ("your-secret-key", "changeme", "secret"):
            raise ValueError("JWT_SECRET inválido. Gere um com: openssl rand -hex 32")
        return v

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
