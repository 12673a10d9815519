"""
taskvora/services/email_service.py: Envio de e-mail em texto puro via SMTP.

Sem SMTP_USER/SMTP_PASSWORD no .env → modo demo: a mensagem inteira vai
para o log e nada sai da máquina.

send() NUNCA levanta: falha de transporte é logada e vira False.
Sem retry e sem timeout além do SMTP_TIMEOUT_SECONDS do socket (best-effort).
"""
import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from functools import lru_cache

from loguru import logger

from taskvora.config import Settings, settings

_PLACEHOLDER_USERS = ("", "your_email@gmail.com")
_PLACEHOLDER_PASSWORDS = ("", "your_app_password")


class EmailService:

    def __init__(self, config: Settings):
        self.host = config.SMTP_HOST
        self.port = config.SMTP_PORT
        self.user = config.SMTP_USER
        self.password = config.SMTP_PASSWORD
        self.sender = config.SMTP_FROM
        self.timeout = config.SMTP_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return (
            self.user not in (None, *_PLACEHOLDER_USERS)
            and self.password not in (None, *_PLACEHOLDER_PASSWORDS)
        )

    def _build_message(self, to: str, subject: str, body: str) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "plain", "utf-8"))
        return msg

    def _deliver(self, msg: MIMEMultipart):
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.user, self.password)
            server.send_message(msg)

    async def send(self, to: str, subject: str, body: str) -> bool:
        """Envia (ou simula) um e-mail. True se entregue ao SMTP ou logado em modo demo."""
        if not self.is_configured:
            logger.info(
                f"📧 [DEMO MODE] E-mail que seria enviado:\n"
                f"From: {self.sender}\n"
                f"To: {to}\n"
                f"Subject: {subject}\n"
                f"Body:\n{body}\n"
                f"--- fim do e-mail simulado ---"
            )
            return True

        try:
            # smtplib é bloqueante, roda fora do event loop
            await asyncio.to_thread(self._deliver, self._build_message(to, subject, body))
        except Exception as e:
            logger.error(f"❌ Falha ao enviar e-mail para {to}: {e}")
            return False

        logger.info(f"📧 E-mail enviado para {to}: {subject}")
        return True


@lru_cache
def get_email_service() -> EmailService:
    return EmailService(settings)
