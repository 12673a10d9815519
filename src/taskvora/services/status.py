"""
taskvora/services/status.py: Dias restantes e status de senhas/lembretes.

Funções puras. Toda conta de data usa a data LOCAL do processo
(date.today()) e trunca horários: algo que vence hoje às 23h conta 0 dias.
Quem precisa de "hoje" fixo (testes, jobs) passa today= explicitamente.
"""
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

DateLike = Union[date, datetime, str]

WARNING_DAYS = 7
INFO_DAYS = 30
SOON_DAYS = 3


class PasswordStatus(str, Enum):
    SAFE = "safe"
    INFO = "info"
    WARNING = "warning"
    EXPIRED = "expired"


class ReminderStatus(str, Enum):
    UPCOMING = "upcoming"
    SOON = "soon"
    TODAY = "today"
    OVERDUE = "overdue"
    COMPLETED = "completed"


def local_today() -> date:
    return date.today()


def to_date(value: Optional[DateLike]) -> Optional[date]:
    """
    Normaliza para date. Aceita date, datetime e strings ISO
    ("2025-03-01", "2025-03-01T10:00:00", "2025-03-01 10:00").
    Retorna None se não der para interpretar.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def days_remaining(target: DateLike, today: Optional[date] = None) -> int:
    """Diferença em dias de calendário entre hoje e target (negativo = passou)."""
    target_date = to_date(target)
    if target_date is None:
        raise ValueError(f"Data inválida: {target!r}")
    return (target_date - (today or local_today())).days


def password_status(days_left: int) -> PasswordStatus:
    if days_left <= 0:
        return PasswordStatus.EXPIRED
    if days_left <= WARNING_DAYS:
        return PasswordStatus.WARNING
    if days_left <= INFO_DAYS:
        return PasswordStatus.INFO
    return PasswordStatus.SAFE


def reminder_status(days_left: int, is_completed: bool = False) -> ReminderStatus:
    if is_completed:
        return ReminderStatus.COMPLETED
    if days_left < 0:
        return ReminderStatus.OVERDUE
    if days_left == 0:
        return ReminderStatus.TODAY
    if days_left <= SOON_DAYS:
        return ReminderStatus.SOON
    return ReminderStatus.UPCOMING


def safe_days_remaining(target: Optional[DateLike], today: Optional[date] = None) -> Optional[int]:
    """Como days_remaining, mas devolve None em vez de levantar, para listagens."""
    target_date = to_date(target)
    if target_date is None:
        return None
    return (target_date - (today or local_today())).days
