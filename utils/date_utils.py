"""
Módulo para manejo de fechas, horas y días de la semana.
"""
import math
from datetime import datetime
from typing import Iterable, List, Optional, Union

import pytz
from dateutil import parser as date_parser

from core import settings

# Configuración de zona horaria por defecto
DEFAULT_TIMEZONE = settings.DEFAULT_TIMEZONE

# Domingo = 0, igual que el almacenamiento de horarios
DAY_NAMES = ['Domingo', 'Lunes', 'Martes', 'Miércoles', 'Jueves', 'Viernes', 'Sábado']

WEEKDAYS = [1, 2, 3, 4, 5]
ALL_DAYS = [0, 1, 2, 3, 4, 5, 6]


def get_current_datetime(timezone: str = None) -> datetime:
    """Obtiene la fecha y hora actual en la zona horaria especificada."""
    tz = pytz.timezone(timezone) if timezone else pytz.timezone(DEFAULT_TIMEZONE)
    return datetime.now(tz)


def ensure_aware(dt: Union[datetime, str, None]) -> Optional[datetime]:
    """Acepta un datetime o una cadena ISO y devuelve un datetime con zona horaria."""
    if dt is None:
        return None
    if isinstance(dt, str):
        dt = date_parser.isoparse(dt)
    if dt.tzinfo is None:
        dt = pytz.timezone(DEFAULT_TIMEZONE).localize(dt)
    return dt


def day_name(day: int) -> str:
    """Nombre en español del día (0 = Domingo)."""
    return DAY_NAMES[day % 7]


def day_names(days: Iterable[int]) -> str:
    return ", ".join(day_name(d) for d in days)


def to_24h(hour: int, minute: int = 0, period: Optional[str] = None) -> str:
    """
    Convierte una hora a formato 24h `HH:MM:SS`.

    `period` es el sufijo am/pm tal como aparece en el texto (p. ej. "pm",
    "a.m."). Sin sufijo la hora se toma tal cual. 12 AM es 00 y 12 PM es 12.
    """
    if period:
        is_pm = 'p' in period.lower()
        if is_pm and hour != 12:
            hour += 12
        elif not is_pm and hour == 12:
            hour = 0
    return f"{hour:02d}:{minute:02d}:00"


def minutes_since(dt: Union[datetime, str], now: datetime = None) -> int:
    """Minutos enteros transcurridos desde `dt`."""
    start = ensure_aware(dt)
    now = now or get_current_datetime()
    return max(0, math.floor((now - start).total_seconds() / 60))


def format_duration(minutes: Union[int, float]) -> str:
    """Ej: 135 -> "2h 15m"."""
    minutes = int(minutes or 0)
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest}m"


def sort_newest_first(items: List, key: str = "created_at") -> List:
    # El id desempata registros creados en el mismo instante
    return sorted(
        items,
        key=lambda item: (ensure_aware(getattr(item, key)), getattr(item, "id", 0)),
        reverse=True,
    )
