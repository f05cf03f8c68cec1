"""
Módulo para el manejo de horarios asignados por día de la semana.
"""
import itertools
import logging
from typing import Any, Dict, Iterable, List

from core.exceptions import StoreError
from models import Schedule
from utils.date_utils import sort_newest_first

logger = logging.getLogger(__name__)


class ScheduleStore:
    """Almacén en memoria de horarios. Estructura: {user_id: [Schedule]}."""

    def __init__(self):
        self._horarios: Dict[str, List[Schedule]] = {}
        self._ids = itertools.count(1)

    async def insert(self, record: Dict[str, Any]) -> Schedule:
        """
        Inserta un horario para un día.

        Raises:
            StoreError: si el registro no es válido
        """
        try:
            schedule = Schedule(id=next(self._ids), **record)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Horario inválido: {e}") from e

        self._horarios.setdefault(schedule.user_id, []).append(schedule)
        return schedule

    async def delete_where(self, user_id: str, days: Iterable[int]) -> int:
        """Elimina los horarios del usuario cuyos días estén en `days`. Devuelve cuántos se eliminaron."""
        days = set(days)
        current = self._horarios.get(user_id, [])
        kept = [s for s in current if s.day_of_week not in days]
        self._horarios[user_id] = kept
        deleted = len(current) - len(kept)
        logger.info(f"[HORARIOS] {deleted} horarios eliminados para {user_id} (días {sorted(days)})")
        return deleted

    async def list_schedules(self, user_id: str) -> List[Schedule]:
        """Horarios del usuario, el más reciente primero."""
        return sort_newest_first(list(self._horarios.get(user_id, [])))
