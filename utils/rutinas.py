"""
Módulo para el manejo de rutinas.
Incluye funciones para crear, listar e iniciar rutinas de un usuario.
"""
import itertools
import logging
from typing import Any, Dict, List, Optional

from models import Routine
from utils.date_utils import get_current_datetime, sort_newest_first

logger = logging.getLogger(__name__)


class RoutineStore:
    """Almacén en memoria de rutinas. Estructura: {user_id: {routine_id: Routine}}."""

    def __init__(self):
        self._rutinas: Dict[str, Dict[int, Routine]] = {}
        self._ids = itertools.count(1)

    async def create_routine(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crea una rutina nueva (inactiva por defecto).

        Args:
            user_id: ID del usuario
            data: {"title": str, "description": str}

        Returns:
            Dict: {"success": bool, "routine"?: Routine, "message"?: str}
        """
        title = (data.get("title") or "").strip()
        if not title:
            return {"success": False, "message": "El título de la rutina es requerido"}

        routine = Routine(
            id=next(self._ids),
            user_id=user_id,
            title=title,
            description=(data.get("description") or "").strip(),
        )
        self._rutinas.setdefault(user_id, {})[routine.id] = routine
        logger.info(f"[RUTINAS] Rutina creada {routine.id} para {user_id}")
        return {"success": True, "routine": routine}

    async def list_routines(self, user_id: str) -> List[Routine]:
        """Rutinas del usuario, la más reciente primero."""
        return sort_newest_first(list(self._rutinas.get(user_id, {}).values()))

    async def get_routine(self, user_id: str, routine_id: int) -> Optional[Routine]:
        return self._rutinas.get(user_id, {}).get(routine_id)

    async def start_routine(self, user_id: str, routine_id: int) -> Dict[str, Any]:
        """Marca la rutina como activa e iniciada ahora."""
        routine = await self.get_routine(user_id, routine_id)
        if routine is None:
            return {"success": False, "message": "Rutina no encontrada"}

        started = routine.model_copy(update={"active": True, "started_at": get_current_datetime()})
        self._rutinas[user_id][routine_id] = started
        return {"success": True, "routine": started, "message": "Rutina iniciada"}
