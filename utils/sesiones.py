"""
Módulo para el manejo de sesiones (jornadas) de trabajo.

Un usuario tiene como máximo una sesión activa; la regla se aplica al
escribir, no al leer.
"""
import itertools
import logging
from typing import Any, Dict, List, Optional

from models import WorkSession
from utils.date_utils import get_current_datetime, minutes_since, sort_newest_first

logger = logging.getLogger(__name__)


class SessionStore:
    """Almacén en memoria de sesiones de trabajo. Estructura: {user_id: [WorkSession]}."""

    def __init__(self):
        self._sesiones: Dict[str, List[WorkSession]] = {}
        self._ids = itertools.count(1)

    async def start_session(self, user_id: str, notes: str = "") -> Dict[str, Any]:
        """
        Inicia una jornada de trabajo.

        Returns:
            Dict: {"success": bool, "session"?: WorkSession, "message"?: str}
        """
        if await self.get_active_session(user_id) is not None:
            return {"success": False, "message": "Ya tienes una sesión de trabajo activa"}

        session = WorkSession(id=next(self._ids), user_id=user_id, notes=(notes or "").strip())
        self._sesiones.setdefault(user_id, []).append(session)
        logger.info(f"[SESIONES] Sesión {session.id} iniciada para {user_id}")
        return {"success": True, "session": session}

    async def end_session(self, user_id: str, notes: Optional[str] = None) -> Dict[str, Any]:
        """Finaliza la sesión activa y calcula su duración en minutos."""
        active = await self.get_active_session(user_id)
        if active is None:
            return {"success": False, "message": "No hay sesión activa"}

        now = get_current_datetime()
        update = {
            "active": False,
            "ended_at": now,
            "duration_minutes": minutes_since(active.started_at, now),
        }
        if notes is not None:
            update["notes"] = notes.strip()
        ended = active.model_copy(update=update)

        sessions = self._sesiones[user_id]
        sessions[sessions.index(active)] = ended
        return {"success": True, "session": ended, "message": "Sesión finalizada"}

    async def get_active_session(self, user_id: str) -> Optional[WorkSession]:
        for session in self._sesiones.get(user_id, []):
            if session.active:
                return session
        return None

    async def list_sessions(self, user_id: str, limit: Optional[int] = None) -> List[WorkSession]:
        """Sesiones del usuario, la más reciente primero."""
        sessions = sort_newest_first(list(self._sesiones.get(user_id, [])))
        return sessions[:limit] if limit else sessions
