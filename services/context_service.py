"""
Servicio de contexto: reúne rutinas, horarios y sesiones del usuario y
calcula las estadísticas que usan los prompts de IA y las respuestas
informativas.
"""
import asyncio
import logging
from typing import List, Optional

from core import settings
from models import (
    Routine,
    RoutinesStats,
    Schedule,
    SchedulesStats,
    SessionsStats,
    UserContext,
    WorkSession,
)
from utils.horarios import ScheduleStore
from utils.rutinas import RoutineStore
from utils.sesiones import SessionStore

logger = logging.getLogger(__name__)

RECENT_SESSIONS = 5


def calculate_routines_stats(routines: List[Routine]) -> Optional[RoutinesStats]:
    if not routines:
        return None

    most_used = routines[0]
    for routine in routines[1:]:
        if routine.completed_count > most_used.completed_count:
            most_used = routine

    return RoutinesStats(
        total=len(routines),
        active=sum(1 for r in routines if r.active),
        inactive=sum(1 for r in routines if not r.active),
        most_used=most_used,
        last_created=routines[0],
        average_completion=sum(r.completed_count for r in routines) / len(routines),
    )


def calculate_schedules_stats(schedules: List[Schedule]) -> Optional[SchedulesStats]:
    if not schedules:
        return None
    return SchedulesStats(
        total=len(schedules),
        active=sum(1 for s in schedules if s.active),
        inactive=sum(1 for s in schedules if not s.active),
        last_created=schedules[0],
    )


def calculate_sessions_stats(sessions: List[WorkSession]) -> Optional[SessionsStats]:
    """Duración total y promedio solo sobre sesiones finalizadas."""
    if not sessions:
        return None

    completed = [s for s in sessions if not s.active]
    total_duration = sum(s.duration_minutes or 0 for s in completed)
    return SessionsStats(
        total=len(sessions),
        completed=len(completed),
        active=sum(1 for s in sessions if s.active),
        total_duration_minutes=total_duration,
        average_duration=total_duration / len(completed) if completed else 0,
        last_completed=completed[0] if completed else None,
    )


class ContextService:
    """Construye el `UserContext` de cada turno a partir de los almacenes."""

    def __init__(self, routines: RoutineStore, schedules: ScheduleStore,
                 sessions: SessionStore, session_limit: int = None):
        self.routines = routines
        self.schedules = schedules
        self.sessions = sessions
        self.session_limit = session_limit or settings.CONTEXT_SESSION_LIMIT

    async def build_context(self, user_id: str) -> UserContext:
        """
        Lee los datos del usuario en paralelo. Nunca lanza: una lectura
        fallida se reemplaza por una colección vacía.
        """
        results = await asyncio.gather(
            self.routines.list_routines(user_id),
            self.schedules.list_schedules(user_id),
            self.sessions.get_active_session(user_id),
            self.sessions.list_sessions(user_id, limit=self.session_limit),
            return_exceptions=True,
        )

        names = ("rutinas", "horarios", "sesión activa", "sesiones")
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.warning(f"[CONTEXT] No se pudieron leer {name} de {user_id}: {result}")

        routines, schedules, active_session, all_sessions = (
            None if isinstance(r, Exception) else r for r in results
        )
        routines = routines or []
        schedules = schedules or []
        all_sessions = all_sessions or []

        context = UserContext(
            routines=routines,
            schedules=schedules,
            recent_sessions=all_sessions[:RECENT_SESSIONS],
            all_sessions=all_sessions,
            active_session=active_session,
            routines_stats=calculate_routines_stats(routines),
            schedules_stats=calculate_schedules_stats(schedules),
            sessions_stats=calculate_sessions_stats(all_sessions),
        )
        logger.info(
            f"[CONTEXT] {len(routines)} rutinas, {len(schedules)} horarios, "
            f"{len(all_sessions)} sesiones (activa: {context.has_active_session})"
        )
        return context
