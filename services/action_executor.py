"""
Ejecutor de acciones: traduce una `Action` en llamadas a los almacenes de
rutinas, horarios y sesiones.
"""
import logging
from typing import Any, Awaitable, Callable, Dict

from config import messages
from core.exceptions import StoreError
from models import Action, ActionResult, Intent
from utils.command_handlers import DEFAULT_DELETE_DAYS
from utils.date_utils import day_name, day_names
from utils.horarios import ScheduleStore
from utils.nlp_utils import extract_schedule
from utils.rutinas import RoutineStore
from utils.sesiones import SessionStore

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Ejecuta acciones sobre los datos del usuario. Nunca lanza excepciones."""

    def __init__(self, routines: RoutineStore, schedules: ScheduleStore, sessions: SessionStore):
        self.routines = routines
        self.schedules = schedules
        self.sessions = sessions
        self._handlers: Dict[str, Callable[[Dict[str, Any], str], Awaitable[ActionResult]]] = {
            Intent.START_ROUTINE.value: self.start_routine,
            Intent.CREATE_ROUTINE.value: self.create_routine,
            Intent.CREATE_SCHEDULE.value: self.create_schedule,
            Intent.DELETE_SCHEDULES.value: self.delete_schedules,
            Intent.START_WORK_SESSION.value: self.start_work_session,
        }

    async def execute(self, action: Action, user_id: str) -> ActionResult:
        handler = self._handlers.get(action.type)
        if handler is None:
            logger.warning(f"[ACTION] Tipo de acción desconocido: {action.type}")
            return ActionResult(success=False, message=messages.ACCION_NO_RECONOCIDA)

        try:
            result = await handler(action.data or {}, user_id)
        except Exception as e:
            logger.error(f"[ACTION] Error ejecutando {action.type}: {e}", exc_info=True)
            return ActionResult(success=False, message=messages.ERROR_ACCION)

        logger.info(f"[ACTION] {action.type} -> {'ok' if result.success else 'error'}: {result.message}")
        return result

    async def start_routine(self, data: Dict[str, Any], user_id: str) -> ActionResult:
        routine_id = data.get("routine_id")
        if routine_id is None:
            return ActionResult(success=False, message=messages.RUTINA_ID_REQUERIDO)

        try:
            result = await self.routines.start_routine(user_id, int(routine_id))
        except (StoreError, ValueError) as e:
            logger.error(f"[ACTION] No se pudo iniciar la rutina {routine_id}: {e}")
            return ActionResult(success=False, message=messages.RUTINA_ERROR_INICIAR)

        if not result.get("success"):
            return ActionResult(success=False, message=result.get("message") or messages.RUTINA_ERROR_INICIAR)
        return ActionResult(success=True, message=messages.RUTINA_INICIADA, data={"routine_id": int(routine_id)})

    async def create_routine(self, data: Dict[str, Any], user_id: str) -> ActionResult:
        title = (data.get("title") or "").strip()
        if not title:
            return ActionResult(success=False, message=messages.RUTINA_TITULO_REQUERIDO)

        try:
            result = await self.routines.create_routine(user_id, {
                "title": title,
                "description": (data.get("description") or "").strip(),
            })
        except StoreError as e:
            logger.error(f"[ACTION] No se pudo crear la rutina: {e}")
            return ActionResult(success=False, message=messages.RUTINA_ERROR_CREAR)

        routine = result.get("routine")
        if not result.get("success") or routine is None:
            return ActionResult(success=False, message=result.get("message") or messages.RUTINA_ERROR_CREAR)
        return ActionResult(
            success=True,
            message=messages.RUTINA_CREADA.format(titulo=routine.title),
            data={"routine_id": routine.id},
        )

    async def create_schedule(self, data: Dict[str, Any], user_id: str) -> ActionResult:
        """
        Crea un horario por día a partir del mensaje original.

        Los días que fallan se registran y se omiten; la acción falla solo si
        no se pudo crear ninguno.
        """
        schedule = extract_schedule(data.get("original_message") or "")
        start_time, end_time = schedule["start_time"], schedule["end_time"]

        created = []
        # Una inserción por día, en orden, para saber qué días fallaron
        for day in schedule["days"]:
            try:
                record = await self.schedules.insert({
                    "user_id": user_id,
                    "day_of_week": day,
                    "day_name": day_name(day),
                    "start_time": start_time,
                    "end_time": end_time,
                    "active": True,
                })
            except StoreError as e:
                logger.warning(f"[ACTION] Error creando horario para {day_name(day)}: {e}")
                continue
            created.append(record)

        if not created:
            return ActionResult(success=False, message=messages.HORARIO_ERROR)

        return ActionResult(
            success=True,
            message=messages.HORARIO_CREADO.format(
                cantidad=len(created),
                dias=", ".join(s.day_name for s in created),
                inicio=start_time,
                fin=end_time,
            ),
            data={"schedule_ids": [s.id for s in created]},
        )

    async def delete_schedules(self, data: Dict[str, Any], user_id: str) -> ActionResult:
        days = data.get("days") or list(DEFAULT_DELETE_DAYS)
        try:
            deleted = await self.schedules.delete_where(user_id, days)
        except StoreError as e:
            logger.error(f"[ACTION] No se pudieron eliminar horarios: {e}")
            return ActionResult(success=False, message=messages.HORARIOS_ERROR_ELIMINAR)

        return ActionResult(
            success=True,
            message=messages.HORARIOS_ELIMINADOS.format(dias=day_names(days)),
            data={"deleted_days": days, "deleted": deleted},
        )

    async def start_work_session(self, data: Dict[str, Any], user_id: str) -> ActionResult:
        try:
            result = await self.sessions.start_session(user_id, notes=data.get("notes") or "")
        except StoreError as e:
            logger.error(f"[ACTION] No se pudo iniciar la jornada: {e}")
            return ActionResult(success=False, message=messages.JORNADA_ERROR)

        session = result.get("session")
        if not result.get("success") or session is None:
            return ActionResult(success=False, message=result.get("message") or messages.JORNADA_ERROR)
        return ActionResult(success=True, message=messages.JORNADA_INICIADA, data={"session_id": session.id})
