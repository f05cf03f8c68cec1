"""
Módulo para manejar los comandos específicos del asistente.

Cada intención tiene un manejador que arma la respuesta predefinida y, si
corresponde, la acción a ejecutar. `derive_action` reutiliza la misma lógica
para acompañar las respuestas redactadas por la IA.
"""
from typing import Any, Callable, Dict, List, Optional

from config import messages
from config.chat_responses import CONFIRM_DELETE_SUGGESTIONS, TEMPLATE_SUGGESTIONS, get_suggestions
from models import Action, ChatResponse, Intent, IntentAnalysis, Routine, UserContext
from utils.date_utils import day_names, format_duration, minutes_since
from utils.nlp_utils import (
    DEFAULT_ROUTINE_TITLE,
    extract_days,
    extract_routine_entities,
    find_routine_by_name,
)

# Días que se eliminan si el mensaje no menciona ninguno
DEFAULT_DELETE_DAYS = [2, 3, 4, 5]


def describe_context(context: UserContext) -> str:
    """Resumen de actividad para la intención `get_info`."""
    if not context.has_data:
        return messages.SIN_DATOS

    lines = ["📊 **Resumen de tu actividad:**", ""]

    routines = context.routines
    if routines:
        lines.append(f"📋 **Rutinas:** {len(routines)} total ({len(context.active_routines)} activas)")
        if context.routines_stats:
            most_used = context.routines_stats.most_used
            lines.append(f'   • Más usada: "{most_used.title}" ({most_used.completed_count} veces)')
        if context.last_routine:
            lines.append(f'   • Última: "{context.last_routine.title}"')
    else:
        lines.append("📋 **Rutinas:** Ninguna creada")

    schedules = context.schedules
    if schedules:
        lines.append(f"⏰ **Horarios:** {len(schedules)} total ({len(context.active_schedules)} activos)")
        last = context.last_schedule
        if last:
            lines.append(f"   • Último: {last.day_name} {last.start_time[:5]} - {last.end_time[:5]}")
    else:
        lines.append("⏰ **Horarios:** Ninguno configurado")

    sessions = context.all_sessions
    if sessions:
        stats = context.sessions_stats
        total_duration = stats.total_duration_minutes if stats else 0
        lines.append(f"💼 **Sesiones:** {len(sessions)} total ({len(context.completed_sessions)} completadas)")
        lines.append(f"   • Tiempo total: {format_duration(total_duration)}")
        if stats and stats.average_duration > 0:
            lines.append(f"   • Promedio: {round(stats.average_duration)} min/sesión")
        last = context.last_session
        if last:
            lines.append(f"   • Última: {last.notes or 'Sin proyecto'} ({last.duration_minutes or 0} min)")
    else:
        lines.append("💼 **Sesiones:** Ninguna registrada")

    active = context.active_session
    if active is not None:
        lines.append("")
        lines.append(
            f"🟢 **Sesión activa:** {active.notes or 'Sin proyecto'} "
            f"({minutes_since(active.started_at)} min)"
        )

    return "\n".join(lines)


def _routine_to_start(message: str, analysis: IntentAnalysis, context: UserContext) -> Optional[Routine]:
    routine_id = analysis.entities.get("routine_id")
    if routine_id is not None:
        for routine in context.routines:
            if str(routine.id) == str(routine_id):
                return routine

    named = find_routine_by_name(message, context.routines)
    if named is not None:
        return named

    active = context.active_routines
    return active[0] if active else None


def create_routine_action(message: str, analysis: IntentAnalysis) -> Action:
    entities = extract_routine_entities(message)
    title = entities.get("title") or analysis.entities.get("title") or DEFAULT_ROUTINE_TITLE
    description = entities.get("description") or analysis.entities.get("description") or ""
    return Action(type=Intent.CREATE_ROUTINE.value, data={
        "title": title,
        "description": description,
        "original_message": message,
    })


def delete_days(message: str, analysis: IntentAnalysis) -> List[int]:
    days = extract_days(message, default=())
    if days:
        return days
    ai_days = analysis.entities.get("days")
    if isinstance(ai_days, list) and ai_days and all(isinstance(d, int) and 0 <= d <= 6 for d in ai_days):
        return ai_days
    return list(DEFAULT_DELETE_DAYS)


def handle_create_routine(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    action = create_routine_action(message, analysis)
    text = messages.RUTINA_CREAR.format(titulo=action.data["title"])
    if action.data["description"]:
        text += messages.RUTINA_CREAR_DESCRIPCION.format(descripcion=action.data["description"])
    return ChatResponse(
        message=f"{text}.",
        intent=Intent.CREATE_ROUTINE,
        action=action,
        suggestions=get_suggestions(Intent.CREATE_ROUTINE),
    )


def handle_start_routine(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    """
    Inicia la rutina nombrada en el mensaje o, si no se nombra ninguna, la
    primera rutina activa.
    """
    if not context.routines:
        return ChatResponse(
            message=messages.SIN_RUTINAS,
            intent=Intent.START_ROUTINE,
            action=Action(type=Intent.CREATE_ROUTINE.value, data={
                "title": messages.PRIMERA_RUTINA_TITULO,
                "description": messages.PRIMERA_RUTINA_DESCRIPCION,
            }),
            suggestions=TEMPLATE_SUGGESTIONS["no_routines"],
        )

    routine = _routine_to_start(message, analysis, context)
    if routine is None:
        return ChatResponse(
            message=messages.RUTINAS_INACTIVAS.format(
                total=len(context.routines), titulo=context.routines[0].title
            ),
            intent=Intent.START_ROUTINE,
            suggestions=TEMPLATE_SUGGESTIONS["routines_inactive"],
        )

    if routine.completed_count:
        historial = messages.RUTINA_COMPLETADA_VECES.format(veces=routine.completed_count)
    else:
        historial = messages.RUTINA_PRIMERA_VEZ
    return ChatResponse(
        message=messages.RUTINA_INICIAR.format(titulo=routine.title, historial=historial),
        intent=Intent.START_ROUTINE,
        action=Action(type=Intent.START_ROUTINE.value, data={
            "routine_id": routine.id,
            "routine_name": routine.title,
        }),
        suggestions=get_suggestions(Intent.START_ROUTINE),
    )


def handle_create_schedule(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    return ChatResponse(
        message=messages.HORARIO_CREAR,
        intent=Intent.CREATE_SCHEDULE,
        action=Action(type=Intent.CREATE_SCHEDULE.value, data={
            "step": "type_selection",
            "original_message": message,
        }),
        suggestions=get_suggestions(Intent.CREATE_SCHEDULE),
    )


def handle_delete_schedules(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    days = delete_days(message, analysis)
    return ChatResponse(
        message=messages.HORARIOS_ELIMINAR.format(dias=day_names(days)),
        intent=Intent.DELETE_SCHEDULES,
        action=Action(type=Intent.DELETE_SCHEDULES.value, data={
            "days": days,
            "original_message": message,
        }),
        suggestions=CONFIRM_DELETE_SUGGESTIONS,
    )


def handle_start_work_session(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    if context.has_active_session:
        return ChatResponse(
            message=messages.JORNADA_ACTIVA,
            intent=Intent.START_WORK_SESSION,
            suggestions=TEMPLATE_SUGGESTIONS["session_active"],
        )
    return ChatResponse(
        message=messages.JORNADA_INICIAR,
        intent=Intent.START_WORK_SESSION,
        action=Action(type=Intent.START_WORK_SESSION.value, data={"step": "project_selection"}),
        suggestions=get_suggestions(Intent.START_WORK_SESSION),
    )


def handle_get_info(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    return ChatResponse(
        message=describe_context(context),
        intent=Intent.GET_INFO,
        suggestions=TEMPLATE_SUGGESTIONS["info_report"],
    )


def handle_help(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    return ChatResponse(message=messages.AYUDA, intent=Intent.HELP, suggestions=TEMPLATE_SUGGESTIONS["help"])


def handle_general(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    return ChatResponse(message=messages.NO_ENTENDI, intent=Intent.GENERAL, suggestions=get_suggestions(Intent.GENERAL))


# Mapeo de intenciones a manejadores
HANDLERS: Dict[Intent, Callable[[str, IntentAnalysis, UserContext], ChatResponse]] = {
    Intent.CREATE_ROUTINE: handle_create_routine,
    Intent.START_ROUTINE: handle_start_routine,
    Intent.CREATE_SCHEDULE: handle_create_schedule,
    Intent.DELETE_SCHEDULES: handle_delete_schedules,
    Intent.START_WORK_SESSION: handle_start_work_session,
    Intent.GET_INFO: handle_get_info,
    Intent.HELP: handle_help,
    Intent.GENERAL: handle_general,
}


def process_intent(message: str, analysis: IntentAnalysis, context: UserContext) -> ChatResponse:
    """
    Procesa una intención y devuelve la respuesta predefinida.

    Args:
        message: Mensaje original del usuario
        analysis: Intención y entidades detectadas
        context: Datos actuales del usuario

    Returns:
        ChatResponse: Respuesta al usuario con la acción asociada, si la hay
    """
    handler = HANDLERS.get(analysis.intent, handle_general)
    return handler(message, analysis, context)


def derive_action(message: str, analysis: IntentAnalysis, context: UserContext) -> Optional[Action]:
    """Acción que acompaña a una respuesta redactada por la IA."""
    intent = analysis.intent
    if intent == Intent.CREATE_ROUTINE:
        return create_routine_action(message, analysis)
    if intent == Intent.START_ROUTINE:
        routine = _routine_to_start(message, analysis, context)
        if routine is None:
            return None
        return Action(type=intent.value, data={"routine_id": routine.id, "routine_name": routine.title})
    if intent == Intent.CREATE_SCHEDULE:
        return Action(type=intent.value, data={"step": "type_selection", "original_message": message})
    if intent == Intent.DELETE_SCHEDULES:
        return Action(type=intent.value, data={
            "days": delete_days(message, analysis),
            "original_message": message,
        })
    if intent == Intent.START_WORK_SESSION and not context.has_active_session:
        return Action(type=intent.value, data={"step": "project_selection"})
    return None


def action_summary(action: Optional[Action]) -> Dict[str, Any]:
    """Metadatos de la acción para el historial."""
    if action is None:
        return {"action_type": None, "action_data": None}
    return {"action_type": action.type, "action_data": action.data}
