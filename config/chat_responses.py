"""
Constantes para las sugerencias del chat.
"""
from typing import Dict, List

from models import Intent

DEFAULT_SUGGESTIONS = ["Iniciar rutina", "Crear horario", "Iniciar jornada", "Ver ayuda"]

# Respuesta corta ante una acción: se ofrece confirmar en lugar de ejecutar
SHORT_REPLY_SUGGESTIONS = ["Sí", "No", "Cancelar"]

# Sugerencias seguras cuando algo falla
ERROR_SUGGESTIONS = ["Iniciar rutina", "Crear horario", "Eliminar horarios", "Iniciar jornada"]

CONFIRM_DELETE_SUGGESTIONS = ["Sí, eliminar", "No, cancelar", "Ver mis horarios"]

# Mapeo de intenciones a sugerencias (respuestas generadas por IA)
INTENT_SUGGESTIONS: Dict[Intent, List[str]] = {
    Intent.START_ROUTINE: ["Sí, iniciar", "Elegir otra rutina", "Ver todas las rutinas"],
    Intent.CREATE_ROUTINE: ["Crear otra rutina", "Ver mis rutinas", "Iniciar una rutina"],
    Intent.CREATE_SCHEDULE: ["Horario de trabajo", "Horario de estudio", "Horario personalizado"],
    Intent.DELETE_SCHEDULES: CONFIRM_DELETE_SUGGESTIONS,
    Intent.START_WORK_SESSION: ["Proyecto actual", "Nuevo proyecto", "Sin proyecto específico"],
    Intent.GET_INFO: ["Iniciar rutina", "Crear horario", "Ver más detalles"],
}

# Variantes de las plantillas
TEMPLATE_SUGGESTIONS: Dict[str, List[str]] = {
    "routines_inactive": ["Activar rutina", "Crear nueva rutina", "Ver todas las rutinas"],
    "no_routines": ["Crear nueva rutina", "Ver horarios", "Iniciar jornada"],
    "session_active": ["Pausar sesión", "Continuar", "Ver estado actual"],
    "info_report": ["Iniciar rutina", "Crear horario", "Ver estadísticas", "Iniciar jornada"],
    "help": ["Iniciar rutina", "Crear horario", "Iniciar jornada", "Ver mi actividad"],
}

# Frases que confirman o cancelan una acción pendiente
CONFIRM_PHRASES = {"sí, eliminar", "si, eliminar", "confirmar", "confirmo"}
CANCEL_PHRASES = {"no, cancelar", "cancelar"}


def get_suggestions(intent: Intent) -> List[str]:
    """Sugerencias para una intención, o las de uso general."""
    return list(INTENT_SUGGESTIONS.get(intent, DEFAULT_SUGGESTIONS))
