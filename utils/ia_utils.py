"""
Utilidades para hablar con el modelo generativo: construcción de prompts,
limpieza de respuestas y extracción de JSON de una respuesta libre.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from models import UserContext
from utils.date_utils import format_duration

logger = logging.getLogger(__name__)


def limpiar_respuesta(respuesta: str) -> str:
    """
    Limpia la respuesta generada por el modelo: espacios redundantes al
    inicio y final y líneas en blanco repetidas.
    """
    if not respuesta:
        return ""
    respuesta = respuesta.replace('\r', '')
    respuesta = re.sub(r'[ \t]+\n', '\n', respuesta)
    respuesta = re.sub(r'\n{3,}', '\n\n', respuesta)
    return respuesta.strip()


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Devuelve el primer objeto JSON que aparece en `text`, o None.

    Recorre el texto contando llaves (ignorando las que van dentro de
    cadenas) para aislar el objeto aunque el modelo agregue texto o bloques
    de código alrededor.
    """
    if not text:
        return None

    start = text.find('{')
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == '\\':
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth == 0:
                    candidate = text[start:index + 1]
                    try:
                        parsed = json.loads(candidate)
                    except json.JSONDecodeError:
                        logger.debug(f"[IA] JSON inválido descartado: {candidate[:80]}")
                        break
                    if isinstance(parsed, dict):
                        return parsed
                    break
        start = text.find('{', start + 1)
    return None


def estimate_tokens(text: str) -> int:
    """Aproximación de tokens: un token cada cuatro caracteres."""
    return -(-len(text or "") // 4)


def _routines_summary(context: UserContext) -> str:
    if not context.routines:
        return "Ninguna"
    return ", ".join(
        f'"{r.title}" (ID: {r.id}, activa: {r.active})' for r in context.routines
    )


def _schedules_summary(context: UserContext) -> str:
    if not context.schedules:
        return "Ninguno"
    return ", ".join(f"{s.day_name} {s.start_time}-{s.end_time}" for s in context.schedules)


def build_intent_prompt(message: str, context: UserContext) -> str:
    """Prompt para que el modelo devuelva un único objeto JSON con la intención."""
    return f"""Analiza la siguiente intención del usuario en el contexto de TimeTrack:

MENSAJE: "{message}"

CONTEXTO DISPONIBLE:
- Rutinas existentes: {_routines_summary(context)}
- Horarios existentes: {_schedules_summary(context)}
- Sesión activa: {'Sí' if context.has_active_session else 'No'}

INTENCIONES POSIBLES:
- start_routine: Iniciar una rutina EXISTENTE (el usuario menciona el nombre o ID de una rutina que ya existe)
- create_routine: CREAR una nueva rutina
- create_schedule: Crear un nuevo horario para uno o varios días
- delete_schedules: Eliminar horarios de uno o varios días
- start_work_session: Iniciar una sesión de trabajo/jornada
- get_info: Obtener información o estadísticas ("cuántas rutinas tengo", "mis estadísticas")
- help: Solicitar ayuda sobre cómo usar la app
- general: Conversación general que no requiere acción

IMPORTANTE:
- Para create_routine extrae "title" y "description" (opcional)
- Para start_routine extrae "routine_id" o "routine_name"
- Para horarios extrae "days" (lista, 0=Domingo ... 6=Sábado), "start_time" y "end_time" (HH:MM)
- Respuestas cortas como "sí", "no" u "ok" son "general"

Responde SOLO con un JSON válido en este formato exacto:
{{
  "intent": "nombre_de_la_intencion",
  "confidence": 0.95,
  "entities": {{
    "title": "título de la rutina si se menciona",
    "description": "descripción si se menciona",
    "routine_id": 1,
    "routine_name": "nombre de rutina existente si se menciona",
    "days": [1],
    "start_time": "HH:MM",
    "end_time": "HH:MM"
  }}
}}"""


def build_system_prompt(context: UserContext) -> str:
    """Prompt de sistema con el esquema exacto de los datos y los datos reales del usuario."""
    routines = context.routines
    schedules = context.schedules
    completed = context.completed_sessions
    stats = context.sessions_stats

    total_time = format_duration(stats.total_duration_minutes) if stats else "0h 0m"
    average = f"{round(stats.average_duration)} min/sesión" if stats and stats.average_duration else "N/A"
    routine_titles = ", ".join(f'"{r.title}"' for r in routines) or "ninguna"
    schedule_list = ", ".join(f"{s.day_name} {s.start_time}-{s.end_time}" for s in schedules) or "ninguno asignado"

    return f"""Eres un asistente de IA para la aplicación TimeTrack, una app de gestión de tiempo y productividad.

ESTRUCTURA EXACTA DE DATOS:

📋 RUTINAS (Routine):
- Campos: id (number), title (string), description (string), active (boolean), completed_count (number), created_at (string)
- Para CREAR rutina: REQUIERE {{ title: string, description?: string }}
- Las rutinas se crean inactivas por defecto
- Lista actual: {_routines_summary(context) if routines else 'NINGUNA'}

⏰ HORARIOS (Schedule):
- Campos: id (number), day_of_week (number 0-6), day_name (string), start_time ("HH:MM:SS"), end_time ("HH:MM:SS"), active (boolean)
- Días: 0=Domingo, 1=Lunes, 2=Martes, 3=Miércoles, 4=Jueves, 5=Viernes, 6=Sábado
- Para CREAR horario: un registro por día con {{ day_of_week, day_name, start_time, end_time, active? }}
- Lista actual: {_schedules_summary(context) if schedules else 'NINGUNO'}

💼 SESIONES DE TRABAJO (WorkSession):
- Campos: id, started_at (ISO), ended_at (ISO | null), active (boolean), duration_minutes (number | null), notes (string)
- Para INICIAR sesión: REQUIERE {{ notes: string }} (puede ser "")
- Total: {len(context.all_sessions)} ({len(completed)} completadas)
- Tiempo total: {total_time}
- Promedio: {average}
- Sesión activa: {'Sí' if context.has_active_session else 'No'}

REGLAS CRÍTICAS:
⚠️ NO INVENTES DATOS que no estén en el contexto
⚠️ NO uses campos que no existen en las estructuras anteriores
⚠️ Solo menciona rutinas, horarios o sesiones que realmente existan en el contexto
⚠️ Si faltan datos para crear algo, pregunta antes de crearlo

INSTRUCCIONES:
- Responde en español, con tono amigable y profesional
- Si el usuario quiere CREAR una rutina y no da título, pregunta por él
- Si el usuario quiere CREAR un horario, confirma día, hora de inicio y hora de fin
- Menciona estadísticas SOLO si existen en el contexto

EJEMPLOS DE RESPUESTAS CORRECTAS:
- "Tienes {len(routines)} rutinas: {routine_titles}. ¿Cuál quieres iniciar?"
- "Para crear una rutina necesito el título. ¿Cómo quieres llamarla?"
- "Has completado {len(completed)} sesiones de trabajo."
- "Tus horarios actuales: {schedule_list}\""""


def format_dialogue(messages: List[Dict[str, str]]) -> str:
    """Concatena turnos previos como diálogo plano."""
    lines = []
    for msg in messages:
        role = "Asistente" if msg.get("role") == "assistant" else "Usuario"
        lines.append(f"{role}: {msg.get('content', '')}")
    return "\n\n".join(lines)
