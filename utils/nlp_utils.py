"""
Extracción de entidades a partir de texto libre.

Cada familia de patrones es una lista de reglas con nombre evaluadas en
orden; la primera regla que produce un valor gana. El orden importa: varios
mensajes coinciden con más de un patrón.
"""
import logging
import re
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from utils.date_utils import ALL_DAYS, WEEKDAYS, to_24h

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = "09:00:00"
DEFAULT_END_TIME = "17:00:00"
DEFAULT_ROUTINE_TITLE = "Nueva Rutina"

_VALUE = r'["\']?([^,"\'.]+)["\']?'
_PERIOD = r'(am|pm|a\.m\.|p\.m\.)'


class PatternRule(NamedTuple):
    name: str
    pattern: "re.Pattern"


def _rule(name: str, pattern: str) -> PatternRule:
    return PatternRule(name, re.compile(pattern, re.IGNORECASE))


def _mentions_description(value: str) -> bool:
    lowered = value.lower()
    return "descripción" in lowered or "descripcion" in lowered


TITLE_RULES: List[PatternRule] = [
    _rule("ponle_label", r'(?:ponle|poner)\s+(?:rutina|nombre|titulo|título)[\s:]*' + _VALUE),
    _rule("ponle_rutina_nueva", r'ponle\s+(rutina\s+nueva)'),
    _rule(
        "labelled",
        r'(?:rutina|llama|título|titulo|nombre)[\s:]+(?:llamada\s+|titulada\s+|con nombre\s+)?' + _VALUE,
    ),
    _rule(
        "labelled_verb",
        r'(?:crear|nueva|agregar)\s+(?:rutina|tarea)\s+(?:llamada|titulada|con nombre)[\s:]*' + _VALUE,
    ),
    _rule("positional", r'(?:crear|nueva)\s+rutina[,\s]+' + _VALUE),
    _rule("rutina_nueva", r'(rutina\s+nueva)'),
]

DESCRIPTION_RULES: List[PatternRule] = [
    _rule(
        "ponle_description",
        r'(?:en|la)\s+(?:descripción|descripcion|desc)\s+(?:ponle|poner)[\s:]*' + _VALUE,
    ),
    _rule("labelled", r'(?:descripción|descripcion|desc)[\s:]+' + _VALUE),
    _rule("joined", r'(?:y|con)\s+(?:en|la)?\s*(?:descripción|descripcion|desc)[\s:]*' + _VALUE),
    _rule("hecha_por_gemini", r'(hecha por gemini)'),
]


def _first_match(rules: Sequence[PatternRule], message: str,
                 accept: Callable[[str], bool] = lambda value: True) -> Optional[str]:
    for rule in rules:
        match = rule.pattern.search(message)
        if not match:
            continue
        value = match.group(1).strip()
        if value and accept(value):
            logger.debug(f"[ENTITIES] Regla '{rule.name}' -> '{value}'")
            return value
    return None


def extract_title(message: str) -> Optional[str]:
    title = _first_match(TITLE_RULES, message, accept=lambda v: not _mentions_description(v))
    if title and title.lower() == "rutina nueva":
        return "rutina nueva"
    return title


def extract_description(message: str) -> Optional[str]:
    description = _first_match(DESCRIPTION_RULES, message)
    if description and description.lower() == "hecha por gemini":
        return "hecha por gemini"
    return description


def extract_routine_entities(message: str) -> Dict[str, str]:
    """
    Extrae título y descripción de una rutina.

    Devuelve solo las claves encontradas; quien llama aplica los valores por
    defecto (`Nueva Rutina` y descripción vacía).
    """
    entities: Dict[str, str] = {}
    if not message:
        return entities

    title = extract_title(message)
    if title:
        entities["title"] = title

    description = extract_description(message)
    if description:
        entities["description"] = description

    return entities


# Horarios

class TimeRule(NamedTuple):
    name: str
    pattern: "re.Pattern"
    parse: Callable[["re.Match"], Optional[tuple]]


def _valid(hour: int, minute: int, period: Optional[str]) -> bool:
    if period:
        return 1 <= hour <= 12 and 0 <= minute <= 59
    return 0 <= hour <= 23 and 0 <= minute <= 59


def _range(h1, m1, p1, h2, m2, p2) -> Optional[tuple]:
    h1, m1, h2, m2 = int(h1), int(m1 or 0), int(h2), int(m2 or 0)
    if not (_valid(h1, m1, p1) and _valid(h2, m2, p2)):
        return None
    return to_24h(h1, m1, p1), to_24h(h2, m2, p2)


TIME_RULES: List[TimeRule] = [
    TimeRule(
        "hour_period_range",
        re.compile(r'(\d{1,2})\s*' + _PERIOD + r'\s*a\s*(\d{1,2})\s*' + _PERIOD, re.IGNORECASE),
        lambda m: _range(m.group(1), 0, m.group(2), m.group(3), 0, m.group(4)),
    ),
    TimeRule(
        "clock_period_range",
        re.compile(r'(\d{1,2}):(\d{2})\s*' + _PERIOD + r'\s*a\s*(\d{1,2}):(\d{2})\s*' + _PERIOD, re.IGNORECASE),
        lambda m: _range(m.group(1), m.group(2), m.group(3), m.group(4), m.group(5), m.group(6)),
    ),
    # Minutos en un solo extremo: "9:30am a 5pm", "9am a 5:30pm"
    TimeRule(
        "mixed_period_range",
        re.compile(r'(\d{1,2})(?::(\d{2}))?\s*' + _PERIOD + r'\s*a\s*(\d{1,2})(?::(\d{2}))?\s*' + _PERIOD,
                   re.IGNORECASE),
        lambda m: _range(m.group(1), m.group(2), m.group(3), m.group(4), m.group(5), m.group(6)),
    ),
    TimeRule(
        "de_period_range",
        re.compile(r'de\s*(\d{1,2})\s*' + _PERIOD + r'\s*a\s*(\d{1,2})\s*' + _PERIOD, re.IGNORECASE),
        lambda m: _range(m.group(1), 0, m.group(2), m.group(3), 0, m.group(4)),
    ),
    TimeRule(
        "clock_range",
        re.compile(r'(\d{1,2}):(\d{2})\s*a\s*(\d{1,2}):(\d{2})', re.IGNORECASE),
        lambda m: _range(m.group(1), m.group(2), None, m.group(3), m.group(4), None),
    ),
    TimeRule(
        "bare_range",
        re.compile(r'(\d{1,2})\s*a\s*(\d{1,2})', re.IGNORECASE),
        lambda m: _range(m.group(1), 0, None, m.group(2), 0, None),
    ),
]


class DayRule(NamedTuple):
    name: str
    keywords: tuple
    days: List[int]


DAY_RULES: List[DayRule] = [
    DayRule("lunes_a_viernes", ("lunes a viernes",), [1, 2, 3, 4, 5]),
    DayRule("martes_a_viernes", ("martes a viernes",), [2, 3, 4, 5]),
    DayRule("lunes", ("lunes",), [1]),
    DayRule("martes", ("martes",), [2]),
    DayRule("miercoles", ("miércoles", "miercoles"), [3]),
    DayRule("jueves", ("jueves",), [4]),
    DayRule("viernes", ("viernes",), [5]),
    DayRule("sabado", ("sábado", "sabado"), [6]),
    DayRule("domingo", ("domingo",), [0]),
    DayRule("fin_de_semana", ("fin de semana",), [0, 6]),
    DayRule("todos_los_dias", ("todos los días", "todos los dias"), list(ALL_DAYS)),
]


def extract_times(message: str) -> tuple:
    """Devuelve (hora_inicio, hora_fin) en formato `HH:MM:SS`."""
    lowered = (message or "").lower()
    for rule in TIME_RULES:
        match = rule.pattern.search(lowered)
        if not match:
            continue
        parsed = rule.parse(match)
        if parsed:
            logger.debug(f"[ENTITIES] Regla horaria '{rule.name}' -> {parsed}")
            return parsed
    return DEFAULT_START_TIME, DEFAULT_END_TIME


def extract_days(message: str, default: Sequence[int] = WEEKDAYS) -> List[int]:
    """Días de la semana mencionados (0 = Domingo); `default` si no hay ninguno."""
    lowered = (message or "").lower()
    for rule in DAY_RULES:
        if any(keyword in lowered for keyword in rule.keywords):
            return list(rule.days)
    return list(default)


def extract_schedule(message: str) -> Dict[str, Any]:
    start_time, end_time = extract_times(message)
    return {
        "start_time": start_time,
        "end_time": end_time,
        "days": extract_days(message),
    }


def find_routine_by_name(message: str, routines: List[Any]) -> Optional[Any]:
    """Busca una rutina cuyo título contenga el texto o esté contenido en él."""
    if not message:
        return None
    lowered = message.lower()
    for routine in routines:
        title = (routine.title or "").lower()
        if title and (lowered in title or title in lowered):
            return routine
    return None
