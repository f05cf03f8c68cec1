"""
Módulo para reconocer la intención del usuario en mensajes de texto.

Clasificador léxico determinista: una lista de reglas con nombre que se
evalúan en orden; gana la primera que coincide. Se usa cuando la IA no está
disponible o falla.
"""
import logging
from typing import Callable, Iterable, List, NamedTuple, Tuple

from models import Intent

logger = logging.getLogger(__name__)

TRIVIAL_REPLIES = {"si", "sí", "no", "ok", "okay"}

ROUTINE_CREATE_VERBS = ("crear", "nueva", "agregar", "poner")
SCHEDULE_CREATE_VERBS = ("crear", "nuevo", "nueva", "agregar", "poner")
DELETE_VERBS = ("eliminar", "borrar", "quitar")
ROUTINE_NOUNS = ("rutina", "tarea")
SESSION_NOUNS = ("jornada", "trabajo", "sesión", "sesion")
INFO_MARKERS = ("última", "ultima", "reciente", "cuánt", "cuant", "cuál", "cual", "qué", "que")
HELP_MARKERS = ("ayuda", "qué puedo", "que puedo", "cómo", "como")


def _contains_any(text: str, words: Iterable[str]) -> bool:
    return any(word in text for word in words)


class IntentRule(NamedTuple):
    """Regla léxica: si `matches(texto)` es verdadero se asigna `intent`."""
    name: str
    intent: Intent
    confidence: float
    matches: Callable[[str], bool]


def _is_trivial(text: str) -> bool:
    # Las confirmaciones cortas nunca deben disparar una acción
    return text in TRIVIAL_REPLIES or len(text) < 3


RULES: List[IntentRule] = [
    IntentRule("trivial_reply", Intent.GENERAL, 0.5, _is_trivial),
    IntentRule(
        "create_routine", Intent.CREATE_ROUTINE, 0.9,
        lambda t: _contains_any(t, ROUTINE_CREATE_VERBS) and _contains_any(t, ROUTINE_NOUNS),
    ),
    IntentRule(
        "start_routine", Intent.START_ROUTINE, 0.8,
        lambda t: "iniciar" in t and "rutina" in t,
    ),
    IntentRule(
        "create_schedule", Intent.CREATE_SCHEDULE, 0.8,
        lambda t: _contains_any(t, SCHEDULE_CREATE_VERBS) and "horario" in t,
    ),
    IntentRule(
        "delete_schedules", Intent.DELETE_SCHEDULES, 0.8,
        lambda t: _contains_any(t, DELETE_VERBS) and "horario" in t,
    ),
    IntentRule(
        "start_work_session", Intent.START_WORK_SESSION, 0.8,
        lambda t: "iniciar" in t and _contains_any(t, SESSION_NOUNS),
    ),
    IntentRule("get_info", Intent.GET_INFO, 0.7, lambda t: _contains_any(t, INFO_MARKERS)),
    IntentRule("help", Intent.HELP, 0.9, lambda t: _contains_any(t, HELP_MARKERS)),
]


class IntentRecognizer:
    """Reconoce la intención en mensajes de texto."""

    def __init__(self, rules: List[IntentRule] = None):
        self.rules = rules if rules is not None else RULES

    def recognize(self, text: str) -> Tuple[Intent, str, float]:
        """
        Reconoce la intención en un mensaje de texto.

        Args:
            text: Texto a analizar

        Returns:
            Tuple[Intent, str, float]: (intención, nombre de la regla, confianza)
        """
        if not text or not isinstance(text, str):
            return Intent.GENERAL, "empty", 0.5

        normalized = text.lower().strip()

        for rule in self.rules:
            if rule.matches(normalized):
                logger.debug(f"[INTENT_RULES] Regla '{rule.name}' -> {rule.intent.value}")
                return rule.intent, rule.name, rule.confidence

        return Intent.GENERAL, "fallback", 0.5


# Instancia global del reconocedor de intenciones
intent_recognizer = IntentRecognizer()


def classify(message: str) -> Intent:
    """Función total: siempre devuelve una intención de la enumeración."""
    intent, _, _ = intent_recognizer.recognize(message)
    return intent
