"""
Clasificación de intenciones.

Dos implementaciones con la misma interfaz `classify(message, context)`:
reglas léxicas (siempre disponibles) y Gemini. El servicio de chat elige
una u otra según el estado del modo IA.
"""
import logging
from typing import Any, Dict

from models import Intent, IntentAnalysis, UserContext
from utils.intent_recognizer import IntentRecognizer, intent_recognizer
from utils.nlp_utils import (
    extract_days,
    extract_routine_entities,
    extract_schedule,
    find_routine_by_name,
)

logger = logging.getLogger(__name__)


def extract_entities(message: str, intent: Intent, context: UserContext) -> Dict[str, Any]:
    """
    Extrae las entidades relevantes según la intención.

    Args:
        message: Texto del usuario
        intent: Intención detectada
        context: Datos del usuario, para resolver rutinas por nombre

    Returns:
        Diccionario con las entidades extraídas
    """
    entities: Dict[str, Any] = {}

    if intent == Intent.CREATE_ROUTINE:
        entities.update(extract_routine_entities(message))
    elif intent == Intent.START_ROUTINE:
        routine = find_routine_by_name(message, context.routines)
        if routine is not None:
            entities["routine_id"] = routine.id
            entities["routine_name"] = routine.title
    elif intent == Intent.CREATE_SCHEDULE:
        entities.update(extract_schedule(message))
    elif intent == Intent.DELETE_SCHEDULES:
        days = extract_days(message, default=())
        if days:
            entities["days"] = days

    return entities


class RuleIntentClassifier:
    """Clasificador determinista basado en reglas."""

    name = "rules"

    def __init__(self, recognizer: IntentRecognizer = None):
        self.recognizer = recognizer or intent_recognizer

    async def classify(self, message: str, context: UserContext) -> IntentAnalysis:
        intent, rule, confidence = self.recognizer.recognize(message)
        logger.info(f"[DETECT_INTENT] Regla '{rule}' -> {intent.value} ({confidence})")
        return IntentAnalysis(
            intent=intent,
            confidence=confidence,
            entities=extract_entities(message, intent, context),
        )


class AIIntentClassifier:
    """Clasificador que delega en Gemini. Los fallos del proveedor se propagan."""

    name = "ai"

    def __init__(self, gemini):
        self.gemini = gemini

    async def classify(self, message: str, context: UserContext) -> IntentAnalysis:
        analysis = await self.gemini.classify_with_ai(message, context)
        logger.info(f"[DETECT_INTENT] IA -> {analysis.intent.value} ({analysis.confidence})")
        return analysis


# Instancia global del clasificador de reglas
rule_classifier = RuleIntentClassifier()
