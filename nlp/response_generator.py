"""
Generación de respuestas: plantillas predefinidas o texto redactado por Gemini.
"""
import logging
from typing import Dict, List

from config.chat_responses import get_suggestions
from models import ChatResponse, IntentAnalysis, UserContext
from utils.command_handlers import derive_action, process_intent
from utils.ia_utils import estimate_tokens

logger = logging.getLogger(__name__)


class TemplateResponseGenerator:
    """Respuestas predefinidas en español, una por intención."""

    name = "templates"

    async def generate(self, message: str, analysis: IntentAnalysis, context: UserContext,
                       history: List[Dict[str, str]] = None) -> ChatResponse:
        return process_intent(message, analysis, context)


class AIResponseGenerator:
    """
    Redacta la respuesta con Gemini y le asocia la misma acción que
    derivarían las plantillas.
    """

    name = "ai"

    def __init__(self, gemini):
        self.gemini = gemini

    async def generate(self, message: str, analysis: IntentAnalysis, context: UserContext,
                       history: List[Dict[str, str]] = None) -> ChatResponse:
        dialogue = list(history or [])
        dialogue.append({"role": "user", "content": message})

        text = await self.gemini.generate(dialogue, context)
        action = derive_action(message, analysis, context)
        logger.info(f"[GENERATE_RESPONSE] IA: {len(text)} caracteres, acción {action.type if action else None}")

        return ChatResponse(
            message=text,
            intent=analysis.intent,
            action=action,
            suggestions=get_suggestions(analysis.intent),
            tokens_used=estimate_tokens(text),
        )


# Instancia global
template_generator = TemplateResponseGenerator()
