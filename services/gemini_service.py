"""
Servicio de IA generativa (Google Gemini).

Clasifica intenciones y redacta respuestas a partir del contexto real del
usuario. Cualquier fallo del proveedor se traduce a `ProviderError` para que
el servicio de chat pueda caer al modo de reglas.
"""
import logging
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors

from core import settings
from core.exceptions import ProviderError, QuotaExceededError
from models import Intent, IntentAnalysis, UserContext
from utils.ia_utils import (
    build_intent_prompt,
    build_system_prompt,
    extract_json_object,
    format_dialogue,
    limpiar_respuesta,
)
from utils.intent_recognizer import intent_recognizer
from utils.nlp_utils import find_routine_by_name

logger = logging.getLogger(__name__)

QUOTA_MARKERS = ("RESOURCE_EXHAUSTED", "quota", "429")


def _is_quota_error(exc: Exception) -> bool:
    if getattr(exc, "code", None) == 429:
        return True
    text = f"{getattr(exc, 'status', '') or ''} {exc}"
    return any(marker.lower() in text.lower() for marker in QUOTA_MARKERS)


class GeminiService:
    """Adaptador sobre `google-genai`."""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key
        self.model_name = model_name or settings.GEMINI_MODEL
        self._client = None

    def set_api_key(self, api_key: Optional[str]) -> None:
        self.api_key = api_key or None
        self._client = None

    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self):
        if self._client is None:
            if not self.is_configured():
                raise ProviderError("Gemini API key no configurada")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def complete(self, prompt: str) -> str:
        """
        Envía un prompt y devuelve el texto generado.

        Raises:
            QuotaExceededError: si el proveedor rechaza por cuota (429)
            ProviderError: cualquier otro fallo del proveedor
        """
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
            )
        except ProviderError:
            raise
        except genai_errors.APIError as e:
            if _is_quota_error(e):
                raise QuotaExceededError(str(e)) from e
            raise ProviderError(f"Error de Gemini ({e.code}): {e.message}") from e
        except Exception as e:
            if _is_quota_error(e):
                raise QuotaExceededError(str(e)) from e
            raise ProviderError(f"Error de Gemini: {e}") from e

        text = getattr(response, "text", None)
        if not text:
            raise ProviderError("Gemini devolvió una respuesta vacía")
        return text

    async def verify(self) -> bool:
        """Sonda de conectividad. Nunca lanza excepciones."""
        if not self.is_configured():
            return False
        try:
            await self.complete("Responde solo con: OK")
            return True
        except ProviderError as e:
            logger.warning(f"[GEMINI] Verificación fallida: {e}")
            return False

    async def classify_with_ai(self, message: str, context: UserContext) -> IntentAnalysis:
        """
        Clasifica la intención con el modelo.

        Si la respuesta no trae un JSON utilizable se usa el clasificador de
        reglas sin reportar error. Los fallos del proveedor sí se propagan.
        """
        text = await self.complete(build_intent_prompt(message, context))
        parsed = extract_json_object(text)
        if not parsed:
            logger.info("[GEMINI] Respuesta sin JSON, usando reglas")
            return self._rule_analysis(message)

        entities: Dict[str, Any] = parsed.get("entities") or {}
        if not isinstance(entities, dict):
            entities = {}
        entities = {k: v for k, v in entities.items() if v not in (None, "", [])}

        # Resolver el nombre de rutina al id real
        if entities.get("routine_name") and not entities.get("routine_id"):
            routine = find_routine_by_name(str(entities["routine_name"]), context.routines)
            if routine is not None:
                entities["routine_id"] = routine.id

        try:
            confidence = float(parsed.get("confidence", 0.8))
        except (TypeError, ValueError):
            confidence = 0.8

        return IntentAnalysis(
            intent=Intent.parse(parsed.get("intent")),
            confidence=confidence,
            entities=entities,
        )

    async def generate(self, messages: List[Dict[str, str]], context: UserContext) -> str:
        """Genera la respuesta conversacional con el historial como diálogo."""
        prompt = f"{build_system_prompt(context)}\n\n{format_dialogue(messages)}\n\nAsistente:"
        return limpiar_respuesta(await self.complete(prompt))

    @staticmethod
    def _rule_analysis(message: str) -> IntentAnalysis:
        intent, _, confidence = intent_recognizer.recognize(message)
        return IntentAnalysis(intent=intent, confidence=confidence)
