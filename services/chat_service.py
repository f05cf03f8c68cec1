"""
Servicio de chat que maneja la lógica de procesamiento de mensajes.

Flujo de un turno: validar usuario, verificar la IA, guardar el mensaje,
armar el contexto, clasificar, generar la respuesta, ejecutar la acción
asociada y guardar la respuesta. Si la IA falla en cualquier paso se
desactiva y el turno se completa con reglas y plantillas.
"""
import logging
import re
import time
from typing import Any, Dict, List, Optional

from config import messages
from config.chat_responses import (
    CANCEL_PHRASES,
    CONFIRM_DELETE_SUGGESTIONS,
    CONFIRM_PHRASES,
    DEFAULT_SUGGESTIONS,
    ERROR_SUGGESTIONS,
    SHORT_REPLY_SUGGESTIONS,
)
from core import settings
from core.exceptions import InvalidUserIdError
from models import (
    DESTRUCTIVE_INTENTS,
    Action,
    AIModeStatus,
    ChatResponse,
    Intent,
    IntentAnalysis,
    MessageRole,
    UserContext,
)
from nlp.intent_classifier import AIIntentClassifier, rule_classifier
from nlp.response_generator import AIResponseGenerator, template_generator
from services.action_executor import ActionExecutor
from services.context_service import ContextService
from services.gemini_service import GeminiService
from utils.chat_history import ChatHistoryStore
from utils.command_handlers import action_summary
from utils.horarios import ScheduleStore
from utils.ia_utils import estimate_tokens
from utils.rutinas import RoutineStore
from utils.sesiones import SessionStore

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$',
    re.IGNORECASE,
)

# Respuestas de esta longitud o menos nunca ejecutan acciones
SHORT_REPLY_MAX_LENGTH = 3


def validate_user_id(user_id: str) -> str:
    """
    Valida que el identificador de usuario sea un UUID y lo devuelve en
    minúsculas, la forma con la que se guardan sus datos.

    Raises:
        InvalidUserIdError: si no lo es
    """
    if not isinstance(user_id, str) or not UUID_PATTERN.match(user_id):
        raise InvalidUserIdError(user_id)
    return user_id.lower()


class AIMode:
    """Interruptor del modo IA: se apaga ante el primer fallo del proveedor."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.disabled_reason: Optional[str] = None if enabled else "IA desactivada"

    def disable(self, reason: str) -> None:
        if self.enabled:
            logger.warning(f"[AI_MODE] Modo IA desactivado: {reason}")
        self.enabled = False
        self.disabled_reason = reason

    def enable(self) -> None:
        logger.info("[AI_MODE] Modo IA activado")
        self.enabled = True
        self.disabled_reason = None


class ChatService:
    """Servicio para manejar la lógica del chat."""

    def __init__(
        self,
        gemini: GeminiService = None,
        routines: RoutineStore = None,
        schedules: ScheduleStore = None,
        sessions: SessionStore = None,
        history: ChatHistoryStore = None,
        ai_mode: AIMode = None,
        confirm_destructive: bool = None,
    ):
        self.gemini = gemini or GeminiService(api_key=settings.GEMINI_API_KEY)
        self.routines = routines or RoutineStore()
        self.schedules = schedules or ScheduleStore()
        self.sessions = sessions or SessionStore()
        self.history = history or ChatHistoryStore()
        if ai_mode is None:
            ai_mode = AIMode(settings.USE_AI and self.gemini.is_configured())
        self.ai_mode = ai_mode
        if confirm_destructive is None:
            confirm_destructive = settings.CONFIRM_DESTRUCTIVE_ACTIONS
        self.confirm_destructive = confirm_destructive

        self.context_service = ContextService(self.routines, self.schedules, self.sessions)
        self.executor = ActionExecutor(self.routines, self.schedules, self.sessions)
        self.rule_classifier = rule_classifier
        self.ai_classifier = AIIntentClassifier(self.gemini)
        self.template_generator = template_generator
        self.ai_generator = AIResponseGenerator(self.gemini)

        # Acciones destructivas esperando confirmación, por usuario
        self._pending: Dict[str, Action] = {}

    async def process_message(self, message: str, user_id: str) -> ChatResponse:
        """
        Procesa un mensaje del usuario y devuelve una respuesta.

        Args:
            message: El mensaje del usuario
            user_id: UUID del usuario

        Returns:
            ChatResponse con el texto, la acción y las sugerencias

        Raises:
            InvalidUserIdError: si `user_id` no es un UUID válido
        """
        started = time.monotonic()
        user_id = validate_user_id(user_id)
        message = message or ""
        logger.info(f"[PROCESS_MESSAGE] {user_id}: {message!r}")

        if self.ai_mode.enabled and not await self.gemini.verify():
            self.ai_mode.disable("No se pudo verificar la conexión con Gemini")

        await self._record(user_id, MessageRole.USER, message)

        try:
            response = await self._resolve_pending(message, user_id)
            intent = response.intent if response else Intent.GENERAL
            if response is None:
                context = await self.context_service.build_context(user_id)
                analysis = await self._classify(message, context)
                intent = analysis.intent
                response = await self._generate(message, analysis, context, user_id)
                await self._maybe_execute(response, message, user_id)

            await self._record(user_id, MessageRole.ASSISTANT, response.message, {
                "intent": intent.value,
                **action_summary(response.action),
                "response_time_ms": int((time.monotonic() - started) * 1000),
                "tokens_used": response.tokens_used or estimate_tokens(response.message),
            })
            return response

        except Exception as e:
            logger.error(f"[PROCESS_MESSAGE] Error procesando mensaje: {e}", exc_info=True)
            text = messages.ERROR_PROCESANDO
            if "quota" in str(e).lower():
                text = messages.ERROR_CUOTA
                self.ai_mode.disable("Cuota de Gemini agotada")

            await self._record(user_id, MessageRole.ASSISTANT, text, {
                "intent": Intent.GENERAL.value,
                "error": True,
                "response_time_ms": int((time.monotonic() - started) * 1000),
            })
            return ChatResponse(message=text, suggestions=list(ERROR_SUGGESTIONS))

    async def _classify(self, message: str, context: UserContext) -> IntentAnalysis:
        if self.ai_mode.enabled:
            try:
                return await self.ai_classifier.classify(message, context)
            except Exception as e:
                logger.warning(f"[DETECT_INTENT] Error con IA, usando reglas: {e}")
                self.ai_mode.disable(f"Error clasificando con Gemini: {e}")
        return await self.rule_classifier.classify(message, context)

    async def _generate(self, message: str, analysis: IntentAnalysis, context: UserContext,
                        user_id: str) -> ChatResponse:
        if self.ai_mode.enabled:
            try:
                history = await self._dialogue(user_id, message)
                return await self.ai_generator.generate(message, analysis, context, history)
            except Exception as e:
                logger.warning(f"[GENERATE_RESPONSE] Error con IA, usando plantillas: {e}")
                self.ai_mode.disable(f"Error generando respuesta con Gemini: {e}")
        return await self.template_generator.generate(message, analysis, context)

    async def _maybe_execute(self, response: ChatResponse, message: str, user_id: str) -> None:
        """Ejecuta la acción de la respuesta salvo que el mensaje sea una respuesta corta."""
        action = response.action
        if action is None:
            return

        if len(message.strip()) <= SHORT_REPLY_MAX_LENGTH:
            logger.info("[ACTION] Mensaje muy corto, no se ejecuta la acción")
            response.suggestions = list(SHORT_REPLY_SUGGESTIONS)
            return

        if self.confirm_destructive and Intent.parse(action.type) in DESTRUCTIVE_INTENTS:
            logger.info(f"[ACTION] {action.type} queda pendiente de confirmación")
            self._pending[user_id] = action
            response.suggestions = list(CONFIRM_DELETE_SUGGESTIONS)
            return

        result = await self.executor.execute(action, user_id)
        template = messages.ACCION_OK if result.success else messages.ACCION_ERROR
        response.message += template.format(mensaje=result.message)

    async def _resolve_pending(self, message: str, user_id: str) -> Optional[ChatResponse]:
        """
        Confirma o descarta la acción pendiente del usuario.

        Devuelve None si no había acción pendiente o si el mensaje no es una
        confirmación ni una cancelación; en ese caso la acción se descarta.
        """
        action = self._pending.pop(user_id, None)
        if action is None:
            return None

        normalized = message.strip().lower()
        if normalized in CONFIRM_PHRASES and len(normalized) > SHORT_REPLY_MAX_LENGTH:
            result = await self.executor.execute(action, user_id)
            template = messages.ACCION_OK if result.success else messages.ACCION_ERROR
            return ChatResponse(
                message=template.format(mensaje=result.message).strip(),
                intent=Intent.parse(action.type),
                action=action,
                suggestions=list(DEFAULT_SUGGESTIONS),
            )

        if normalized in CANCEL_PHRASES:
            return ChatResponse(
                message=messages.HORARIOS_ELIMINACION_CANCELADA,
                suggestions=list(DEFAULT_SUGGESTIONS),
            )

        logger.info(f"[ACTION] Acción pendiente {action.type} descartada")
        return None

    async def _dialogue(self, user_id: str, message: str) -> List[Dict[str, str]]:
        """Turnos previos como diálogo, sin el mensaje actual."""
        try:
            turns = await self.history.list_turns(user_id, limit=settings.CHAT_HISTORY_LIMIT)
        except Exception as e:
            logger.warning(f"[HISTORY] No se pudo leer el historial: {e}")
            return []

        dialogue = [{"role": t.role.value, "content": t.content} for t in turns]
        if dialogue and dialogue[-1] == {"role": MessageRole.USER.value, "content": message}:
            dialogue.pop()
        return dialogue

    async def _record(self, user_id: str, role: MessageRole, content: str,
                      metadata: Dict[str, Any] = None) -> None:
        try:
            await self.history.append_turn(user_id, role, content, metadata)
        except Exception as e:
            logger.warning(f"[HISTORY] No se pudo guardar el mensaje ({role.value}): {e}")

    # Historial y estadísticas
    async def load_chat_history(self, user_id: str, session_id: str = None,
                                limit: int = None) -> List[Dict[str, Any]]:
        user_id = validate_user_id(user_id)
        turns = await self.history.list_turns(
            user_id, session_id=session_id, limit=limit or settings.CHAT_HISTORY_LIMIT
        )
        return [turn.model_dump(mode="json") for turn in turns]

    async def get_chat_sessions(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        user_id = validate_user_id(user_id)
        return await self.history.list_sessions(user_id, limit=limit)

    async def start_chat_session(self, user_id: str) -> str:
        user_id = validate_user_id(user_id)
        return self.history.new_session(user_id)

    async def delete_chat_session(self, user_id: str, session_id: str) -> int:
        user_id = validate_user_id(user_id)
        return await self.history.delete_session(user_id, session_id)

    async def clear_chat_history(self, user_id: str) -> int:
        """Borra todo el historial del usuario y descarta su acción pendiente."""
        user_id = validate_user_id(user_id)
        self._pending.pop(user_id, None)
        deleted = await self.history.delete_all(user_id)
        logger.info(f"[HISTORY] {deleted} mensajes eliminados para {user_id}")
        return deleted

    async def get_chat_stats(self, user_id: str, days: int = 30) -> Dict[str, Any]:
        user_id = validate_user_id(user_id)
        return await self.history.get_stats(user_id, days=days)

    # Modo IA
    def ai_status(self) -> AIModeStatus:
        return AIModeStatus(
            enabled=self.ai_mode.enabled,
            configured=self.gemini.is_configured(),
            disabled_reason=self.ai_mode.disabled_reason,
        )

    def set_ai_enabled(self, enabled: bool, api_key: str = None) -> AIModeStatus:
        """Reactiva o desactiva la IA; opcionalmente cambia la API key."""
        if api_key:
            self.gemini.set_api_key(api_key)

        if not enabled:
            self.ai_mode.disable("Desactivada manualmente")
        elif not self.gemini.is_configured():
            self.ai_mode.disable("Gemini API key no configurada")
        else:
            self.ai_mode.enable()
        return self.ai_status()


# Instancia global del servicio de chat
chat_service = ChatService()
