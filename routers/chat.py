import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_chat_service, get_pagination_params, get_user_id
from api.errors import NotFoundError, ValidationError
from core.exceptions import InvalidUserIdError
from models import AIModeStatus, AIModeUpdate, ChatRequest, ChatResponse
from services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/", response_model=ChatResponse)
async def chat_endpoint(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    Endpoint principal para el chat.
    Clasifica el mensaje, genera la respuesta y ejecuta la acción asociada.
    """
    logger.info(f"[CHAT_ENDPOINT] Mensaje de {request.user_id}")
    try:
        return await service.process_message(request.message, request.user_id)
    except InvalidUserIdError as e:
        raise ValidationError(e) from e


@router.get("/history")
async def chat_history(
    user_id: str = Depends(get_user_id),
    session_id: Optional[str] = None,
    limit: int = Depends(get_pagination_params),
    service: ChatService = Depends(get_chat_service),
) -> Dict[str, Any]:
    """Historial de mensajes, de una sesión o los más recientes."""
    messages = await service.load_chat_history(user_id, session_id=session_id, limit=limit)
    return {"messages": messages, "count": len(messages)}


@router.delete("/history")
async def clear_chat_history(
    user_id: str = Depends(get_user_id),
    service: ChatService = Depends(get_chat_service),
) -> Dict[str, Any]:
    """Elimina todas las conversaciones del usuario."""
    return {"deleted_messages": await service.clear_chat_history(user_id)}


@router.get("/sessions")
async def list_chat_sessions(
    user_id: str = Depends(get_user_id),
    limit: int = Depends(get_pagination_params),
    service: ChatService = Depends(get_chat_service),
) -> List[Dict[str, Any]]:
    return await service.get_chat_sessions(user_id, limit=limit)


@router.post("/sessions")
async def new_chat_session(
    user_id: str = Depends(get_user_id),
    service: ChatService = Depends(get_chat_service),
) -> Dict[str, str]:
    """Abre una conversación nueva; los mensajes siguientes se agrupan en ella."""
    return {"session_id": await service.start_chat_session(user_id)}


@router.delete("/sessions/{session_id}")
async def delete_chat_session(
    session_id: str,
    user_id: str = Depends(get_user_id),
    service: ChatService = Depends(get_chat_service),
) -> Dict[str, Any]:
    deleted = await service.delete_chat_session(user_id, session_id)
    if not deleted:
        raise NotFoundError(session_id)
    return {"session_id": session_id, "deleted_messages": deleted}


@router.get("/stats")
async def chat_stats(
    user_id: str = Depends(get_user_id),
    days: int = Query(30, ge=1, le=365),
    service: ChatService = Depends(get_chat_service),
) -> Dict[str, Any]:
    return await service.get_chat_stats(user_id, days=days)


@router.get("/ai", response_model=AIModeStatus)
async def ai_status(service: ChatService = Depends(get_chat_service)):
    return service.ai_status()


@router.put("/ai", response_model=AIModeStatus)
async def update_ai_mode(
    update: AIModeUpdate,
    service: ChatService = Depends(get_chat_service),
):
    """Reactiva o desactiva el modo IA (y opcionalmente cambia la API key)."""
    return service.set_ai_enabled(update.enabled, api_key=update.api_key)
