"""
Dependencias comunes para los endpoints de la API.
"""
from fastapi import Query

from api.errors import PaginationError, ValidationError
from core.exceptions import InvalidUserIdError
from services import chat_service
from services.chat_service import ChatService, validate_user_id

MAX_LIMIT = 100


def get_chat_service() -> ChatService:
    """Devuelve la instancia global del servicio de chat."""
    return chat_service


def get_user_id(user_id: str = Query(..., description="UUID del usuario")) -> str:
    """Valida el UUID del usuario recibido como parámetro de consulta."""
    try:
        return validate_user_id(user_id)
    except InvalidUserIdError as e:
        raise ValidationError(e) from e


def get_pagination_params(limit: int = 20) -> int:
    """Valida el parámetro de paginación `limit`."""
    if limit <= 0 or limit > MAX_LIMIT:
        raise PaginationError(MAX_LIMIT)
    return limit
