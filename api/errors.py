"""
Manejo centralizado de errores para la API.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from core.exceptions import InvalidUserIdError


class APIError(HTTPException):
    """Clase base para errores de la API."""
    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundError(APIError):
    """Error 404: la sesión de chat no existe o no tiene mensajes."""
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Sesión de chat no encontrada: {session_id}",
        )


class ValidationError(APIError):
    """Error 422: el user_id recibido no es un UUID."""
    def __init__(self, error: InvalidUserIdError) -> None:
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[{"loc": ["user_id"], "msg": str(error), "input": error.user_id}],
        )


class PaginationError(APIError):
    """Error 400: `limit` fuera de rango."""
    def __init__(self, max_limit: int) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"El parámetro 'limit' debe estar entre 1 y {max_limit}",
        )
