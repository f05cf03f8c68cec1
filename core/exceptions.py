"""
Excepciones de dominio.
"""


class InvalidUserIdError(ValueError):
    """El identificador de usuario no es un UUID válido."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"user_id debe ser un UUID válido: {user_id!r}")


class ProviderError(Exception):
    """Fallo del proveedor de IA (red, respuesta inválida o cuota)."""


class QuotaExceededError(ProviderError):
    """El proveedor de IA rechazó la petición por cuota agotada."""

    def __init__(self, detail: str = ""):
        message = "Gemini quota exceeded"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class StoreError(Exception):
    """Fallo de escritura o lectura en un almacén de datos."""
