"""
Módulo principal para la configuración central de la aplicación.
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración de la aplicación."""
    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")

    APP_NAME: str = "Asistente TimeTrack"
    DEBUG: bool = True
    API_PREFIX: str = "/api"

    # Proveedor de IA (Gemini)
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.0-flash"
    USE_AI: bool = True  # Solo tiene efecto si hay API key

    DEFAULT_TIMEZONE: str = "America/Argentina/Buenos_Aires"

    # Las acciones destructivas (eliminar horarios) piden confirmación explícita
    CONFIRM_DESTRUCTIVE_ACTIONS: bool = True

    CHAT_HISTORY_LIMIT: int = 20
    CONTEXT_SESSION_LIMIT: int = 10


# Instancia de configuración
settings = Settings()
