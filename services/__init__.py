"""
Servicios del asistente: chat, contexto, ejecución de acciones y Gemini.

Se exporta la instancia global del servicio de chat que usan los routers.
"""
from .chat_service import chat_service

__all__ = ['chat_service']
