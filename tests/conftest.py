"""Shared fixtures for the assistant tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.exceptions import ProviderError
from models import IntentAnalysis, Intent
from services.chat_service import AIMode, ChatService
from services.gemini_service import GeminiService
from utils.chat_history import ChatHistoryStore
from utils.horarios import ScheduleStore
from utils.rutinas import RoutineStore
from utils.sesiones import SessionStore


@pytest.fixture
def user_id() -> str:
    return "3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e"


@pytest.fixture
def other_user_id() -> str:
    return "a1b2c3d4-e5f6-4a7b-9c8d-0e1f2a3b4c5d"


@pytest.fixture
def routines() -> RoutineStore:
    return RoutineStore()


@pytest.fixture
def schedules() -> ScheduleStore:
    return ScheduleStore()


@pytest.fixture
def sessions() -> SessionStore:
    return SessionStore()


@pytest.fixture
def history() -> ChatHistoryStore:
    return ChatHistoryStore()


@pytest.fixture
def mock_gemini() -> MagicMock:
    """A configured Gemini adapter whose calls all succeed."""
    gemini = MagicMock(spec=GeminiService)
    gemini.is_configured.return_value = True
    gemini.verify = AsyncMock(return_value=True)
    gemini.classify_with_ai = AsyncMock(
        return_value=IntentAnalysis(intent=Intent.HELP, confidence=0.95)
    )
    gemini.generate = AsyncMock(return_value="Respuesta de la IA")
    return gemini


@pytest.fixture
def failing_gemini() -> MagicMock:
    """A configured Gemini adapter that fails on every completion."""
    gemini = MagicMock(spec=GeminiService)
    gemini.is_configured.return_value = True
    gemini.verify = AsyncMock(return_value=True)
    gemini.classify_with_ai = AsyncMock(side_effect=ProviderError("network down"))
    gemini.generate = AsyncMock(side_effect=ProviderError("network down"))
    return gemini


def make_service(gemini, routines, schedules, sessions, history,
                 ai_enabled: bool = True, confirm_destructive: bool = True) -> ChatService:
    return ChatService(
        gemini=gemini,
        routines=routines,
        schedules=schedules,
        sessions=sessions,
        history=history,
        ai_mode=AIMode(ai_enabled),
        confirm_destructive=confirm_destructive,
    )


@pytest.fixture
def rule_service(mock_gemini, routines, schedules, sessions, history) -> ChatService:
    """Chat service running in rule/template mode."""
    return make_service(mock_gemini, routines, schedules, sessions, history, ai_enabled=False)


@pytest.fixture
def ai_service(mock_gemini, routines, schedules, sessions, history) -> ChatService:
    return make_service(mock_gemini, routines, schedules, sessions, history, ai_enabled=True)
