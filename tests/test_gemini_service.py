"""Tests for the Gemini adapter, with the SDK client mocked."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import errors as genai_errors

from core.exceptions import ProviderError, QuotaExceededError
from models import Intent, Routine, UserContext
from services.gemini_service import GeminiService


def _service_returning(*texts) -> GeminiService:
    service = GeminiService(api_key="test-key", model_name="gemini-test")
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        side_effect=[SimpleNamespace(text=text) for text in texts]
    )
    service._client = client
    return service


def _service_raising(error: Exception) -> GeminiService:
    service = GeminiService(api_key="test-key", model_name="gemini-test")
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=error)
    service._client = client
    return service


class TestConfiguration:
    def test_not_configured_without_key(self) -> None:
        assert GeminiService(api_key=None).is_configured() is False

    @pytest.mark.asyncio
    async def test_complete_without_key(self) -> None:
        with pytest.raises(ProviderError):
            await GeminiService(api_key=None).complete("hola")

    def test_set_api_key_resets_client(self) -> None:
        service = _service_returning("x")
        service.set_api_key("otra-key")
        assert service._client is None
        assert service.is_configured() is True


class TestComplete:
    @pytest.mark.asyncio
    async def test_returns_text(self) -> None:
        service = _service_returning("Hola")

        assert await service.complete("prompt") == "Hola"
        service._client.aio.models.generate_content.assert_awaited_once_with(
            model="gemini-test", contents="prompt"
        )

    @pytest.mark.asyncio
    async def test_empty_text(self) -> None:
        with pytest.raises(ProviderError):
            await _service_returning("").complete("prompt")

    @pytest.mark.asyncio
    async def test_quota_api_error(self) -> None:
        error = genai_errors.APIError(429, {
            "error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"},
        })
        with pytest.raises(QuotaExceededError) as exc_info:
            await _service_raising(error).complete("prompt")
        assert "quota" in str(exc_info.value).lower()

    @pytest.mark.asyncio
    async def test_quota_in_generic_error(self) -> None:
        with pytest.raises(QuotaExceededError):
            await _service_raising(RuntimeError("429 RESOURCE_EXHAUSTED")).complete("prompt")

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        with pytest.raises(ProviderError) as exc_info:
            await _service_raising(ConnectionError("timeout")).complete("prompt")
        assert not isinstance(exc_info.value, QuotaExceededError)


class TestVerify:
    @pytest.mark.asyncio
    async def test_ok(self) -> None:
        assert await _service_returning("OK").verify() is True

    @pytest.mark.asyncio
    async def test_failure_returns_false(self) -> None:
        assert await _service_raising(ConnectionError("down")).verify() is False

    @pytest.mark.asyncio
    async def test_unconfigured(self) -> None:
        assert await GeminiService(api_key=None).verify() is False


class TestClassify:
    @pytest.mark.asyncio
    async def test_parses_json(self) -> None:
        service = _service_returning(
            '```json\n{"intent": "create_routine", "confidence": 0.92, '
            '"entities": {"title": "Yoga", "description": "", "days": []}}\n```'
        )

        analysis = await service.classify_with_ai("crea la rutina Yoga", UserContext())

        assert analysis.intent == Intent.CREATE_ROUTINE
        assert analysis.confidence == 0.92
        assert analysis.entities == {"title": "Yoga"}

    @pytest.mark.asyncio
    async def test_resolves_routine_name(self) -> None:
        context = UserContext(routines=[Routine(id=4, user_id="u", title="Lectura nocturna")])
        service = _service_returning(
            '{"intent": "start_routine", "entities": {"routine_name": "lectura"}}'
        )

        analysis = await service.classify_with_ai("empieza lectura", context)

        assert analysis.intent == Intent.START_ROUTINE
        assert analysis.entities["routine_id"] == 4
        assert analysis.confidence == 0.8

    @pytest.mark.asyncio
    async def test_unknown_intent_is_general(self) -> None:
        service = _service_returning('{"intent": "book_flight", "confidence": 0.99}')
        analysis = await service.classify_with_ai("reserva un vuelo", UserContext())
        assert analysis.intent == Intent.GENERAL

    @pytest.mark.asyncio
    async def test_without_json_uses_rules(self) -> None:
        service = _service_returning("No estoy seguro de qué quieres.")
        analysis = await service.classify_with_ai("crear rutina de yoga", UserContext())
        assert analysis.intent == Intent.CREATE_ROUTINE

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self) -> None:
        with pytest.raises(ProviderError):
            await _service_raising(ConnectionError("down")).classify_with_ai("hola", UserContext())


class TestGenerate:
    @pytest.mark.asyncio
    async def test_prompt_and_cleanup(self) -> None:
        service = _service_returning("  ¡Hola!\n\n\n\n¿Qué hacemos hoy?  ")

        text = await service.generate(
            [{"role": "user", "content": "hola"}], UserContext()
        )

        assert text == "¡Hola!\n\n¿Qué hacemos hoy?"
        prompt = service._client.aio.models.generate_content.call_args.kwargs["contents"]
        assert "NO INVENTES DATOS" in prompt
        assert prompt.endswith("Usuario: hola\n\nAsistente:")
