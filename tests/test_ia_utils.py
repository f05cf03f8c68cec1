"""Tests for prompt helpers and JSON extraction."""

from models import Routine, UserContext
from utils.ia_utils import (
    build_intent_prompt,
    build_system_prompt,
    estimate_tokens,
    extract_json_object,
    format_dialogue,
    limpiar_respuesta,
)


class TestExtractJsonObject:
    def test_plain_object(self) -> None:
        assert extract_json_object('{"intent": "help"}') == {"intent": "help"}

    def test_object_inside_code_fence(self) -> None:
        text = 'Claro:\n```json\n{"intent": "get_info", "confidence": 0.9}\n```'
        assert extract_json_object(text) == {"intent": "get_info", "confidence": 0.9}

    def test_nested_object(self) -> None:
        text = 'x {"intent": "create_routine", "entities": {"title": "Yoga"}} y'
        assert extract_json_object(text)["entities"] == {"title": "Yoga"}

    def test_braces_inside_strings(self) -> None:
        text = '{"intent": "general", "note": "usa } y { sin problema"}'
        assert extract_json_object(text)["note"] == "usa } y { sin problema"

    def test_escaped_quote_inside_string(self) -> None:
        text = r'{"title": "dice \"hola\" {"}'
        assert extract_json_object(text) == {"title": 'dice "hola" {'}

    def test_skips_invalid_candidate(self) -> None:
        text = "{no es json} luego {\"intent\": \"help\"}"
        assert extract_json_object(text) == {"intent": "help"}

    def test_no_object(self) -> None:
        assert extract_json_object("sin llaves") is None

    def test_empty(self) -> None:
        assert extract_json_object("") is None
        assert extract_json_object(None) is None


class TestLimpiarRespuesta:
    def test_strips_and_collapses_blank_lines(self) -> None:
        assert limpiar_respuesta("  Hola\r\n\n\n\nMundo  \n") == "Hola\n\nMundo"

    def test_trailing_spaces_before_newline(self) -> None:
        assert limpiar_respuesta("uno   \ndos") == "uno\ndos"

    def test_empty(self) -> None:
        assert limpiar_respuesta("") == ""


class TestDialogue:
    def test_roles_and_separator(self) -> None:
        dialogue = format_dialogue([
            {"role": "user", "content": "hola"},
            {"role": "assistant", "content": "¿en qué te ayudo?"},
        ])
        assert dialogue == "Usuario: hola\n\nAsistente: ¿en qué te ayudo?"

    def test_empty(self) -> None:
        assert format_dialogue([]) == ""


class TestPrompts:
    def test_intent_prompt_lists_routines(self) -> None:
        context = UserContext(routines=[Routine(id=7, user_id="u", title="Yoga")])
        prompt = build_intent_prompt("iniciar yoga", context)
        assert 'MENSAJE: "iniciar yoga"' in prompt
        assert '"Yoga" (ID: 7, activa: False)' in prompt

    def test_intent_prompt_without_data(self) -> None:
        prompt = build_intent_prompt("hola", UserContext())
        assert "Rutinas existentes: Ninguna" in prompt
        assert "Horarios existentes: Ninguno" in prompt

    def test_system_prompt_forbids_inventing(self) -> None:
        prompt = build_system_prompt(UserContext())
        assert "NO INVENTES DATOS" in prompt
        assert "Lista actual: NINGUNA" in prompt
        assert "Tiempo total: 0h 0m" in prompt


def test_estimate_tokens() -> None:
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2
