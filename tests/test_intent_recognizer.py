"""Tests for the lexical intent rules."""

import pytest

from models import Intent
from utils.intent_recognizer import RULES, IntentRecognizer, classify


class TestTrivialReplies:
    @pytest.mark.parametrize("message", ["si", "sí", "no", "ok", "okay", "OK", "  Sí  ", "x", "ab"])
    def test_short_confirmations_are_general(self, message: str) -> None:
        assert classify(message) == Intent.GENERAL

    def test_empty_message(self) -> None:
        recognizer = IntentRecognizer()
        assert recognizer.recognize("") == (Intent.GENERAL, "empty", 0.5)

    def test_none_message(self) -> None:
        assert classify(None) == Intent.GENERAL


class TestRoutineRules:
    @pytest.mark.parametrize("message", [
        "crear rutina de yoga",
        "Quiero una nueva rutina",
        "agregar tarea leer",
        "poner rutina Meditar",
    ])
    def test_create_routine(self, message: str) -> None:
        assert classify(message) == Intent.CREATE_ROUTINE

    def test_start_routine(self) -> None:
        assert classify("iniciar rutina de la mañana") == Intent.START_ROUTINE

    def test_creation_beats_start(self) -> None:
        """A creation verb wins even when 'iniciar' is present."""
        assert classify("iniciar y crear rutina nueva") == Intent.CREATE_ROUTINE


class TestScheduleRules:
    def test_create_schedule(self) -> None:
        assert classify("crear horario de 9am a 5pm") == Intent.CREATE_SCHEDULE

    def test_nuevo_horario(self) -> None:
        assert classify("nuevo horario para el lunes") == Intent.CREATE_SCHEDULE

    @pytest.mark.parametrize("message", [
        "eliminar horarios del lunes",
        "borrar horario del viernes",
        "quitar horarios",
    ])
    def test_delete_schedules(self, message: str) -> None:
        assert classify(message) == Intent.DELETE_SCHEDULES


class TestSessionRules:
    @pytest.mark.parametrize("message", [
        "iniciar jornada",
        "iniciar mi trabajo",
        "iniciar sesión",
        "iniciar sesion",
    ])
    def test_start_work_session(self, message: str) -> None:
        assert classify(message) == Intent.START_WORK_SESSION

    def test_iniciar_alone_is_not_a_session(self) -> None:
        assert classify("iniciar") != Intent.START_WORK_SESSION


class TestInfoAndHelp:
    @pytest.mark.parametrize("message", [
        "¿cuántas rutinas tengo?",
        "cual fue mi última sesión",
        "lo más reciente",
    ])
    def test_get_info(self, message: str) -> None:
        assert classify(message) == Intent.GET_INFO

    def test_help(self) -> None:
        assert classify("ayuda") == Intent.HELP

    def test_como_is_help(self) -> None:
        assert classify("como funciona esto") == Intent.HELP

    def test_info_markers_come_before_help(self) -> None:
        # "qué puedo" contains "qué", which the info rule sees first
        assert classify("qué puedo hacer") == Intent.GET_INFO

    def test_fallback_is_general(self) -> None:
        recognizer = IntentRecognizer()
        assert recognizer.recognize("hola amigo") == (Intent.GENERAL, "fallback", 0.5)


class TestRuleTable:
    def test_rule_order(self) -> None:
        assert [rule.name for rule in RULES] == [
            "trivial_reply",
            "create_routine",
            "start_routine",
            "create_schedule",
            "delete_schedules",
            "start_work_session",
            "get_info",
            "help",
        ]

    def test_reports_rule_and_confidence(self) -> None:
        recognizer = IntentRecognizer()
        intent, rule, confidence = recognizer.recognize("crear rutina correr")
        assert intent == Intent.CREATE_ROUTINE
        assert rule == "create_routine"
        assert confidence == 0.9

    def test_custom_rules(self) -> None:
        recognizer = IntentRecognizer(rules=[])
        assert recognizer.recognize("crear rutina")[1] == "fallback"
