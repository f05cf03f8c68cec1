"""Tests for the in-memory routine, schedule, session and chat stores."""

import pytest

from core.exceptions import StoreError
from models import MessageRole


class TestRoutineStore:
    @pytest.mark.asyncio
    async def test_create_is_inactive(self, routines, user_id) -> None:
        result = await routines.create_routine(user_id, {"title": "  Yoga ", "description": "suave"})

        assert result["success"] is True
        routine = result["routine"]
        assert routine.title == "Yoga"
        assert routine.description == "suave"
        assert routine.active is False
        assert routine.completed_count == 0

    @pytest.mark.asyncio
    async def test_create_requires_title(self, routines, user_id) -> None:
        result = await routines.create_routine(user_id, {"title": "   "})
        assert result == {"success": False, "message": "El título de la rutina es requerido"}

    @pytest.mark.asyncio
    async def test_list_newest_first(self, routines, user_id) -> None:
        await routines.create_routine(user_id, {"title": "Primera"})
        await routines.create_routine(user_id, {"title": "Segunda"})

        titles = [r.title for r in await routines.list_routines(user_id)]
        assert titles == ["Segunda", "Primera"]

    @pytest.mark.asyncio
    async def test_start(self, routines, user_id) -> None:
        routine = (await routines.create_routine(user_id, {"title": "Yoga"}))["routine"]

        started = await routines.start_routine(user_id, routine.id)
        assert started["routine"].active is True
        assert started["routine"].started_at is not None

    @pytest.mark.asyncio
    async def test_start_unknown(self, routines, user_id) -> None:
        result = await routines.start_routine(user_id, 99)
        assert result["success"] is False

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, routines, user_id, other_user_id) -> None:
        routine = (await routines.create_routine(user_id, {"title": "Yoga"}))["routine"]

        assert await routines.list_routines(other_user_id) == []
        assert (await routines.start_routine(other_user_id, routine.id))["success"] is False


class TestScheduleStore:
    @staticmethod
    def _record(user_id: str, day: int, name: str = "Lunes") -> dict:
        return {
            "user_id": user_id,
            "day_of_week": day,
            "day_name": name,
            "start_time": "09:00:00",
            "end_time": "17:00:00",
        }

    @pytest.mark.asyncio
    async def test_insert_and_list(self, schedules, user_id) -> None:
        schedule = await schedules.insert(self._record(user_id, 1))

        assert schedule.active is True
        assert await schedules.list_schedules(user_id) == [schedule]

    @pytest.mark.asyncio
    async def test_invalid_day_raises(self, schedules, user_id) -> None:
        with pytest.raises(StoreError):
            await schedules.insert(self._record(user_id, 9))
        assert await schedules.list_schedules(user_id) == []

    @pytest.mark.asyncio
    async def test_delete_where(self, schedules, user_id, other_user_id) -> None:
        await schedules.insert(self._record(user_id, 1))
        await schedules.insert(self._record(user_id, 2, "Martes"))
        await schedules.insert(self._record(other_user_id, 1))

        deleted = await schedules.delete_where(user_id, [1, 5])

        assert deleted == 1
        assert [s.day_of_week for s in await schedules.list_schedules(user_id)] == [2]
        assert len(await schedules.list_schedules(other_user_id)) == 1

    @pytest.mark.asyncio
    async def test_delete_without_matches(self, schedules, user_id) -> None:
        assert await schedules.delete_where(user_id, [0]) == 0


class TestSessionStore:
    @pytest.mark.asyncio
    async def test_single_active_session(self, sessions, user_id) -> None:
        first = await sessions.start_session(user_id, notes="API")
        second = await sessions.start_session(user_id)

        assert first["success"] is True
        assert second["success"] is False
        assert (await sessions.get_active_session(user_id)).notes == "API"

    @pytest.mark.asyncio
    async def test_end_session(self, sessions, user_id) -> None:
        await sessions.start_session(user_id)
        result = await sessions.end_session(user_id, notes="listo")

        session = result["session"]
        assert session.active is False
        assert session.ended_at is not None
        assert session.duration_minutes == 0
        assert session.notes == "listo"
        assert await sessions.get_active_session(user_id) is None

    @pytest.mark.asyncio
    async def test_end_without_active(self, sessions, user_id) -> None:
        assert (await sessions.end_session(user_id))["success"] is False

    @pytest.mark.asyncio
    async def test_list_with_limit(self, sessions, user_id) -> None:
        for _ in range(3):
            await sessions.start_session(user_id)
            await sessions.end_session(user_id)

        listed = await sessions.list_sessions(user_id, limit=2)
        assert [s.id for s in listed] == [3, 2]


class TestChatHistoryStore:
    @pytest.mark.asyncio
    async def test_turns_share_current_session(self, history, user_id) -> None:
        await history.append_turn(user_id, MessageRole.USER, "hola")
        await history.append_turn(user_id, MessageRole.ASSISTANT, "¡hola!", {"intent": "general"})

        turns = await history.list_turns(user_id)
        assert [t.content for t in turns] == ["hola", "¡hola!"]
        assert turns[0].session_id == turns[1].session_id

    @pytest.mark.asyncio
    async def test_limit_keeps_most_recent(self, history, user_id) -> None:
        for i in range(5):
            await history.append_turn(user_id, MessageRole.USER, f"m{i}")

        turns = await history.list_turns(user_id, limit=2)
        assert [t.content for t in turns] == ["m3", "m4"]

    @pytest.mark.asyncio
    async def test_limit_applies_within_a_session(self, history, user_id) -> None:
        await history.append_turn(user_id, MessageRole.USER, "otra sesión")
        session_id = history.new_session(user_id)
        for i in range(6):
            await history.append_turn(user_id, MessageRole.USER, f"m{i}")

        turns = await history.list_turns(user_id, session_id=session_id, limit=2)

        assert [t.content for t in turns] == ["m4", "m5"]
        assert all(t.session_id == session_id for t in turns)

    @pytest.mark.asyncio
    async def test_sessions_and_delete(self, history, user_id) -> None:
        first = history.current_session(user_id)
        await history.append_turn(user_id, MessageRole.USER, "uno")
        second = history.new_session(user_id)
        await history.append_turn(user_id, MessageRole.USER, "dos")
        await history.append_turn(user_id, MessageRole.USER, "tres")

        sessions = await history.list_sessions(user_id)
        counts = {s["session_id"]: s["message_count"] for s in sessions}
        assert counts == {first: 1, second: 2}

        assert await history.delete_session(user_id, second) == 2
        assert [t.content for t in await history.list_turns(user_id)] == ["uno"]
        assert history.current_session(user_id) != second

    @pytest.mark.asyncio
    async def test_stats(self, history, user_id) -> None:
        await history.append_turn(user_id, MessageRole.USER, "hola")
        await history.append_turn(user_id, MessageRole.ASSISTANT, "a", {
            "intent": "help", "tokens_used": 10, "response_time_ms": 100,
        })
        await history.append_turn(user_id, MessageRole.ASSISTANT, "b", {
            "intent": "help", "tokens_used": 5, "response_time_ms": 300,
        })

        stats = await history.get_stats(user_id)
        assert stats["total_messages"] == 3
        assert stats["user_messages"] == 1
        assert stats["assistant_messages"] == 2
        assert stats["total_tokens"] == 15
        assert stats["average_response_time"] == 200
        assert stats["unique_sessions"] == 1
        assert stats["top_intents"] == [{"intent": "help", "count": 2}]

    @pytest.mark.asyncio
    async def test_delete_all(self, history, user_id) -> None:
        await history.append_turn(user_id, MessageRole.USER, "hola")
        assert await history.delete_all(user_id) == 1
        assert await history.list_turns(user_id) == []
