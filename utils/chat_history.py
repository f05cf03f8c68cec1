"""
Historial de chat por usuario, agrupado en sesiones de conversación.
"""
import uuid
from collections import Counter
from datetime import timedelta
from typing import Any, Dict, List, Optional

from models import ConversationTurn, MessageRole
from utils.date_utils import get_current_datetime


class ChatHistoryStore:
    """Almacén en memoria de turnos de conversación."""

    def __init__(self):
        self._turns: Dict[str, List[ConversationTurn]] = {}
        self._current_sessions: Dict[str, str] = {}

    def new_session(self, user_id: str) -> str:
        """Abre una sesión de conversación nueva para el usuario."""
        session_id = str(uuid.uuid4())
        self._current_sessions[user_id] = session_id
        return session_id

    def current_session(self, user_id: str) -> str:
        return self._current_sessions.get(user_id) or self.new_session(user_id)

    async def append_turn(
        self,
        user_id: str,
        role: MessageRole,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
        session_id: Optional[str] = None,
    ) -> str:
        turn = ConversationTurn(
            id=str(uuid.uuid4()),
            user_id=user_id,
            session_id=session_id or self.current_session(user_id),
            role=role,
            content=content,
            metadata=metadata or {},
        )
        self._turns.setdefault(user_id, []).append(turn)
        return turn.id

    async def list_turns(self, user_id: str, session_id: Optional[str] = None,
                         limit: int = 20) -> List[ConversationTurn]:
        """Turnos en orden cronológico: los `limit` más recientes, de una sesión o de todas."""
        turns = self._turns.get(user_id, [])
        if session_id:
            turns = [t for t in turns if t.session_id == session_id]
        return turns[-limit:] if limit else list(turns)

    async def list_sessions(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Resumen por sesión: cantidad de mensajes y último mensaje, la más reciente primero."""
        sessions: Dict[str, Dict[str, Any]] = {}
        for turn in self._turns.get(user_id, []):
            summary = sessions.setdefault(turn.session_id, {
                "session_id": turn.session_id,
                "user_id": user_id,
                "created_at": turn.timestamp,
                "updated_at": turn.timestamp,
                "message_count": 0,
                "last_message": "",
            })
            summary["message_count"] += 1
            summary["updated_at"] = turn.timestamp
            summary["last_message"] = turn.content

        ordered = sorted(sessions.values(), key=lambda s: s["updated_at"], reverse=True)
        return ordered[:limit]

    async def get_stats(self, user_id: str, days: int = 30) -> Dict[str, Any]:
        since = get_current_datetime() - timedelta(days=days)
        turns = [t for t in self._turns.get(user_id, []) if t.timestamp >= since]

        response_times = [
            t.metadata["response_time_ms"] for t in turns
            if t.metadata.get("response_time_ms")
        ]
        intents = Counter(t.metadata["intent"] for t in turns if t.metadata.get("intent"))

        return {
            "total_messages": len(turns),
            "user_messages": sum(1 for t in turns if t.role == MessageRole.USER),
            "assistant_messages": sum(1 for t in turns if t.role == MessageRole.ASSISTANT),
            "total_tokens": sum(t.metadata.get("tokens_used") or 0 for t in turns),
            "average_response_time": sum(response_times) / len(response_times) if response_times else 0,
            "unique_sessions": len({t.session_id for t in turns}),
            "top_intents": [
                {"intent": intent, "count": count} for intent, count in intents.most_common(5)
            ],
        }

    async def delete_session(self, user_id: str, session_id: str) -> int:
        turns = self._turns.get(user_id, [])
        kept = [t for t in turns if t.session_id != session_id]
        self._turns[user_id] = kept
        if self._current_sessions.get(user_id) == session_id:
            del self._current_sessions[user_id]
        return len(turns) - len(kept)

    async def delete_all(self, user_id: str) -> int:
        removed = len(self._turns.pop(user_id, []))
        self._current_sessions.pop(user_id, None)
        return removed
