"""
Modelos de datos de la aplicación.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from utils.date_utils import get_current_datetime


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Intent(str, Enum):
    """Intenciones soportadas por el asistente."""
    START_ROUTINE = "start_routine"
    CREATE_ROUTINE = "create_routine"
    CREATE_SCHEDULE = "create_schedule"
    DELETE_SCHEDULES = "delete_schedules"
    START_WORK_SESSION = "start_work_session"
    GET_INFO = "get_info"
    HELP = "help"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: Any) -> "Intent":
        """Convierte un valor libre (p. ej. la salida de la IA) en una intención, `general` si no se reconoce."""
        if isinstance(value, Intent):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERAL


# Acciones que piden confirmación antes de ejecutarse
DESTRUCTIVE_INTENTS = frozenset({Intent.DELETE_SCHEDULES})


class ConversationTurn(BaseModel):
    """Un mensaje del historial de chat. Inmutable una vez creado."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    session_id: str
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=get_current_datetime)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Action(BaseModel):
    """Comando estructurado derivado de una intención."""
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)


class ActionResult(BaseModel):
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None


class Routine(BaseModel):
    id: int
    user_id: str
    title: str
    description: str = ""
    active: bool = False
    completed_count: int = 0
    started_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=get_current_datetime)


class Schedule(BaseModel):
    id: int
    user_id: str
    day_of_week: int = Field(ge=0, le=6)
    day_name: str
    start_time: str
    end_time: str
    active: bool = True
    created_at: datetime = Field(default_factory=get_current_datetime)


class WorkSession(BaseModel):
    id: int
    user_id: str
    started_at: datetime = Field(default_factory=get_current_datetime)
    ended_at: Optional[datetime] = None
    active: bool = True
    duration_minutes: Optional[int] = None
    notes: str = ""
    created_at: datetime = Field(default_factory=get_current_datetime)


class RoutinesStats(BaseModel):
    total: int
    active: int
    inactive: int
    most_used: Routine
    last_created: Routine
    average_completion: float


class SchedulesStats(BaseModel):
    total: int
    active: int
    inactive: int
    last_created: Schedule


class SessionsStats(BaseModel):
    total: int
    completed: int
    active: int
    total_duration_minutes: int
    average_duration: float
    last_completed: Optional[WorkSession] = None


class UserContext(BaseModel):
    """Foto de solo lectura de los datos del usuario, reconstruida en cada turno."""
    routines: List[Routine] = Field(default_factory=list)
    schedules: List[Schedule] = Field(default_factory=list)
    recent_sessions: List[WorkSession] = Field(default_factory=list)
    all_sessions: List[WorkSession] = Field(default_factory=list)
    active_session: Optional[WorkSession] = None
    routines_stats: Optional[RoutinesStats] = None
    schedules_stats: Optional[SchedulesStats] = None
    sessions_stats: Optional[SessionsStats] = None

    @property
    def has_active_session(self) -> bool:
        return self.active_session is not None

    @property
    def has_data(self) -> bool:
        return bool(self.routines or self.schedules or self.all_sessions)

    @property
    def active_routines(self) -> List[Routine]:
        return [r for r in self.routines if r.active]

    @property
    def active_schedules(self) -> List[Schedule]:
        return [s for s in self.schedules if s.active]

    @property
    def completed_sessions(self) -> List[WorkSession]:
        return [s for s in self.all_sessions if not s.active]

    @property
    def last_routine(self) -> Optional[Routine]:
        return self.routines[0] if self.routines else None

    @property
    def last_schedule(self) -> Optional[Schedule]:
        return self.schedules[0] if self.schedules else None

    @property
    def last_session(self) -> Optional[WorkSession]:
        return self.all_sessions[0] if self.all_sessions else None


class IntentAnalysis(BaseModel):
    intent: Intent = Intent.GENERAL
    confidence: float = 0.5
    entities: Dict[str, Any] = Field(default_factory=dict)


class ChatResponse(BaseModel):
    """Respuesta del asistente para un mensaje."""
    message: str
    intent: Intent = Intent.GENERAL
    action: Optional[Action] = None
    suggestions: List[str] = Field(default_factory=list)
    tokens_used: Optional[int] = None


# Modelos de la API
class ChatRequest(BaseModel):
    message: str
    user_id: str


class AIModeUpdate(BaseModel):
    enabled: bool
    api_key: Optional[str] = None


class AIModeStatus(BaseModel):
    enabled: bool
    configured: bool
    disabled_reason: Optional[str] = None
