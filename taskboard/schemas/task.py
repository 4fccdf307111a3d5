import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Area(str, Enum):
    """Top-level classification of work. Declaration order is export order."""
    PRODUCTION = "Producción"
    BRANDING = "Branding"


class Team(str, Enum):
    """Execution teams. Declaration order is display order; UNASSIGNED sorts last."""
    FULL = "Full Performance 🧡"
    CORE = "Core Performance 🩷"
    LITE = "Lite Performance 🤍"
    SEM = "SEM Performance 💙"
    BLACK = "Team Black 🖤"
    UNASSIGNED = "Sin asignar"


class Priority(str, Enum):
    URGENT = "Urgente"
    HIGH = "Alta"
    MEDIUM = "Media"
    LOW = "Baja"

    @property
    def rank(self) -> int:
        """Severity rank, 0 is most severe."""
        return PRIORITY_RANK[self]


class Status(str, Enum):
    BLOCKED = "Bloqueada (falta Basecamp)"
    ACTIVE = "Activa"
    IN_PROGRESS = "En progreso"
    COMPLETED = "Completada"

    @property
    def is_blocked(self) -> bool:
        return "Bloqueada" in self.value


class UserRole(str, Enum):
    LEADER = "Leader"
    HEAD = "Head"


AREAS: list[Area] = list(Area)
TEAMS: list[Team] = list(Team)
PRIORITY_RANK: dict[Priority, int] = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}

PENDING_REQUESTER = "Pendiente por Head"
UNKNOWN_REQUESTER = "Desconocido"
NO_WEEK = "Sin semana"


def new_id() -> str:
    return str(uuid.uuid4())


def normalize_status(basecamp_link: str | None, status: Status) -> Status:
    """
    Enforce the link/status invariant.

    A task without a Basecamp link is always blocked; a task with a link is
    never blocked (a blocked one is promoted to active).
    """
    if not (basecamp_link or "").strip():
        return Status.BLOCKED
    if status == Status.BLOCKED:
        return Status.ACTIVE
    return status


class Comment(BaseModel):
    """A note attached to a task. Text may be empty when it came from an import."""
    id: str = Field(default_factory=new_id)
    author: str
    timestamp: datetime = Field(default_factory=datetime.now)
    text: str = ""


class Task(BaseModel):
    """
    A unit of work on the board.

    ``id`` and ``created_at`` are assigned once and never change. Optional
    text fields use the empty string for "not set".
    """
    id: str = Field(default_factory=new_id)
    week: str
    area: Area
    priority: Priority = Priority.MEDIUM
    title: str
    description: str = ""
    requester: str = ""
    responsible: Team = Team.UNASSIGNED
    basecamp_link: str = ""
    status: Status = Status.BLOCKED
    comments: list[Comment] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    delivery_date: str = ""

    @property
    def is_blocked(self) -> bool:
        return self.status.is_blocked


class TaskCreate(BaseModel):
    """Schema for creating a new task."""
    week: str | None = None  # Defaults to the current week
    area: Area = Area.PRODUCTION
    priority: Priority = Priority.MEDIUM
    title: str
    description: str = ""
    requester: str = ""
    responsible: Team = Team.UNASSIGNED
    basecamp_link: str = ""
    delivery_date: str = ""


class TaskUpdate(BaseModel):
    """Schema for updating a task. Title, requester and priority are Head-only."""
    title: str | None = None
    description: str | None = None
    requester: str | None = None
    responsible: Team | None = None
    priority: Priority | None = None
    status: Status | None = None
    basecamp_link: str | None = None
    delivery_date: str | None = None


class CommentCreate(BaseModel):
    """Schema for adding a comment."""
    text: str


class LimitCheck(BaseModel):
    """Outcome of a priority capacity check."""
    allowed: bool
    message: str | None = None
