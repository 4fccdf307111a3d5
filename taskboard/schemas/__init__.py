from taskboard.schemas.task import (
    Area,
    Team,
    Priority,
    Status,
    UserRole,
    Comment,
    Task,
    TaskCreate,
    TaskUpdate,
    CommentCreate,
    LimitCheck,
)
from taskboard.schemas.exchange import ImportOutcome, MergeResult, ImportSummary

__all__ = [
    "Area",
    "Team",
    "Priority",
    "Status",
    "UserRole",
    "Comment",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "CommentCreate",
    "LimitCheck",
    "ImportOutcome",
    "MergeResult",
    "ImportSummary",
]
