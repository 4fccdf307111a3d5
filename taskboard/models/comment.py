from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from taskboard.models.task import TaskRecord


class CommentRecord(SQLModel, table=True):
    """A comment row. ``position`` preserves append order within its task."""

    __tablename__ = "comments"

    id: str = Field(primary_key=True)
    task_id: str = Field(foreign_key="tasks.id", index=True)
    position: int = Field(default=0)
    author: str
    timestamp: datetime = Field(default_factory=datetime.now)
    text: str = Field(default="")

    # Relationships
    task: "TaskRecord" = Relationship(back_populates="comments")
