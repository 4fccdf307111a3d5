from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from taskboard.models.comment import CommentRecord


class TaskRecord(SQLModel, table=True):
    """
    Stored form of a board task.

    Enum-valued fields are stored as their display text. ``position`` keeps
    the collection order the host saved.
    """

    __tablename__ = "tasks"

    id: str = Field(primary_key=True)
    position: int = Field(default=0, index=True)
    week: str = Field(index=True)
    area: str
    priority: str
    title: str
    description: str = Field(default="")
    requester: str = Field(default="")
    responsible: str
    basecamp_link: str = Field(default="")
    status: str
    delivery_date: str = Field(default="")
    created_at: datetime = Field(default_factory=datetime.now)

    # Relationships
    comments: list["CommentRecord"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
