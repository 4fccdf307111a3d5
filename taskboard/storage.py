"""
Persistence of the task collection.

The board never talks to the database directly: routes and scripts receive
a ``TaskStore`` and call ``load()`` / ``save()`` around each operation.
Storage problems never propagate. A failed load yields an empty board and a
failed save is logged and reported as ``False`` so the board stays usable.
"""

from collections import defaultdict
from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

import pydantic
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.database import get_session_context
from taskboard.logging_config import get_logger
from taskboard.models import CommentRecord, TaskRecord
from taskboard.schemas.task import Comment, Task

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class TaskStore(Protocol):
    async def load(self) -> list[Task]: ...

    async def save(self, tasks: list[Task]) -> bool: ...


def task_to_records(task: Task, position: int) -> tuple[TaskRecord, list[CommentRecord]]:
    record = TaskRecord(
        id=task.id,
        position=position,
        week=task.week,
        area=task.area.value,
        priority=task.priority.value,
        title=task.title,
        description=task.description,
        requester=task.requester,
        responsible=task.responsible.value,
        basecamp_link=task.basecamp_link,
        status=task.status.value,
        delivery_date=task.delivery_date,
        created_at=task.created_at,
    )
    comments = [
        CommentRecord(
            id=comment.id,
            task_id=task.id,
            position=index,
            author=comment.author,
            timestamp=comment.timestamp,
            text=comment.text,
        )
        for index, comment in enumerate(task.comments)
    ]
    return record, comments


def record_to_task(record: TaskRecord, comments: list[CommentRecord]) -> Task:
    """Rebuild a domain task. Raises pydantic.ValidationError on bad stored values."""
    return Task(
        id=record.id,
        week=record.week,
        area=record.area,
        priority=record.priority,
        title=record.title,
        description=record.description or "",
        requester=record.requester or "",
        responsible=record.responsible,
        basecamp_link=record.basecamp_link or "",
        status=record.status,
        delivery_date=record.delivery_date or "",
        created_at=record.created_at,
        comments=[
            Comment(id=c.id, author=c.author, timestamp=c.timestamp, text=c.text or "")
            for c in sorted(comments, key=lambda c: c.position)
        ],
    )


class SqlTaskStore:
    """TaskStore backed by the ``tasks`` and ``comments`` tables."""

    def __init__(self, session_factory: SessionFactory = get_session_context):
        self.session_factory = session_factory

    async def load(self) -> list[Task]:
        try:
            async with self.session_factory() as session:
                task_rows = await session.execute(select(TaskRecord).order_by(TaskRecord.position))
                records = list(task_rows.scalars().all())
                comment_rows = await session.execute(select(CommentRecord))
                comments_by_task: dict[str, list[CommentRecord]] = defaultdict(list)
                for comment in comment_rows.scalars().all():
                    comments_by_task[comment.task_id].append(comment)

            tasks = [record_to_task(r, comments_by_task[r.id]) for r in records]
        except (SQLAlchemyError, OSError):
            logger.exception("Could not load tasks; starting with an empty board")
            return []
        except pydantic.ValidationError as e:
            logger.error(f"Stored tasks are malformed ({e.error_count()} errors); starting with an empty board")
            return []

        logger.debug(f"Loaded {len(tasks)} tasks")
        return tasks

    async def save(self, tasks: list[Task]) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(delete(CommentRecord))
                await session.execute(delete(TaskRecord))
                for position, task in enumerate(tasks):
                    record, comments = task_to_records(task, position)
                    session.add(record)
                    session.add_all(comments)
        except (SQLAlchemyError, OSError):
            logger.exception(f"Could not save {len(tasks)} tasks")
            return False

        logger.debug(f"Saved {len(tasks)} tasks")
        return True


def get_store() -> TaskStore:
    """FastAPI dependency providing the configured store."""
    return SqlTaskStore()
