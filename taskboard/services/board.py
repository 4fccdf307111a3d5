"""
Task lifecycle operations for the board.

Every function takes the current collection and returns a new list; the
input list is never mutated. Rule violations raise ``TaskboardException``
subclasses which the API renders as structured errors.

Role rules:
- Leaders create tasks without a requester ("Pendiente por Head").
- Only a Head may change title, requester or priority, or delete a task.
- Both roles may change team, status, delivery date and Basecamp link, and
  comment.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from taskboard.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    PriorityLimitError,
    ValidationError,
    field_error,
)
from taskboard.logging_config import get_logger
from taskboard.schemas.task import (
    PENDING_REQUESTER,
    Area,
    Comment,
    Status,
    Task,
    TaskCreate,
    TaskUpdate,
    Team,
    UserRole,
    normalize_status,
)
from taskboard.services.constraints import check_priority_limit
from taskboard.services.ordering import sort_tasks

logger = get_logger(__name__)

HEAD_ONLY_FIELDS = ("title", "requester", "priority")


def week_label(day: date) -> str:
    """
    Label of the Monday–Friday week containing ``day``.

    Example: any day from 01/01/24 to 07/01/24 -> "01/01/24 - 05/01/24"
    """
    monday = day - timedelta(days=day.weekday())
    friday = monday + timedelta(days=4)
    return f"{monday:%d/%m/%y} - {friday:%d/%m/%y}"


def find_task(tasks: Iterable[Task], task_id: str) -> Task:
    for task in tasks:
        if task.id == task_id:
            return task
    raise NotFoundError("Task", task_id)


def _ensure_capacity(tasks: list[Task], task: Task, exclude_id: Optional[str] = None) -> None:
    check = check_priority_limit(
        tasks,
        task.week,
        task.responsible,
        task.area,
        task.priority,
        exclude_id=exclude_id,
    )
    if not check.allowed:
        logger.warning(f"Priority limit reached: {check.message}")
        raise PriorityLimitError(
            check.message or "Priority limit reached",
            week=task.week,
            team=task.responsible.value,
            area=task.area.value,
            priority=task.priority.value,
        )


def create_task(
    tasks: Iterable[Task],
    task_in: TaskCreate,
    role: UserRole,
    today: Optional[date] = None,
) -> tuple[list[Task], Task]:
    """Validate and append a new task. Returns (new collection, created task)."""
    tasks = list(tasks)

    title = task_in.title.strip()
    if not title:
        raise ValidationError(
            "El título no puede estar vacío.",
            details=[field_error(["body", "title"], "Title is required")],
        )

    if role == UserRole.LEADER:
        requester = PENDING_REQUESTER
    else:
        requester = task_in.requester.strip()
        if not requester:
            raise ValidationError(
                "Debes indicar quién solicita la tarea.",
                details=[field_error(["body", "requester"], "Requester is required")],
            )

    task = Task(
        week=(task_in.week or "").strip() or week_label(today or date.today()),
        area=task_in.area,
        priority=task_in.priority,
        title=title,
        description=task_in.description.strip(),
        requester=requester,
        responsible=task_in.responsible,
        basecamp_link=task_in.basecamp_link.strip(),
        delivery_date=task_in.delivery_date.strip(),
        status=normalize_status(task_in.basecamp_link, Status.ACTIVE),
    )
    _ensure_capacity(tasks, task)

    logger.info(f"Created task: id={task.id} title='{task.title}' week='{task.week}' team={task.responsible.value}")
    return tasks + [task], task


def update_task(
    tasks: Iterable[Task],
    task_id: str,
    task_in: TaskUpdate,
    role: UserRole,
) -> tuple[list[Task], Task]:
    """Apply a partial update. Returns (new collection, updated task)."""
    tasks = list(tasks)
    current = find_task(tasks, task_id)
    changes = task_in.model_dump(exclude_unset=True, exclude_none=True)

    if role != UserRole.HEAD:
        for name in HEAD_ONLY_FIELDS:
            if name in changes and changes[name] != getattr(current, name):
                raise PermissionDeniedError(role.value, f"change the {name}")

    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise ValidationError("El título no puede estar vacío.")

    updated = current.model_copy(deep=True, update=changes)
    updated.status = normalize_status(updated.basecamp_link, updated.status)
    _ensure_capacity(tasks, updated, exclude_id=updated.id)

    logger.info(f"Updating task {task_id}: {changes}")
    return [updated if t.id == task_id else t for t in tasks], updated


def add_comment(
    tasks: Iterable[Task],
    task_id: str,
    text: str,
    role: UserRole,
) -> tuple[list[Task], Task]:
    tasks = list(tasks)
    current = find_task(tasks, task_id)
    if not text.strip():
        raise ValidationError("El comentario no puede estar vacío.")

    updated = current.model_copy(deep=True)
    updated.comments.append(Comment(author=role.value, text=text))
    logger.info(f"Comment added to task {task_id} by {role.value}")
    return [updated if t.id == task_id else t for t in tasks], updated


def delete_task(tasks: Iterable[Task], task_id: str, role: UserRole) -> list[Task]:
    tasks = list(tasks)
    if role != UserRole.HEAD:
        raise PermissionDeniedError(role.value, "delete tasks")
    task = find_task(tasks, task_id)
    logger.info(f"Deleting task {task_id}: '{task.title}'")
    return [t for t in tasks if t.id != task_id]


def filter_tasks(
    tasks: Iterable[Task],
    week: Optional[str] = None,
    area: Optional[Area] = None,
    team: Optional[Team] = None,
    status: Optional[Status] = None,
    search: str = "",
) -> list[Task]:
    """Board view: exact filters plus a case-insensitive search on title or requester."""
    needle = search.strip().lower()
    result = [
        t for t in tasks
        if (not week or t.week == week)
        and (area is None or t.area == area)
        and (team is None or t.responsible == team)
        and (status is None or t.status == status)
        and (not needle or needle in t.title.lower() or needle in t.requester.lower())
    ]
    return sort_tasks(result)


def list_weeks(tasks: Iterable[Task]) -> list[str]:
    """Distinct week labels, newest label first."""
    return sorted({t.week for t in tasks}, reverse=True)
