"""
Task routes for the Taskboard API.
"""

from fastapi import APIRouter, Depends, Query, status

from taskboard.roles import get_current_role
from taskboard.schemas import (
    Area,
    CommentCreate,
    LimitCheck,
    Priority,
    Status,
    Task,
    TaskCreate,
    TaskUpdate,
    Team,
    UserRole,
)
from taskboard.services import board
from taskboard.services.constraints import check_priority_limit
from taskboard.storage import TaskStore, get_store
from taskboard.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_model=list[Task])
async def list_tasks(
    week: str | None = None,
    area: Area | None = None,
    team: Team | None = None,
    task_status: Status | None = Query(default=None, alias="status"),
    search: str = "",
    store: TaskStore = Depends(get_store),
) -> list[Task]:
    """
    List tasks in board order.

    All filters are optional; ``search`` matches title or requester.
    """
    tasks = await store.load()
    result = board.filter_tasks(tasks, week=week, area=area, team=team, status=task_status, search=search)

    logger.debug(f"Listed {len(result)} of {len(tasks)} tasks")

    return result


@router.get("/priority-check", response_model=LimitCheck)
async def priority_check(
    week: str,
    team: Team,
    area: Area,
    priority: Priority,
    exclude_id: str | None = None,
    store: TaskStore = Depends(get_store),
) -> LimitCheck:
    """Tell whether a task at ``priority`` still fits the team's weekly capacity."""
    tasks = await store.load()
    return check_priority_limit(tasks, week, team, area, priority, exclude_id=exclude_id)


@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    role: UserRole = Depends(get_current_role),
    store: TaskStore = Depends(get_store),
) -> Task:
    """
    Create a new task.

    If week is not provided, defaults to the current week.
    """
    tasks = await store.load()
    tasks, task = board.create_task(tasks, task_in, role)
    await store.save(tasks)
    return task


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    store: TaskStore = Depends(get_store),
) -> Task:
    """Get a task by ID."""
    tasks = await store.load()
    return board.find_task(tasks, task_id)


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    task_in: TaskUpdate,
    role: UserRole = Depends(get_current_role),
    store: TaskStore = Depends(get_store),
) -> Task:
    """
    Update a task.

    Status follows the Basecamp link: clearing the link blocks the task,
    adding one unblocks it.
    """
    tasks = await store.load()
    tasks, task = board.update_task(tasks, task_id, task_in, role)
    await store.save(tasks)
    return task


@router.post("/{task_id}/comments", response_model=Task, status_code=status.HTTP_201_CREATED)
async def add_comment(
    task_id: str,
    comment_in: CommentCreate,
    role: UserRole = Depends(get_current_role),
    store: TaskStore = Depends(get_store),
) -> Task:
    """Append a comment authored by the caller's role."""
    tasks = await store.load()
    tasks, task = board.add_comment(tasks, task_id, comment_in.text, role)
    await store.save(tasks)
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    role: UserRole = Depends(get_current_role),
    store: TaskStore = Depends(get_store),
) -> None:
    """Delete a task. Head only."""
    tasks = await store.load()
    tasks = board.delete_task(tasks, task_id, role)
    await store.save(tasks)
