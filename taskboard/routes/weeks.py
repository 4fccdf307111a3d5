"""
Week routes for the Taskboard API.
"""

from datetime import date

from fastapi import APIRouter, Depends

from taskboard.services import board
from taskboard.storage import TaskStore, get_store

router = APIRouter()


@router.get("/", response_model=list[str])
async def list_weeks(
    store: TaskStore = Depends(get_store),
) -> list[str]:
    """Week labels that have at least one task, newest label first."""
    tasks = await store.load()
    return board.list_weeks(tasks)


@router.get("/current")
async def current_week(day: date | None = None) -> dict:
    """Label of the week containing ``day`` (today by default)."""
    return {"week": board.week_label(day or date.today())}
