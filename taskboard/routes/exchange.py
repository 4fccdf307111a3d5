"""
Text export/import routes for the Taskboard API.
"""

from datetime import date

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from taskboard.schemas import ImportSummary
from taskboard.services import board
from taskboard.services.exchange import export_week, run_import
from taskboard.services.export import export_filename
from taskboard.storage import TaskStore, get_store
from taskboard.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/export", response_class=PlainTextResponse)
async def export_tasks(
    week: str | None = None,
    store: TaskStore = Depends(get_store),
) -> PlainTextResponse:
    """
    Download one week as plain text.

    Defaults to the current week.
    """
    week = week or board.week_label(date.today())
    tasks = await store.load()
    text = export_week(tasks, week)

    logger.info(f"Exported week '{week}'")

    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(week)}"'},
    )


@router.post("/import", response_model=ImportSummary)
async def import_tasks(
    request: Request,
    store: TaskStore = Depends(get_store),
) -> ImportSummary:
    """
    Merge an exported text file (sent as the raw request body) into the board.

    Existing tasks only gain missing data and new comments; unknown tasks
    are added. The board is saved only when something changed.
    """
    raw = await request.body()
    text = raw.decode("utf-8-sig", errors="replace")

    tasks = await store.load()
    summary, result = run_import(tasks, text)
    if result is not None and result.changed:
        await store.save(result.tasks)

    return summary
