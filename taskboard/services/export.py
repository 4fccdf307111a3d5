"""
Plain-text weekly export.

The format is read back by ``taskboard.services.importer``; any change to
the markers here must be mirrored there.
"""

import re
from datetime import datetime
from typing import Iterable

from taskboard.config import get_settings
from taskboard.schemas.task import AREAS, Task

WEEK_MARKER = "SEMANA:"
GENERATED_MARKER = "GENERADO EL:"
AREA_MARKER = "ÁREA:"
TEAM_MARKER = "Equipo:"
TASK_MARKER = "- Tarea:"
DESCRIPTION_MARKER = "Descripción:"
PRIORITY_MARKER = "Prioridad:"
STATUS_MARKER = "Estado:"
DELIVERY_MARKER = "Entrega:"
BASECAMP_MARKER = "Basecamp:"
COMMENTS_MARKER = "Comentarios:"
BANNER = "=" * 40

NO_DELIVERY = "No definida"
NO_BASECAMP = "Pendiente"

TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def _unique(values: Iterable) -> list:
    """Distinct values in first-seen order."""
    return list(dict.fromkeys(values))


def _format_task(task: Task) -> list[str]:
    lines = [f"  {TASK_MARKER} {task.title}"]
    if task.description:
        lines.append(f"    {DESCRIPTION_MARKER} {task.description}")
    lines.append(f"    {PRIORITY_MARKER} {task.priority.value}")
    lines.append(f"    {STATUS_MARKER} {task.status.value}")
    lines.append(f"    {DELIVERY_MARKER} {task.delivery_date or NO_DELIVERY}")
    lines.append(f"    {BASECAMP_MARKER} {task.basecamp_link or NO_BASECAMP}")

    if task.comments:
        lines.append(f"    {COMMENTS_MARKER}")
        for comment in task.comments:
            lines.append(
                f"      * [{comment.author}] ({format_timestamp(comment.timestamp)}): {comment.text}"
            )
    else:
        lines.append(f"    {COMMENTS_MARKER} 0")

    lines.append("")
    return lines


def format_week_export(
    week: str,
    tasks: Iterable[Task],
    generated_at: datetime | None = None,
) -> str:
    """
    Render all tasks of ``week`` as text.

    Sections follow area order; inside an area tasks are grouped by
    requester, then team, in order of first appearance. Pre-sort the tasks
    for a stable layout.
    """
    filtered = [t for t in tasks if t.week == week]
    if not filtered:
        return f"No hay tareas registradas para la semana: {week}"

    generated_at = generated_at or datetime.now()
    lines = [
        f"{WEEK_MARKER} {week}",
        f"{GENERATED_MARKER} {format_timestamp(generated_at)}",
        "",
    ]

    for area in AREAS:
        area_tasks = [t for t in filtered if t.area == area]
        if not area_tasks:
            continue

        lines.extend([BANNER, f"{AREA_MARKER} {area.value.upper()}", BANNER, ""])

        for requester in _unique(t.requester for t in area_tasks):
            requester_tasks = [t for t in area_tasks if t.requester == requester]
            lines.extend([f"{requester}:", ""])

            for team in _unique(t.responsible for t in requester_tasks):
                lines.append(f"  {TEAM_MARKER} {team.value}")
                for task in requester_tasks:
                    if task.responsible == team:
                        lines.extend(_format_task(task))

    return "\n".join(lines) + "\n"


def export_filename(week: str) -> str:
    """File name for a week's export, e.g. ``Tareas_Taskboard_01_01_24_-_05_01_24.txt``."""
    prefix = get_settings().export_filename_prefix
    safe_week = re.sub(r"[\s/]", "_", week)
    return f"{prefix}_{safe_week}.txt"
