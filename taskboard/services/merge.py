"""
Reconciliation of imported tasks into the current collection.

An imported task is the "same" as an existing one when title, week, area,
team and requester agree (title and requester compared trimmed and
case-insensitively). Matches only fill gaps: empty description, empty
Basecamp link, empty delivery date, and comments not seen before. Nothing
already entered is overwritten or removed.

Capacity limits are not enforced here; an import may leave a team above its
Urgent/High allowance until someone edits the tasks.
"""

from typing import Iterable

from taskboard.logging_config import get_logger
from taskboard.schemas.exchange import ImportOutcome, ImportSummary, MergeResult
from taskboard.schemas.task import Status, Task

logger = get_logger(__name__)

IdentityKey = tuple[str, str, str, str, str]


def identity_key(task: Task) -> IdentityKey:
    return (
        task.title.strip().lower(),
        task.week,
        task.area.value,
        task.responsible.value,
        task.requester.strip().lower(),
    )


def _comment_key(author: str, text: str) -> tuple[str, str]:
    return author, (text or "").strip()


def fill_gaps(existing: Task, imported: Task) -> bool:
    """
    Copy missing data from ``imported`` onto ``existing`` in place.

    Returns True if ``existing`` changed.
    """
    changed = False

    if not existing.description.strip() and imported.description.strip():
        existing.description = imported.description
        changed = True

    if not existing.basecamp_link.strip() and imported.basecamp_link.strip():
        existing.basecamp_link = imported.basecamp_link
        if existing.status == Status.BLOCKED:
            existing.status = Status.ACTIVE
        changed = True

    if not existing.delivery_date.strip() and imported.delivery_date.strip():
        existing.delivery_date = imported.delivery_date
        changed = True

    seen = {_comment_key(c.author, c.text) for c in existing.comments}
    new_comments = [c.model_copy() for c in imported.comments if _comment_key(c.author, c.text) not in seen]
    if new_comments:
        existing.comments = existing.comments + new_comments
        changed = True

    return changed


def merge_imported(existing: Iterable[Task], imported: Iterable[Task]) -> MergeResult:
    """
    Merge a parsed batch into a copy of ``existing``.

    The returned collection keeps existing tasks in their original order
    and appends new ones at the end.
    """
    tasks = [t.model_copy(deep=True) for t in existing]
    index: dict[IdentityKey, Task] = {}
    for task in tasks:
        index.setdefault(identity_key(task), task)

    added = 0
    updated = 0
    for incoming in imported:
        key = identity_key(incoming)
        match = index.get(key)
        if match is None:
            new_task = incoming.model_copy(deep=True)
            tasks.append(new_task)
            index[key] = new_task
            added += 1
        elif fill_gaps(match, incoming):
            updated += 1

    logger.debug(f"Merge finished: added={added} updated={updated} total={len(tasks)}")
    return MergeResult(tasks=tasks, added=added, updated=updated)


def summarize_import(found: int, result: MergeResult | None) -> ImportSummary:
    """Classify an import for user feedback."""
    if found == 0 or result is None:
        return ImportSummary(
            outcome=ImportOutcome.NOTHING_FOUND,
            found=0,
            message="No se detectaron tareas válidas en el archivo.",
        )

    if not result.changed:
        return ImportSummary(
            outcome=ImportOutcome.UP_TO_DATE,
            found=found,
            message="El sistema ya está al día con la información del archivo.",
        )

    return ImportSummary(
        outcome=ImportOutcome.MERGED,
        found=found,
        added=result.added,
        updated=result.updated,
        message=(
            f"Fusión completada: {result.added} tareas nuevas añadidas, "
            f"{result.updated} tareas existentes actualizadas."
        ),
    )
