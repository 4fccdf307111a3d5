"""
Export/import workflow used by the API and the sync script.
"""

from datetime import datetime
from typing import Iterable

from taskboard.logging_config import get_logger
from taskboard.schemas.exchange import ImportSummary, MergeResult
from taskboard.schemas.task import Task
from taskboard.services.export import format_week_export
from taskboard.services.importer import parse_import_text
from taskboard.services.merge import merge_imported, summarize_import
from taskboard.services.ordering import sort_tasks

logger = get_logger(__name__)


def export_week(tasks: Iterable[Task], week: str, generated_at: datetime | None = None) -> str:
    """Export a week in board order."""
    return format_week_export(week, sort_tasks(tasks), generated_at=generated_at)


def run_import(existing: Iterable[Task], text: str) -> tuple[ImportSummary, MergeResult | None]:
    """
    Parse ``text`` and merge it into ``existing``.

    Returns the summary and the merge result; the result is None when the
    text held no tasks. Callers should persist ``result.tasks`` only when
    ``result.changed``.
    """
    imported = parse_import_text(text)
    if not imported:
        logger.info("Import contained no tasks")
        return summarize_import(0, None), None

    result = merge_imported(existing, imported)
    summary = summarize_import(len(imported), result)
    logger.info(
        f"Import of {len(imported)} tasks: outcome={summary.outcome.value} "
        f"added={result.added} updated={result.updated}"
    )
    return summary, result
