"""
Parser for the plain-text weekly export.

The parser is a single forward pass over lines. It carries ambient context
(week, area, requester, team) across lines and accumulates at most one task
draft at a time. A draft is committed ("flushed") when a new section or task
starts and at end of input.

Parsing is best-effort: unknown lines are skipped, bad values fall back to
defaults and nothing here raises on malformed input.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Type, TypeVar

from taskboard.logging_config import get_logger
from taskboard.schemas.task import (
    NO_WEEK,
    TEAMS,
    UNKNOWN_REQUESTER,
    Area,
    Comment,
    Priority,
    Status,
    Task,
    Team,
    normalize_status,
)
from taskboard.services.export import (
    AREA_MARKER,
    BASECAMP_MARKER,
    DELIVERY_MARKER,
    DESCRIPTION_MARKER,
    NO_BASECAMP,
    NO_DELIVERY,
    PRIORITY_MARKER,
    STATUS_MARKER,
    TASK_MARKER,
    TEAM_MARKER,
    TIMESTAMP_FORMAT,
    WEEK_MARKER,
)

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)

# Lines starting with these are never requester headers
FIELD_PREFIXES = (
    "SEMANA",
    "ÁREA",
    "Equipo",
    "Prioridad",
    "Estado",
    "Entrega",
    "Basecamp",
    "Descripción",
    "Comentarios",
    "=",
)

COMMENT_RE = re.compile(r"\* \[(.*?)\] \((.*?)\):\s?(.*)")


def match_team(text: str) -> Team:
    """
    Best-effort lookup of a team from free text.

    Returns the first team (in enumeration order) whose name contains
    ``text``, ignoring case. Empty or unmatched text gives ``Team.UNASSIGNED``.
    """
    needle = (text or "").strip().lower()
    if not needle:
        return Team.UNASSIGNED
    for team in TEAMS:
        if needle in team.value.lower():
            return team
    return Team.UNASSIGNED


def match_area(text: str) -> Area:
    return Area.BRANDING if "BRANDING" in text.upper() else Area.PRODUCTION


def parse_timestamp(text: str, now: Callable[[], datetime] = datetime.now) -> datetime:
    """Read a comment timestamp written by the exporter, falling back to now."""
    text = text.strip()
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return now()
    # Stored timestamps are naive local time
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _lookup(enum_cls: Type[E], text: str) -> Optional[E]:
    folded = text.strip().casefold()
    for member in enum_cls:
        if member.value.casefold() == folded:
            return member
    return None


def _after(line: str, marker: str) -> str:
    return line[len(marker):].strip()


@dataclass
class TaskDraft:
    """
    Fields collected for the task currently being read.

    Week, area, requester and team are taken from the context when the task
    line is read; later headers do not affect an open draft.
    """
    title: str
    week: str = ""
    area: Area = Area.PRODUCTION
    requester: str = ""
    team: Team = Team.UNASSIGNED
    priority: Optional[Priority] = None
    status: Optional[Status] = None
    delivery_date: str = ""
    basecamp_link: str = ""
    description: str = ""
    comments: list[Comment] = field(default_factory=list)


@dataclass
class ParserContext:
    """Ambient values inherited by every task until the next header."""
    week: str = ""
    area: Area = Area.PRODUCTION
    requester: str = ""
    team: Team = Team.UNASSIGNED


class ImportParser:
    """
    Line-at-a-time parser.

    Usage:
        parser = ImportParser()
        for line in text.splitlines():
            parser.feed(line)
        tasks = parser.finish()
    """

    def __init__(self, now: Callable[[], datetime] = datetime.now):
        self.now = now
        self.context = ParserContext()
        self.draft: Optional[TaskDraft] = None
        self.tasks: list[Task] = []

    # -------------------- transitions --------------------

    def flush(self) -> None:
        """Commit the open draft, if it has a title, and close it."""
        draft, self.draft = self.draft, None
        if draft is None or not draft.title:
            return

        self.tasks.append(Task(
            week=draft.week or NO_WEEK,
            area=draft.area,
            requester=draft.requester or UNKNOWN_REQUESTER,
            responsible=draft.team,
            title=draft.title,
            description=draft.description,
            priority=draft.priority or Priority.MEDIUM,
            status=normalize_status(draft.basecamp_link, draft.status or Status.ACTIVE),
            basecamp_link=draft.basecamp_link,
            delivery_date=draft.delivery_date,
            comments=draft.comments,
            created_at=self.now(),
        ))

    def set_week(self, week: str) -> None:
        self.flush()
        self.context.week = week

    def set_area(self, text: str) -> None:
        self.flush()
        self.context.area = match_area(text)

    def set_requester(self, requester: str) -> None:
        self.flush()
        self.context.requester = requester

    def set_team(self, text: str) -> None:
        self.context.team = match_team(text)

    def start_task(self, title: str) -> None:
        self.flush()
        ctx = self.context
        self.draft = TaskDraft(
            title=title,
            week=ctx.week,
            area=ctx.area,
            requester=ctx.requester,
            team=ctx.team,
        )

    # -------------------- line dispatch --------------------

    @staticmethod
    def is_requester_header(raw: str) -> bool:
        stripped = raw.rstrip()
        return (
            stripped.endswith(":")
            and not raw[:1].isspace()
            and not stripped.startswith(FIELD_PREFIXES)
        )

    def feed(self, raw: str) -> None:
        line = raw.strip()
        if not line:
            return

        if line.startswith(WEEK_MARKER):
            self.set_week(_after(line, WEEK_MARKER))
        elif line.startswith(AREA_MARKER):
            self.set_area(_after(line, AREA_MARKER))
        elif self.is_requester_header(raw):
            self.set_requester(line[:-1].strip())
        elif line.startswith(TEAM_MARKER):
            self.set_team(_after(line, TEAM_MARKER))
        elif line.startswith(TASK_MARKER):
            self.start_task(_after(line, TASK_MARKER))
        elif self.draft is not None:
            self._feed_field(line)

    def _feed_field(self, line: str) -> None:
        draft = self.draft
        if line.startswith(PRIORITY_MARKER):
            draft.priority = _lookup(Priority, _after(line, PRIORITY_MARKER)) or draft.priority
        elif line.startswith(STATUS_MARKER):
            draft.status = _lookup(Status, _after(line, STATUS_MARKER)) or draft.status
        elif line.startswith(DELIVERY_MARKER):
            value = _after(line, DELIVERY_MARKER)
            draft.delivery_date = "" if value == NO_DELIVERY else value
        elif line.startswith(BASECAMP_MARKER):
            value = _after(line, BASECAMP_MARKER)
            draft.basecamp_link = "" if value == NO_BASECAMP else value
        elif line.startswith(DESCRIPTION_MARKER):
            draft.description = _after(line, DESCRIPTION_MARKER)
        elif line.startswith("* ["):
            match = COMMENT_RE.match(line)
            if match:
                author, stamp, text = match.groups()
                draft.comments.append(Comment(
                    author=author,
                    timestamp=parse_timestamp(stamp, self.now),
                    text=text,
                ))
        # "Comentarios:" headers and anything else carry no data

    def finish(self) -> list[Task]:
        self.flush()
        return self.tasks


def parse_import_text(text: str, now: Callable[[], datetime] = datetime.now) -> list[Task]:
    """Parse exported text back into tasks with fresh ids and creation times."""
    parser = ImportParser(now=now)
    for line in text.splitlines():
        parser.feed(line)
    tasks = parser.finish()
    logger.debug(f"Parsed {len(tasks)} tasks from {len(text)} characters of import text")
    return tasks
