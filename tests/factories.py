"""Builders for tasks and comments used across the tests."""

from datetime import datetime, timedelta
from itertools import count

from taskboard.schemas import Area, Comment, Priority, Status, Task, Team

WEEK = "01/01/24 - 05/01/24"
OTHER_WEEK = "08/01/24 - 12/01/24"

_clock = count()


def make_task(**overrides) -> Task:
    """
    Build a task with sensible defaults.

    Each call gets a strictly later ``created_at`` unless one is given, so
    creation order is deterministic.
    """
    data = {
        "week": WEEK,
        "area": Area.PRODUCTION,
        "priority": Priority.MEDIUM,
        "title": "Banner",
        "requester": "Ana",
        "responsible": Team.CORE,
        "basecamp_link": "http://basecamp/1",
        "status": Status.ACTIVE,
        "created_at": datetime(2024, 1, 1, 9, 0) + timedelta(seconds=next(_clock)),
    }
    data.update(overrides)
    return Task(**data)


def make_comment(author: str = "Head", text: str = "Revisar logo", **overrides) -> Comment:
    data = {"author": author, "text": text, "timestamp": datetime(2024, 1, 2, 10, 30, 15)}
    data.update(overrides)
    return Comment(**data)
