"""
Display ordering for the board.

Tasks are ordered by, in precedence:
1. Area (lexicographic)
2. Team (enumeration order, unassigned last)
3. Priority (Urgent -> High -> Medium -> Low)
4. Blocked before not blocked
5. Delivery date ascending, only when both tasks have one
6. Creation time, newest first
"""

from functools import cmp_to_key
from typing import Iterable

from taskboard.schemas.task import TEAMS, Task


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_tasks(a: Task, b: Task) -> int:
    """Three-way comparison implementing the board order."""
    if a.area != b.area:
        return _cmp(a.area.value, b.area.value)

    team_diff = TEAMS.index(a.responsible) - TEAMS.index(b.responsible)
    if team_diff:
        return team_diff

    priority_diff = a.priority.rank - b.priority.rank
    if priority_diff:
        return priority_diff

    if a.is_blocked != b.is_blocked:
        return -1 if a.is_blocked else 1

    # Tier is skipped unless both dates are present
    if a.delivery_date and b.delivery_date and a.delivery_date != b.delivery_date:
        return _cmp(a.delivery_date, b.delivery_date)

    return _cmp(b.created_at, a.created_at)


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Return a new, sorted list. The input is not modified."""
    return sorted(tasks, key=cmp_to_key(compare_tasks))
