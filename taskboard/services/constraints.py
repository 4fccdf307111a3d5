"""
Priority capacity rules.

Urgent and High are scarce: each team may hold at most one Urgent and two
High tasks per (week, area). Medium, Low and unassigned work are unlimited.
"""

from typing import Iterable

from taskboard.schemas.task import Area, LimitCheck, Priority, Task, Team

PRIORITY_CAPACITY: dict[Priority, int] = {
    Priority.URGENT: 1,
    Priority.HIGH: 2,
}


def check_priority_limit(
    tasks: Iterable[Task],
    week: str,
    team: Team,
    area: Area,
    priority: Priority,
    exclude_id: str | None = None,
) -> LimitCheck:
    """
    Check whether one more task at ``priority`` fits in the team's capacity.

    Pass ``exclude_id`` when validating an edit so the task does not count
    against itself.
    """
    capacity = PRIORITY_CAPACITY.get(priority)
    if capacity is None or team == Team.UNASSIGNED:
        return LimitCheck(allowed=True)

    taken = sum(
        1
        for t in tasks
        if t.week == week
        and t.responsible == team
        and t.area == area
        and t.priority == priority
        and t.id != exclude_id
    )

    if taken < capacity:
        return LimitCheck(allowed=True)

    if priority == Priority.URGENT:
        message = (
            f"El equipo {team.value} ya tiene una tarea URGENTE "
            f"en el área de {area.value} para esta semana."
        )
    else:
        message = (
            f"El equipo {team.value} ya tiene el máximo de {capacity} tareas ALTAS "
            f"en el área de {area.value} para esta semana."
        )
    return LimitCheck(allowed=False, message=message)
