#!/usr/bin/env python3
"""
Seed script to fill the board with demo tasks.

Creates tasks for one week across both areas and all teams, going through
the same validation as the API, so priority capacity is respected: requests
that would exceed it are retried at a lower priority.

Usage:
    python -m scripts.seed [--tasks 40] [--week "01/01/24 - 05/01/24"] [--clear]

Options:
    --tasks N    Number of tasks to generate (default: 40)
    --week W     Week label (default: current week)
    --clear      Replace the stored board instead of adding to it
"""

import argparse
import asyncio
import random
import time
from datetime import date, timedelta

from taskboard.database import close_db, init_db
from taskboard.exceptions import PriorityLimitError
from taskboard.schemas import Area, Priority, Task, TaskCreate, Team, UserRole
from taskboard.services import board
from taskboard.storage import SqlTaskStore

REQUESTERS = ["Ana", "Luis", "Marta", "Carlos"]
TITLES = ["Banner", "Landing", "Video corto", "Post carrusel", "Newsletter", "Key visual", "Mockup"]
COMMENTS = ["Revisar tipografía", "Falta logo", "Aprobado por cliente", "Cambiar copy"]


def generate_tasks(count: int, week: str) -> list[Task]:
    """
    Build ``count`` tasks for ``week``.

    Strategy:
    - Random area, team, requester and title
    - Priority drawn with Urgent/High over-represented to exercise the limits
    - About a third without Basecamp link (blocked)
    """
    tasks: list[Task] = []
    teams = [t for t in Team if t != Team.UNASSIGNED]
    monday = date.today() - timedelta(days=date.today().weekday())
    priorities = [Priority.URGENT, Priority.HIGH, Priority.HIGH, Priority.MEDIUM, Priority.LOW]

    for i in range(count):
        task_in = TaskCreate(
            week=week,
            area=random.choice(list(Area)),
            title=f"{random.choice(TITLES)} #{i + 1:03d}",
            requester=random.choice(REQUESTERS),
            responsible=random.choice(teams),
            basecamp_link="" if random.random() < 0.33 else f"https://basecamp.example/p/{i}",
            delivery_date=(monday + timedelta(days=random.randint(0, 4))).isoformat() if random.random() < 0.7 else "",
        )

        for priority in [random.choice(priorities), Priority.MEDIUM]:
            task_in.priority = priority
            try:
                tasks, task = board.create_task(tasks, task_in, UserRole.HEAD)
                break
            except PriorityLimitError:
                continue

        if random.random() < 0.4:
            tasks, _ = board.add_comment(tasks, task.id, random.choice(COMMENTS), random.choice(list(UserRole)))

    return tasks


async def main():
    parser = argparse.ArgumentParser(description="Seed the board with demo tasks")
    parser.add_argument("--tasks", type=int, default=40, help="Number of tasks to create")
    parser.add_argument("--week", type=str, default=None, help="Week label")
    parser.add_argument("--clear", action="store_true", help="Replace existing tasks")

    args = parser.parse_args()
    week = args.week or board.week_label(date.today())

    print(f"=== Taskboard Seed Script ===")
    print(f"Generating {args.tasks} tasks for week {week}...")

    await init_db()
    store = SqlTaskStore()

    start_time = time.time()
    new_tasks = generate_tasks(args.tasks, week)
    print(f"Generation time: {time.time() - start_time:.2f}s")

    existing = [] if args.clear else await store.load()
    saved = await store.save(existing + new_tasks)
    await close_db()

    urgent = sum(1 for t in new_tasks if t.priority == Priority.URGENT)
    high = sum(1 for t in new_tasks if t.priority == Priority.HIGH)
    blocked = sum(1 for t in new_tasks if t.is_blocked)

    print(f"\n=== Board Statistics ===")
    print(f"Tasks:    {len(new_tasks)}")
    print(f"Urgent:   {urgent}")
    print(f"High:     {high}")
    print(f"Blocked:  {blocked}")
    print(f"Saved:    {'yes' if saved else 'NO (see log)'}")


if __name__ == "__main__":
    asyncio.run(main())
