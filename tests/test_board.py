"""
Tests for task lifecycle operations and role rules.
"""

from datetime import date

import pytest

from taskboard.exceptions import NotFoundError, PermissionDeniedError, PriorityLimitError, ValidationError
from taskboard.schemas import Area, Priority, Status, TaskCreate, TaskUpdate, Team, UserRole
from taskboard.schemas.task import PENDING_REQUESTER
from taskboard.services import board

from tests.factories import OTHER_WEEK, WEEK, make_task


class TestWeekLabel:

    @pytest.mark.parametrize("day", [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 7)])
    def test_monday_to_friday(self, day):
        assert board.week_label(day) == "01/01/24 - 05/01/24"

    def test_spans_month_end(self):
        assert board.week_label(date(2024, 1, 31)) == "29/01/24 - 02/02/24"


class TestCreateTask:

    def test_head_creates_active_task(self):
        task_in = TaskCreate(
            week=WEEK,
            title="  Banner ",
            requester="Ana",
            responsible=Team.CORE,
            basecamp_link="http://x",
        )

        tasks, task = board.create_task([], task_in, UserRole.HEAD)

        assert tasks == [task]
        assert task.title == "Banner"
        assert task.requester == "Ana"
        assert task.status == Status.ACTIVE
        assert task.comments == []

    def test_without_link_is_blocked(self):
        task_in = TaskCreate(week=WEEK, title="Banner", requester="Ana")
        _, task = board.create_task([], task_in, UserRole.HEAD)
        assert task.status == Status.BLOCKED

    def test_leader_requester_is_pending(self):
        task_in = TaskCreate(week=WEEK, title="Banner", requester="Ana")
        _, task = board.create_task([], task_in, UserRole.LEADER)
        assert task.requester == PENDING_REQUESTER

    def test_head_must_name_requester(self):
        with pytest.raises(ValidationError):
            board.create_task([], TaskCreate(week=WEEK, title="Banner"), UserRole.HEAD)

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            board.create_task([], TaskCreate(week=WEEK, title="   ", requester="Ana"), UserRole.HEAD)

    def test_defaults_to_current_week(self):
        task_in = TaskCreate(title="Banner", requester="Ana")
        _, task = board.create_task([], task_in, UserRole.HEAD, today=date(2024, 1, 10))
        assert task.week == "08/01/24 - 12/01/24"

    def test_capacity_enforced(self):
        existing = [make_task(priority=Priority.URGENT)]
        task_in = TaskCreate(
            week=WEEK,
            title="Landing",
            requester="Luis",
            area=Area.PRODUCTION,
            responsible=Team.CORE,
            priority=Priority.URGENT,
        )

        with pytest.raises(PriorityLimitError) as exc_info:
            board.create_task(existing, task_in, UserRole.HEAD)

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "priority_limit"

    def test_input_not_mutated(self):
        existing = [make_task()]
        tasks, _ = board.create_task(existing, TaskCreate(week=WEEK, title="Logo", requester="Ana"), UserRole.HEAD)
        assert len(existing) == 1
        assert len(tasks) == 2


class TestUpdateTask:

    def test_leader_may_change_team_and_status(self):
        task = make_task()
        tasks, updated = board.update_task(
            [task], task.id, TaskUpdate(responsible=Team.FULL, status=Status.IN_PROGRESS), UserRole.LEADER
        )

        assert updated.responsible == Team.FULL
        assert updated.status == Status.IN_PROGRESS
        assert tasks == [updated]
        assert task.responsible == Team.CORE

    @pytest.mark.parametrize("field,value", [
        ("title", "Otro"),
        ("requester", "Luis"),
        ("priority", Priority.LOW),
    ])
    def test_leader_may_not_change_head_fields(self, field, value):
        task = make_task()
        with pytest.raises(PermissionDeniedError):
            board.update_task([task], task.id, TaskUpdate(**{field: value}), UserRole.LEADER)

    def test_leader_resending_same_head_field_is_allowed(self):
        task = make_task(priority=Priority.HIGH)
        _, updated = board.update_task(
            [task], task.id, TaskUpdate(priority=Priority.HIGH, delivery_date="2024-01-04"), UserRole.LEADER
        )
        assert updated.delivery_date == "2024-01-04"

    def test_clearing_link_blocks_and_adding_link_unblocks(self):
        task = make_task()
        tasks, blocked = board.update_task([task], task.id, TaskUpdate(basecamp_link=""), UserRole.LEADER)
        assert blocked.status == Status.BLOCKED

        _, active = board.update_task(tasks, task.id, TaskUpdate(basecamp_link="http://y"), UserRole.LEADER)
        assert active.status == Status.ACTIVE

    def test_cannot_unblock_without_link(self):
        task = make_task(basecamp_link="", status=Status.BLOCKED)
        _, updated = board.update_task([task], task.id, TaskUpdate(status=Status.COMPLETED), UserRole.HEAD)
        assert updated.status == Status.BLOCKED

    def test_raising_priority_respects_capacity(self):
        urgent = make_task(priority=Priority.URGENT, title="Banner")
        other = make_task(title="Landing")

        with pytest.raises(PriorityLimitError):
            board.update_task([urgent, other], other.id, TaskUpdate(priority=Priority.URGENT), UserRole.HEAD)

    def test_task_does_not_count_against_itself(self):
        urgent = make_task(priority=Priority.URGENT)
        _, updated = board.update_task([urgent], urgent.id, TaskUpdate(description="Más texto"), UserRole.HEAD)
        assert updated.priority == Priority.URGENT

    def test_unknown_task(self):
        with pytest.raises(NotFoundError):
            board.update_task([make_task()], "missing", TaskUpdate(description="x"), UserRole.HEAD)

    def test_id_and_created_at_are_preserved(self):
        task = make_task()
        _, updated = board.update_task([task], task.id, TaskUpdate(title="Nuevo"), UserRole.HEAD)
        assert updated.id == task.id
        assert updated.created_at == task.created_at


class TestCommentsAndDelete:

    def test_comment_authored_by_role(self):
        task = make_task()
        _, updated = board.add_comment([task], task.id, "Listo para revisión", UserRole.LEADER)

        [comment] = updated.comments
        assert comment.author == "Leader"
        assert comment.text == "Listo para revisión"
        assert task.comments == []

    def test_empty_comment_rejected(self):
        task = make_task()
        with pytest.raises(ValidationError):
            board.add_comment([task], task.id, "  ", UserRole.HEAD)

    def test_head_deletes(self):
        keep, drop = make_task(title="Keep"), make_task(title="Drop")
        assert board.delete_task([keep, drop], drop.id, UserRole.HEAD) == [keep]

    def test_leader_cannot_delete(self):
        task = make_task()
        with pytest.raises(PermissionDeniedError):
            board.delete_task([task], task.id, UserRole.LEADER)


class TestBoardView:

    def test_filters_combine(self):
        tasks = [
            make_task(title="Banner", responsible=Team.CORE),
            make_task(title="Logo", responsible=Team.FULL),
            make_task(title="Video", responsible=Team.CORE, week=OTHER_WEEK),
            make_task(title="Landing", responsible=Team.CORE, area=Area.BRANDING),
        ]

        result = board.filter_tasks(tasks, week=WEEK, team=Team.CORE, area=Area.PRODUCTION)

        assert [t.title for t in result] == ["Banner"]

    def test_search_matches_title_or_requester(self):
        tasks = [
            make_task(title="Banner navidad", requester="Ana"),
            make_task(title="Logo", requester="Navarro"),
            make_task(title="Video", requester="Luis"),
        ]

        result = board.filter_tasks(tasks, search="NAV")

        assert {t.title for t in result} == {"Banner navidad", "Logo"}

    def test_status_filter(self):
        tasks = [make_task(status=Status.COMPLETED), make_task()]
        assert len(board.filter_tasks(tasks, status=Status.COMPLETED)) == 1

    def test_list_weeks_newest_first(self):
        tasks = [make_task(week=WEEK), make_task(week=OTHER_WEEK), make_task(week=WEEK)]
        assert board.list_weeks(tasks) == [OTHER_WEEK, WEEK]
