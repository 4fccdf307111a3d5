"""
Tests for merging imported tasks into the board.
"""

from taskboard.schemas import ImportOutcome, MergeResult, Priority, Status, Team
from taskboard.services.exchange import export_week, run_import
from taskboard.services.merge import identity_key, merge_imported, summarize_import

from tests.factories import OTHER_WEEK, WEEK, make_comment, make_task

BANNER_IMPORT = f"""SEMANA: {WEEK}
GENERADO EL: 03/01/2024, 18:45:00

========================================
ÁREA: PRODUCCIÓN
========================================

Ana:

  Equipo: Core Performance 🩷
  - Tarea: Banner
    Prioridad: Media
    Estado: Activa
    Entrega: No definida
    Basecamp: http://x
    Comentarios: 0
"""


class TestIdentity:

    def test_title_and_requester_are_trimmed_and_case_insensitive(self):
        a = make_task(title="Banner", requester="Ana")
        b = make_task(title="  BANNER ", requester="ana ")
        assert identity_key(a) == identity_key(b)

    def test_week_area_and_team_must_match(self):
        base = make_task()
        assert identity_key(base) != identity_key(make_task(week=OTHER_WEEK))
        assert identity_key(base) != identity_key(make_task(responsible=Team.FULL))


class TestMergeImported:

    def test_fills_empty_link_and_unblocks(self):
        existing = [make_task(basecamp_link="", status=Status.BLOCKED)]

        summary, result = run_import(existing, BANNER_IMPORT)

        assert result.added == 0
        assert result.updated == 1
        [banner] = result.tasks
        assert banner.id == existing[0].id
        assert banner.basecamp_link == "http://x"
        assert banner.status == Status.ACTIVE
        assert summary.outcome == ImportOutcome.MERGED

    def test_reimporting_own_export_changes_nothing(self):
        existing = [
            make_task(title="Banner", comments=[make_comment()]),
            make_task(title="Logo", priority=Priority.HIGH, description="Vectorial"),
            make_task(title="Video", basecamp_link="", status=Status.BLOCKED, responsible=Team.BLACK),
        ]

        summary, result = run_import(existing, export_week(existing, WEEK))

        assert (result.added, result.updated) == (0, 0)
        assert summary.outcome == ImportOutcome.UP_TO_DATE
        assert [t.model_dump() for t in result.tasks] == [t.model_dump() for t in existing]

    def test_reimport_with_several_teams_per_requester(self):
        existing = [
            make_task(title="Banner", responsible=Team.CORE),
            make_task(title="Video", responsible=Team.BLACK),
        ]

        summary, result = run_import(existing, export_week(existing, WEEK))

        assert (result.added, result.updated) == (0, 0)
        assert summary.outcome == ImportOutcome.UP_TO_DATE

    def test_never_overwrites_existing_values(self):
        existing = [make_task(description="Original", basecamp_link="http://a", delivery_date="2024-01-02")]
        incoming = [make_task(description="Nueva", basecamp_link="http://b", delivery_date="2024-01-05",
                              priority=Priority.URGENT)]

        result = merge_imported(existing, incoming)

        [task] = result.tasks
        assert task.description == "Original"
        assert task.basecamp_link == "http://a"
        assert task.delivery_date == "2024-01-02"
        assert task.priority == Priority.MEDIUM
        assert result.updated == 0

    def test_comments_are_deduplicated_by_author_and_text(self):
        existing = [make_task(comments=[make_comment("Head", "Revisar logo")])]
        incoming = [make_task(comments=[
            make_comment("Head", " Revisar logo "),
            make_comment("Leader", "Revisar logo"),
        ])]

        result = merge_imported(existing, incoming)

        [task] = result.tasks
        assert [(c.author, c.text) for c in task.comments] == [
            ("Head", "Revisar logo"),
            ("Leader", "Revisar logo"),
        ]
        assert result.updated == 1

    def test_unmatched_tasks_are_appended(self):
        existing = [make_task(title="Banner")]
        incoming = [make_task(title="Landing"), make_task(title="Banner", week=OTHER_WEEK)]

        result = merge_imported(existing, incoming)

        assert result.added == 2
        assert [t.title for t in result.tasks] == ["Banner", "Landing", "Banner"]
        assert result.tasks[0].id == existing[0].id

    def test_duplicates_within_batch_are_merged_into_first(self):
        incoming = [
            make_task(title="Landing", description=""),
            make_task(title="Landing", description="Segunda copia"),
        ]

        result = merge_imported([], incoming)

        assert result.added == 1
        assert result.updated == 1
        assert result.tasks[0].description == "Segunda copia"

    def test_does_not_mutate_inputs(self):
        existing = [make_task(basecamp_link="", status=Status.BLOCKED)]
        incoming = [make_task(basecamp_link="http://x")]
        before = [t.model_dump() for t in existing]

        merge_imported(existing, incoming)

        assert [t.model_dump() for t in existing] == before

    def test_merged_comments_are_copies(self):
        existing = [make_task()]
        incoming = [make_task(comments=[make_comment("Leader", "Nuevo")])]

        result = merge_imported(existing, incoming)

        [merged] = result.tasks[0].comments
        assert merged == incoming[0].comments[0]
        assert merged is not incoming[0].comments[0]


class TestSummarizeImport:

    def test_nothing_found(self):
        summary = summarize_import(0, None)
        assert summary.outcome == ImportOutcome.NOTHING_FOUND
        assert summary.found == 0

    def test_up_to_date(self):
        summary = summarize_import(3, MergeResult(tasks=[]))
        assert summary.outcome == ImportOutcome.UP_TO_DATE
        assert summary.found == 3

    def test_merged_reports_counts(self):
        summary = summarize_import(4, MergeResult(tasks=[], added=3, updated=1))
        assert summary.outcome == ImportOutcome.MERGED
        assert (summary.added, summary.updated) == (3, 1)
        assert "3 tareas nuevas" in summary.message
        assert "1 tareas existentes" in summary.message

    def test_run_import_with_no_tasks(self):
        summary, result = run_import([make_task()], "texto sin formato\n")
        assert summary.outcome == ImportOutcome.NOTHING_FOUND
        assert result is None
