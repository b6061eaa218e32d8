"""
Unit Tests for the routine editor
"""
import pytest

from errors import InvalidFieldError
from routine_editor import MISSING_CELL, RoutineEditor
from schemas import DAYS, ScheduleEntry


def entry(period, subject, teacher=None):
    return ScheduleEntry(period=period, subject=subject, teacher=teacher)


def make_routine():
    week = {day: [entry("P1", "Math", "Mr. A"), entry("P2", "Lunch"), entry("P3", "Science")] for day in DAYS}
    week["Saturday"] = [entry("P1", "Art")]
    return week


def make_editor(user, routine=None):
    updates = []
    editor = RoutineEditor(
        user,
        "10",
        routine if routine is not None else make_routine(),
        on_update_routine=lambda name, r: updates.append((name, r)),
    )
    return editor, updates


class TestWorkingCopy:
    def test_working_copy_is_deep(self, admin_user):
        routine = make_routine()
        editor, _ = make_editor(admin_user, routine)

        editor.set_field("Monday", 0, "subject", "English")

        assert routine["Monday"][0].subject == "Math"
        assert editor.editable_routine["Monday"][0].subject == "English"

    def test_new_canonical_discards_unsaved_edits(self, admin_user):
        editor, _ = make_editor(admin_user)
        editor.set_field("Monday", 0, "subject", "English")
        replacement = make_routine()

        assert editor.sync("10", replacement) is True

        assert editor.dirty is False
        assert editor.editable_routine == replacement
        assert editor.editable_routine is not replacement

    def test_same_canonical_keeps_edits(self, admin_user):
        routine = make_routine()
        editor, _ = make_editor(admin_user, routine)
        editor.set_field("Monday", 0, "subject", "English")

        assert editor.sync("10", routine) is False
        assert editor.dirty is True


class TestSetField:
    def test_grows_short_day_with_blank_entries(self, admin_user):
        """Writing Tuesday period 5 on a 3-period day grows it to 6 entries"""
        editor, _ = make_editor(admin_user)

        assert editor.set_field("Tuesday", 5, "subject", "Music") is True

        tuesday = editor.editable_routine["Tuesday"]
        assert len(tuesday) == 6
        for blank in tuesday[3:5]:
            assert blank == ScheduleEntry.blank()
        assert tuesday[5] == ScheduleEntry(period="", subject="Music", teacher="", notes="")
        assert editor.dirty is True
        assert editor.max_periods == 6

    def test_missing_day_is_created(self, admin_user):
        routine = make_routine()
        del routine["Friday"]
        editor, _ = make_editor(admin_user, routine)

        editor.set_field("Friday", 0, "teacher", "Ms. B")

        assert editor.editable_routine["Friday"][0].teacher == "Ms. B"

    def test_updates_single_field(self, admin_user):
        editor, _ = make_editor(admin_user)

        editor.set_field("Wednesday", 2, "notes", "Lab day")

        cell = editor.editable_routine["Wednesday"][2]
        assert cell.notes == "Lab day"
        assert cell.subject == "Science"

    def test_non_admin_cannot_edit(self, teacher_user):
        editor, _ = make_editor(teacher_user)

        assert editor.set_field("Monday", 0, "subject", "English") is False
        assert editor.dirty is False

    def test_sentinel_row_is_not_editable(self, admin_user):
        editor, _ = make_editor(admin_user)

        assert editor.set_field("Tuesday", 1, "subject", "Math") is False
        assert editor.editable_routine["Tuesday"][1].subject == "Lunch"

    def test_unknown_day_or_field_is_rejected(self, admin_user):
        editor, _ = make_editor(admin_user)

        with pytest.raises(InvalidFieldError):
            editor.set_field("Sunday", 0, "subject", "x")
        with pytest.raises(InvalidFieldError):
            editor.set_field("Monday", 0, "period", "x")


class TestPeriodLabel:
    def test_label_written_across_days(self, admin_user):
        editor, _ = make_editor(admin_user)

        editor.set_period_label(0, "9:00 - 9:45")

        assert all(editor.editable_routine[day][0].period == "9:00 - 9:45" for day in DAYS)
        assert editor.dirty is True

    def test_days_without_the_period_are_skipped(self, admin_user):
        """Saturday has one period, so its label column is left as is"""
        editor, _ = make_editor(admin_user)

        editor.set_period_label(2, "Last")

        assert len(editor.editable_routine["Saturday"]) == 1
        assert editor.editable_routine["Monday"][2].period == "Last"

    def test_non_admin_cannot_relabel(self, student_user):
        editor, _ = make_editor(student_user)

        assert editor.set_period_label(0, "x") is False
        assert editor.editable_routine["Monday"][0].period == "P1"


class TestRender:
    def test_renders_max_periods_rows_with_placeholders(self, student_user):
        editor, _ = make_editor(student_user)

        grid = editor.render()

        assert grid["max_periods"] == 3
        assert len(grid["rows"]) == 3
        saturday = grid["rows"][2]["cells"][DAYS.index("Saturday")]
        assert saturday == {"day": "Saturday", "placeholder": MISSING_CELL, "editable": False}

    def test_row_missing_on_canonical_day_still_renders(self, admin_user):
        routine = make_routine()
        routine["Thursday"].append(entry("P4", "Drama"))
        editor, _ = make_editor(admin_user, routine)

        row = editor.render()["rows"][3]

        assert row["period"] == ""
        assert row["cells"][DAYS.index("Monday")]["placeholder"] == MISSING_CELL
        assert row["cells"][DAYS.index("Thursday")]["subject"] == "Drama"

    @pytest.mark.parametrize("user_fixture", ["admin_user", "teacher_user", "student_user"])
    def test_lunch_row_is_merged_for_every_role(self, request, user_fixture):
        editor, _ = make_editor(request.getfixturevalue(user_fixture))

        row = editor.render()["rows"][1]

        assert row["merged"] is True
        assert all(cell["editable"] is False for cell in row["cells"] if "subject" in cell)

    def test_merge_follows_canonical_day_only(self, admin_user):
        routine = make_routine()
        routine["Tuesday"][1] = entry("P2", "History")
        editor, _ = make_editor(admin_user, routine)

        row = editor.render()["rows"][1]

        assert row["merged"] is True
        assert row["cells"][DAYS.index("Tuesday")] == {"day": "Tuesday", "subject": "History", "editable": False}

    def test_admin_cells_are_editable(self, admin_user):
        editor, _ = make_editor(admin_user)

        row = editor.render()["rows"][0]

        assert row["period_editable"] is True
        assert row["cells"][0] == {
            "day": "Monday",
            "subject": "Math",
            "teacher": "Mr. A",
            "notes": "",
            "editable": True,
        }


class TestSave:
    def test_save_emits_whole_routine_and_clears_dirty(self, admin_user):
        editor, updates = make_editor(admin_user)
        editor.set_field("Monday", 0, "subject", "English")

        assert editor.save() is True

        assert len(updates) == 1
        class_name, routine = updates[0]
        assert class_name == "10"
        assert routine["Monday"][0].subject == "English"
        assert set(routine) == set(DAYS)
        assert editor.dirty is False

    def test_save_without_changes_is_noop(self, admin_user):
        editor, updates = make_editor(admin_user)

        assert editor.save() is False
        assert updates == []

    def test_save_disabled_for_non_admin(self, teacher_user):
        editor, updates = make_editor(teacher_user)
        editor.dirty = True

        assert editor.save() is False
        assert updates == []
