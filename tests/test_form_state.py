"""Tests for the dashboard/form state transitions."""

import pytest

from grade_tracker import form_state as fs
from grade_tracker.models import Assignment

from factories import final_entry, scale_entry


class TestViewTransitions:

    def test_select_year_clears_semester(self):
        view = fs.ViewState(selected_year="2023", selected_semester="Fall")
        new_view = fs.select_year(view, "2024")
        assert new_view.selected_year == "2024"
        assert new_view.selected_semester == ""
        assert view.selected_semester == "Fall"

    def test_select_semester_needs_year(self):
        view, form = fs.ViewState(), fs.FormState()
        assert fs.select_semester(view, form, "Fall") == (view, form)

    def test_select_semester_prefills_form(self):
        view = fs.ViewState(selected_year="2024")
        new_view, new_form = fs.select_semester(view, fs.FormState(), "Summer")
        assert new_view.term_selected
        assert (new_form.year, new_form.semester) == ("2024", "Summer")

    def test_toggle_total_cgpa(self):
        view = fs.toggle_total_cgpa(fs.ViewState())
        assert not view.total_cgpa_visible
        assert fs.toggle_total_cgpa(view).total_cgpa_visible

    def test_view_mode(self):
        assert fs.set_view_mode(fs.ViewState(), "allCourses").view_mode == "allCourses"
        with pytest.raises(ValueError):
            fs.set_view_mode(fs.ViewState(), "everything")


class TestAssignments:

    def test_add_graded_and_ungraded(self):
        form = fs.FormState(assignment_name="Quiz", assignment_grade="85", assignment_weight=10)
        form, error = fs.add_assignment(form)
        assert error is None

        form = fs.update_fields(form, assignment_name="Exam", assignment_grade=" ", assignment_weight=40)
        form, error = fs.add_assignment(form)
        assert error is None

        assert form.assignments == (
            Assignment("Quiz", 85.0, 10.0),
            Assignment("Exam", None, 40.0),
        )
        assert (form.assignment_name, form.assignment_grade, form.assignment_weight) == ("", "", 0.0)

    @pytest.mark.parametrize("name, weight", [("", 10), ("   ", 10), ("Quiz", 0), ("Quiz", -5)])
    def test_add_rejects_blank_name_or_weight(self, name, weight):
        form = fs.FormState(assignment_name=name, assignment_weight=weight)
        new_form, error = fs.add_assignment(form)
        assert new_form is form
        assert error == "Please enter a valid assignment name and weight."

    def test_add_rejects_non_numeric_grade(self):
        form = fs.FormState(assignment_name="Quiz", assignment_grade="abc", assignment_weight=10)
        new_form, error = fs.add_assignment(form)
        assert new_form is form
        assert error is not None

    def test_remove(self):
        form = fs.FormState(assignments=(Assignment("a", 1.0, 1.0), Assignment("b", 2.0, 2.0)))
        assert fs.remove_assignment(form, 0).assignments == (Assignment("b", 2.0, 2.0),)

    def test_add_batch(self):
        form = fs.FormState(assignments=(Assignment("a", 1.0, 1.0),))
        form = fs.add_assignments(form, [Assignment("b", None, 5.0)])
        assert [a.name for a in form.assignments] == ["a", "b"]

    def test_preview(self):
        form = fs.FormState(assignments=(Assignment("a", 80.0, 50.0), Assignment("b", None, 50.0)))
        preview = fs.scale_preview(form)
        assert preview.average == 40
        assert preview.letter == "E"


class TestEditCycle:

    def test_start_edit_final(self):
        entry = final_entry("B+", year="2023", semester="Winter").with_id("doc1")
        form, view = fs.start_edit(fs.FormState(assignments=(Assignment("x", 1.0, 1.0),)), fs.ViewState(), entry)

        assert form.is_editing
        assert form.editing_id == "doc1"
        assert form.final_grade == "B+"
        assert form.assignments == ()
        assert (view.selected_year, view.selected_semester) == ("2023", "Winter")

    def test_start_edit_scale(self):
        entry = scale_entry([Assignment("Lab", 70.0, 30.0)]).with_id("doc2")
        form, _ = fs.start_edit(fs.FormState(final_grade="A"), fs.ViewState(), entry)
        assert form.final_grade == ""
        assert form.assignments == (Assignment("Lab", 70.0, 30.0),)

    def test_cancel_resets_every_field(self):
        form = fs.FormState(
            course="CSC1010",
            year="2024",
            semester="Fall",
            goal_grade="A",
            entry_type="scale",
            final_grade="B",
            assignment_name="Quiz",
            assignment_grade="50",
            assignment_weight=10,
            assignments=(Assignment("a", 1.0, 1.0),),
            editing_id="doc1",
            revision=4,
        )
        reset = fs.cancel_edit(form)
        assert reset == fs.FormState(revision=5)
        assert not reset.is_editing


class TestSubmission:

    def valid_form(self, **changes):
        form = fs.FormState(course="CSC1010", year="2024", semester="Fall", goal_grade="A", final_grade="B+")
        return fs.update_fields(form, **changes)

    def test_valid(self):
        assert fs.validate_submission(self.valid_form()) == []

    def test_requires_term(self):
        errors = fs.validate_submission(self.valid_form(year=""))
        assert "Please select a year and semester first." in errors

    @pytest.mark.parametrize("course", ["CS1010", "CSC101", "CSC10100", "1234ABC", ""])
    def test_course_code_pattern(self, course):
        assert len(fs.validate_submission(self.valid_form(course=course))) == 1

    def test_grade_patterns(self):
        assert fs.validate_submission(self.valid_form(goal_grade="B-")) == []
        assert len(fs.validate_submission(self.valid_form(goal_grade="G"))) == 1
        assert len(fs.validate_submission(self.valid_form(final_grade="A++"))) == 1
        # blank final grade is allowed, it scores as F
        assert fs.validate_submission(self.valid_form(final_grade="")) == []

    def test_build_final_entry(self):
        entry = fs.build_entry(self.valid_form(assignments=(Assignment("a", 1.0, 1.0),)))
        assert entry.entry_type == "final"
        assert entry.final_grade == "B+"
        assert entry.assignments is None
        assert entry.credits == 3

    def test_build_scale_entry(self):
        entry = fs.build_entry(self.valid_form(entry_type="scale", assignments=(Assignment("a", 1.0, 1.0),)))
        assert entry.entry_type == "scale"
        assert entry.final_grade is None
        assert entry.assignments == (Assignment("a", 1.0, 1.0),)
        assert "finalGrade" not in entry.to_record()
