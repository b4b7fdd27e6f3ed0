"""
Dashboard and add/edit form state.

Both states are frozen dataclasses; every user action is a function that
takes the current state and returns the next one. Streamlit keeps the
current value in session_state between reruns.
"""

import re
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from grade_tracker.backend_logic import ScaleSummary, scale_summary
from grade_tracker.models import Assignment, CourseEntry, DEFAULT_CREDITS

YEARS = tuple(str(y) for y in range(2020, 2030))
SEMESTERS = ("Winter", "Summer", "Fall")
VIEW_MODES = ("thisSemester", "allCourses")

COURSE_CODE_PATTERN = re.compile(r"[A-Za-z]{3}[0-9]{4}")
# The form also accepts B-, C- and D-; they score 0 like any other unknown letter
GRADE_PATTERN = re.compile(r"(A\+|A|A-|B\+|B|B-|C\+|C|C-|D\+|D|D-|E|F|ABS|EIN)")
VALID_GRADES_HINT = "A+, A, A-, B+, B, B-, C+, C, C-, D+, D, D-, E, F, ABS, EIN"


@dataclass(frozen=True)
class ViewState:
    selected_year: str = ""
    selected_semester: str = ""
    total_cgpa_visible: bool = True
    view_mode: str = "thisSemester"

    @property
    def term_selected(self) -> bool:
        return bool(self.selected_year and self.selected_semester)


@dataclass(frozen=True)
class FormState:
    course: str = ""
    year: str = ""
    semester: str = ""
    goal_grade: str = ""
    entry_type: str = "final"
    final_grade: str = ""
    assignment_name: str = ""
    assignment_grade: str = ""  # blank = not graded
    assignment_weight: float = 0.0
    assignments: Tuple[Assignment, ...] = ()
    editing_id: Optional[str] = None
    # bumped on every reset so the UI can recreate its input widgets
    revision: int = 0

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None


def is_valid_letter(grade: str) -> bool:
    return GRADE_PATTERN.fullmatch(grade or "") is not None


# ------------------------
# Dashboard transitions
# ------------------------

def select_year(view: ViewState, year: str) -> ViewState:
    return replace(view, selected_year=year, selected_semester="")


def select_semester(view: ViewState, form: FormState, semester: str) -> Tuple[ViewState, FormState]:
    if not view.selected_year:
        return view, form
    return (
        replace(view, selected_semester=semester),
        replace(form, year=view.selected_year, semester=semester, revision=form.revision + 1),
    )


def toggle_total_cgpa(view: ViewState) -> ViewState:
    return replace(view, total_cgpa_visible=not view.total_cgpa_visible)


def set_view_mode(view: ViewState, mode: str) -> ViewState:
    if mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode: {mode!r}")
    return replace(view, view_mode=mode)


# ------------------------
# Form transitions
# ------------------------

def update_fields(form: FormState, **changes) -> FormState:
    return replace(form, **changes)


def add_assignment(form: FormState) -> Tuple[FormState, Optional[str]]:
    """Move the three assignment inputs into the list; returns (state, error)."""
    weight = float(form.assignment_weight or 0)
    if form.assignment_name.strip() == "" or weight <= 0:
        return form, "Please enter a valid assignment name and weight."

    grade_text = str(form.assignment_grade).strip()
    try:
        grade = None if grade_text == "" else float(grade_text)
    except ValueError:
        return form, "Assignment grade must be a number (or blank if not graded)."

    new_assignment = Assignment(name=form.assignment_name, grade=grade, weight=weight)
    return (
        replace(
            form,
            assignments=form.assignments + (new_assignment,),
            assignment_name="",
            assignment_grade="",
            assignment_weight=0.0,
            revision=form.revision + 1,
        ),
        None,
    )


def add_assignments(form: FormState, assignments: Sequence[Assignment]) -> FormState:
    """Append a batch (e.g. from a CSV upload) after the ones already entered."""
    return replace(form, assignments=form.assignments + tuple(assignments))


def remove_assignment(form: FormState, index: int) -> FormState:
    return replace(
        form,
        assignments=tuple(a for i, a in enumerate(form.assignments) if i != index),
    )


def reset_form(form: FormState) -> FormState:
    """Back to a blank add form; only the revision counter carries over."""
    return FormState(revision=form.revision + 1)


def cancel_edit(form: FormState) -> FormState:
    return reset_form(form)


def start_edit(form: FormState, view: ViewState, entry: CourseEntry) -> Tuple[FormState, ViewState]:
    is_final = entry.entry_type == "final"
    new_form = FormState(
        course=entry.course,
        year=entry.year,
        semester=entry.semester,
        goal_grade=entry.goal_grade,
        entry_type=entry.entry_type,
        final_grade=(entry.final_grade or "") if is_final else "",
        assignments=() if is_final else tuple(entry.assignments or ()),
        editing_id=entry.id,
        revision=form.revision + 1,
    )
    new_view = replace(view, selected_year=entry.year, selected_semester=entry.semester)
    return new_form, new_view


def validate_submission(form: FormState) -> List[str]:
    errors = []
    if not form.year or not form.semester:
        errors.append("Please select a year and semester first.")
    if not COURSE_CODE_PATTERN.fullmatch(form.course or ""):
        errors.append("Course code must be three letters followed by four numbers")
    if not is_valid_letter(form.goal_grade):
        errors.append(f"Goal grade must be one of: {VALID_GRADES_HINT}")
    if form.entry_type == "final" and form.final_grade and not is_valid_letter(form.final_grade):
        errors.append(f"Final grade must be one of: {VALID_GRADES_HINT}")
    return errors


def build_entry(form: FormState) -> CourseEntry:
    if form.entry_type == "final":
        return CourseEntry(
            course=form.course,
            year=form.year,
            semester=form.semester,
            goal_grade=form.goal_grade,
            entry_type="final",
            final_grade=form.final_grade,
            credits=DEFAULT_CREDITS,
        )
    return CourseEntry(
        course=form.course,
        year=form.year,
        semester=form.semester,
        goal_grade=form.goal_grade,
        entry_type="scale",
        assignments=form.assignments,
        credits=DEFAULT_CREDITS,
    )


def scale_preview(form: FormState) -> ScaleSummary:
    return scale_summary(form.assignments)
