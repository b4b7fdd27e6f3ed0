import altair as alt
import pandas as pd
import streamlit as st

from grade_tracker.backend_logic import *
from grade_tracker.io_csv import *
from grade_tracker import form_state as fs
from grade_tracker.config import configure_logging, load_config
from grade_tracker.store import create_store_from_config
from grade_tracker.tracker import CourseTracker

# ------------------------
# Streamlit UI
# ------------------------

st.set_page_config(
    page_title="Academic Progress Tracker | CGPA Dashboard",
    page_icon="📚",
    layout="wide",
)


@st.cache_resource
def get_tracker() -> CourseTracker:
    config = load_config()
    configure_logging(config["log_level"])
    return CourseTracker(create_store_from_config(config["store"]))


tracker = get_tracker()

if "entries" not in st.session_state:
    st.session_state["entries"] = tracker.load_courses()
if "view" not in st.session_state:
    st.session_state["view"] = fs.ViewState()
if "form" not in st.session_state:
    st.session_state["form"] = fs.FormState()
if "pending_delete" not in st.session_state:
    st.session_state["pending_delete"] = None

entries = st.session_state["entries"]
view = st.session_state["view"]
form = st.session_state["form"]


def commit(new_form=None, new_view=None, new_entries=None, message=None):
    """Store the next state and rerun so every widget renders from it."""
    if new_form is not None:
        st.session_state["form"] = new_form
    if new_view is not None:
        st.session_state["view"] = new_view
    if new_entries is not None:
        st.session_state["entries"] = new_entries
    st.session_state["flash"] = message
    st.rerun()


st.title("📚 Academic Progress Tracker")

flash = st.session_state.pop("flash", None)
if flash:
    st.warning(flash)

total_cgpa = compute_average_cgpa(entries)

# ------------------------
# Landing dashboard
# ------------------------

st.header("CGPA Dashboard")

col_cgpa, col_toggle = st.columns([4, 1])
with col_cgpa:
    st.metric("Total CGPA", total_cgpa if view.total_cgpa_visible else "••••")
with col_toggle:
    if st.button("Hide" if view.total_cgpa_visible else "Show", key="toggle_total_cgpa"):
        commit(new_view=fs.toggle_total_cgpa(view))

st.subheader("Select Year")
year_cols = st.columns(len(fs.YEARS))
for col, year in zip(year_cols, fs.YEARS):
    with col:
        if st.button(year, key=f"year_{year}", type="primary" if year == view.selected_year else "secondary"):
            commit(new_view=fs.select_year(view, year))

if view.selected_year:
    st.subheader(f"Select Semester for {view.selected_year}")
    sem_cols = st.columns(len(fs.SEMESTERS) + 3)
    for col, semester in zip(sem_cols, fs.SEMESTERS):
        with col:
            if st.button(
                semester,
                key=f"semester_{semester}",
                type="primary" if semester == view.selected_semester else "secondary",
            ):
                new_view, new_form = fs.select_semester(view, form, semester)
                commit(new_form=new_form, new_view=new_view)

term_entries = filter_term(entries, view.selected_year, view.selected_semester)

if view.term_selected:
    st.metric(
        f"CGPA for {view.selected_year} {view.selected_semester}",
        compute_average_cgpa(term_entries),
    )

# ------------------------
# Add / edit form
# ------------------------

if view.term_selected:
    st.markdown("---")
    st.header("Edit Class Progress" if form.is_editing else "Add New Class Progress")
    rev = form.revision

    course = st.text_input(
        "Course Code:",
        value=form.course,
        placeholder="e.g., CSC1010",
        help="Course code must be three letters followed by four numbers",
        key=f"course_{rev}",
    )

    c1, c2 = st.columns(2)
    with c1:
        year_options = ("",) + fs.YEARS
        form_year = st.selectbox(
            "Year:",
            year_options,
            index=year_options.index(form.year) if form.year in year_options else 0,
            format_func=lambda y: y or "Select year",
            key=f"form_year_{rev}",
        )
    with c2:
        semester_options = ("",) + fs.SEMESTERS
        form_semester = st.selectbox(
            "Semester:",
            semester_options,
            index=semester_options.index(form.semester) if form.semester in semester_options else 0,
            format_func=lambda s: s or "Select semester",
            key=f"form_semester_{rev}",
        )

    goal_grade = st.text_input(
        "Goal Grade (Letter):",
        value=form.goal_grade,
        placeholder="e.g., A, B+",
        help=f"Valid grades: {fs.VALID_GRADES_HINT}",
        key=f"goal_grade_{rev}",
    )

    entry_type = st.radio(
        "Choose Entry Type:",
        ["final", "scale"],
        index=0 if form.entry_type == "final" else 1,
        format_func=lambda t: "Final Grade" if t == "final" else "Grading Scale",
        horizontal=True,
        key=f"entry_type_{rev}",
    )

    form = fs.update_fields(
        form,
        course=course,
        year=form_year,
        semester=form_semester,
        goal_grade=goal_grade,
        entry_type=entry_type,
    )

    if entry_type == "final":
        final_grade = st.text_input(
            "Final Grade (Letter):",
            value=form.final_grade,
            placeholder="e.g., A, B+",
            help=f"Valid grades: {fs.VALID_GRADES_HINT}",
            key=f"final_grade_{rev}",
        )
        form = fs.update_fields(form, final_grade=final_grade)
    else:
        a1, a2, a3 = st.columns(3)
        with a1:
            weight = st.number_input(
                "Assignment Weight (%):",
                value=float(form.assignment_weight),
                step=1.0,
                key=f"assignment_weight_{rev}",
            )
        with a2:
            assignment_name = st.text_input(
                "Assignment Name:",
                value=form.assignment_name,
                placeholder="Enter assignment name",
                key=f"assignment_name_{rev}",
            )
        with a3:
            assignment_grade = st.number_input(
                "Assignment Grade (leave blank if not graded):",
                value=None,
                min_value=0.0,
                max_value=100.0,
                placeholder="Enter assignment grade",
                key=f"assignment_grade_{rev}",
            )
        form = fs.update_fields(
            form,
            assignment_weight=weight,
            assignment_name=assignment_name,
            assignment_grade="" if assignment_grade is None else str(assignment_grade),
        )

        if st.button("Add Assignment", key="add_assignment"):
            new_form, error = fs.add_assignment(form)
            commit(new_form=new_form, message=error)

        assignments_csv = st.file_uploader(
            "Optionally upload assignments CSV (Name, Grade, Weight)",
            type=["csv"],
            key=f"assignments_csv_{rev}",
        )
        if assignments_csv is not None:
            try:
                uploaded = parse_assignments(validate_assignments_csv(read_csv_upload(assignments_csv)))
            except Exception as e:
                st.error(f"Assignments CSV error: {e}")
            else:
                if st.button(f"Add {len(uploaded)} uploaded assignments", key="add_uploaded"):
                    commit(new_form=fs.update_fields(fs.add_assignments(form, uploaded), revision=rev + 1))

        for idx, a in enumerate(form.assignments):
            row_text, row_button = st.columns([5, 1])
            with row_text:
                grade_text = f"{a.grade:g}%" if a.is_graded else "Not graded"
                st.write(f"{a.name or 'Untitled'}: {grade_text} (Weight: {a.weight:g}%)")
            with row_button:
                if st.button("Remove", key=f"remove_assignment_{rev}_{idx}"):
                    commit(new_form=fs.remove_assignment(form, idx))

        if form.assignments:
            preview = fs.scale_preview(form)
            p1, p2, p3 = st.columns(3)
            with p1:
                st.metric("Current Average", f"{preview.average:.2f}% ({preview.letter})")
            with p2:
                st.metric("Assignments Entered", preview.count)
            with p3:
                st.metric("Remaining Weight", f"{format_remaining_weight(preview.remaining_weight)}%")

    st.session_state["form"] = form

    b1, b2, _ = st.columns([1, 1, 4])
    with b1:
        submitted = st.button(
            "Save Changes" if form.is_editing else "Add Class Progress",
            type="primary",
            key="submit_entry",
        )
    with b2:
        if form.is_editing and st.button("Cancel", key="cancel_edit"):
            commit(new_form=fs.cancel_edit(form))

    if submitted:
        errors = fs.validate_submission(form)
        if errors:
            for error in errors:
                st.warning(error)
        else:
            ok, reloaded = tracker.submit(fs.build_entry(form), form.editing_id, entries)
            if ok:
                commit(new_form=fs.reset_form(form), new_entries=reloaded)
            else:
                commit(new_entries=reloaded, message="The course could not be saved. See the log for details.")

# ------------------------
# Course table
# ------------------------

if view.term_selected:
    st.markdown("---")
    head_col, mode_col = st.columns([4, 1])
    with mode_col:
        view_mode = st.selectbox(
            "View:",
            fs.VIEW_MODES,
            index=fs.VIEW_MODES.index(view.view_mode),
            format_func=lambda m: "This Semester" if m == "thisSemester" else "All Courses",
            key="view_mode",
        )
        if view_mode != view.view_mode:
            commit(new_view=fs.set_view_mode(view, view_mode))
    with head_col:
        if view.view_mode == "thisSemester":
            st.header(f"Your Class Progress for {view.selected_year} {view.selected_semester}")
        else:
            st.header("All Courses")

    entries_to_show = term_entries if view.view_mode == "thisSemester" else entries
    table_df = entries_to_frame(entries_to_show)

    if len(entries_to_show) == 0:
        st.info("No courses recorded yet.")

    for entry, (_, row) in zip(entries_to_show, table_df.iterrows()):
        cols = st.columns([2, 1, 1, 1, 1, 2, 2, 1, 1])
        for col, name in zip(cols, TABLE_COLUMNS[:7]):
            col.write(row[name])
        with cols[7]:
            if st.button("Edit", key=f"edit_{entry.id}"):
                new_form, new_view = fs.start_edit(st.session_state["form"], view, entry)
                commit(new_form=new_form, new_view=new_view)
        with cols[8]:
            if st.button("Delete", key=f"delete_{entry.id}"):
                st.session_state["pending_delete"] = entry.id
                st.rerun()

    pending = st.session_state["pending_delete"]
    if pending is not None:
        st.warning("Are you sure you want to delete this entry?")
        y_col, n_col, _ = st.columns([1, 1, 4])
        with y_col:
            if st.button("Yes, delete", key="confirm_delete"):
                st.session_state["pending_delete"] = None
                ok, reloaded = tracker.remove(pending, entries)
                commit(
                    new_entries=reloaded,
                    message=None if ok else "The course could not be deleted. See the log for details.",
                )
        with n_col:
            if st.button("No", key="cancel_delete"):
                st.session_state["pending_delete"] = None
                st.rerun()

    st.download_button(
        "Download table as CSV",
        data=frame_to_csv_bytes(table_df),
        file_name="courses.csv",
        mime="text/csv",
    )

# ------------------------
# Analytics
# ------------------------

st.markdown("---")
st.header("Analytics")

if len(entries) == 0:
    st.write("No data available for analytics.")
else:
    series = build_chart_series(entries)
    chart_df = pd.DataFrame({"Term": series.labels, "CGPA": series.values})
    chart = (
        alt.Chart(chart_df)
        .mark_bar()
        .encode(
            x=alt.X("Term:N", sort=None, title=None),
            y=alt.Y("CGPA:Q", scale=alt.Scale(domain=[0, 10])),
            tooltip=["Term", "CGPA"],
        )
    )
    st.altair_chart(chart, use_container_width=True)

# To run:
# streamlit run app.py
