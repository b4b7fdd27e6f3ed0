import pandas as pd
from typing import List, Sequence

from grade_tracker.backend_logic import (
    describe_current_grade,
    entry_credits,
    format_remaining_weight,
    scale_summary,
)
from grade_tracker.models import Assignment, CourseEntry

# ------------------------
# CSV helpers (UI-side)
# ------------------------

TABLE_COLUMNS = [
    "Course Code",
    "Year",
    "Semester",
    "Entry Type",
    "Goal Grade",
    "Current / Final Grade",
    "Progress Details",
    "Credits",
]


def _normalise_cols(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    # allow "assignment" / "score" as aliases
    if "assignment" in df.columns and "name" not in df.columns:
        df = df.rename(columns={"assignment": "name"})
    if "score" in df.columns and "grade" not in df.columns:
        df = df.rename(columns={"score": "grade"})
    return df


def read_csv_upload(uploaded_file) -> pd.DataFrame:
    df = pd.read_csv(uploaded_file)
    return _normalise_cols(df)


def validate_assignments_csv(df: pd.DataFrame) -> pd.DataFrame:
    required = {"name", "weight"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns: {sorted(missing)}. Expected: Name, Grade, Weight.")
    if "grade" not in df.columns:
        df = df.assign(grade=None)
    out = df[["name", "grade", "weight"]].copy()
    out = out.rename(columns={"name": "Name", "grade": "Grade", "weight": "Weight"})
    return out


def parse_assignments(df: pd.DataFrame) -> List[Assignment]:
    """
    Rows without a name or with a non-positive weight are skipped, the same
    rule the form applies. A blank grade means "not graded yet".
    """
    rows = []
    for _, row in df.iterrows():
        name = row.get("Name")
        grade = row.get("Grade")
        weight = row.get("Weight")
        if pd.isna(name) or str(name).strip() == "" or pd.isna(weight):
            continue
        if float(weight) <= 0:
            continue
        rows.append(
            Assignment(
                name=str(name).strip(),
                grade=None if pd.isna(grade) else float(grade),
                weight=float(weight),
            )
        )
    return rows


def progress_details(entry: CourseEntry) -> str:
    if entry.entry_type == "final":
        return "N/A"
    summary = scale_summary(entry.assignments)
    return f"{summary.count} Assignments Entered, Remaining Weight: {format_remaining_weight(summary.remaining_weight)}%"


def entries_to_frame(entries: Sequence[CourseEntry]) -> pd.DataFrame:
    rows = [
        {
            "Course Code": e.course,
            "Year": e.year,
            "Semester": e.semester,
            "Entry Type": "Final Grade" if e.entry_type == "final" else "Grading Scale",
            "Goal Grade": e.goal_grade,
            "Current / Final Grade": describe_current_grade(e),
            "Progress Details": progress_details(e),
            "Credits": entry_credits(e),
        }
        for e in entries
    ]
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def frame_to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")
