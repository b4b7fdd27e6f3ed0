"""Tests for the pandas table and CSV helpers."""

import io

import pandas as pd
import pytest

from grade_tracker.io_csv import (
    TABLE_COLUMNS,
    entries_to_frame,
    frame_to_csv_bytes,
    parse_assignments,
    read_csv_upload,
    validate_assignments_csv,
)
from grade_tracker.models import Assignment

from factories import final_entry, scale_entry


class TestAssignmentsCsv:

    def test_read_normalises_columns(self):
        upload = io.StringIO(" Assignment ,Score,WEIGHT\nQuiz,90,10\n")
        df = read_csv_upload(upload)
        assert list(df.columns) == ["name", "grade", "weight"]

    def test_validate_and_parse(self):
        upload = io.StringIO("Name,Grade,Weight\nQuiz,90,10\nExam,,40\n,50,10\nLab,70,0\n")
        df = validate_assignments_csv(read_csv_upload(upload))

        assert parse_assignments(df) == [
            Assignment("Quiz", 90.0, 10.0),
            Assignment("Exam", None, 40.0),
        ]

    def test_grade_column_optional(self):
        upload = io.StringIO("name,weight\nQuiz,10\n")
        df = validate_assignments_csv(read_csv_upload(upload))
        assert parse_assignments(df) == [Assignment("Quiz", None, 10.0)]

    def test_missing_columns(self):
        df = read_csv_upload(io.StringIO("name,grade\nQuiz,90\n"))
        with pytest.raises(ValueError, match="Missing columns"):
            validate_assignments_csv(df)


class TestCourseTable:

    def test_rows(self, half_graded_entry):
        partial = scale_entry([Assignment("Quiz", 90.0, 20.0)], course="PHY3030")
        df = entries_to_frame([final_entry("A-"), half_graded_entry, partial])

        assert list(df.columns) == TABLE_COLUMNS
        assert df["Entry Type"].tolist() == ["Final Grade", "Grading Scale", "Grading Scale"]
        assert df["Current / Final Grade"].tolist() == ["A-", "40.00% (E)", "90.00% (A+)"]
        assert df["Progress Details"].tolist() == [
            "N/A",
            "2 Assignments Entered, Remaining Weight: 0%",
            "1 Assignments Entered, Remaining Weight: 80.00%",
        ]

    def test_empty_frame_keeps_columns(self):
        df = entries_to_frame([])
        assert df.empty
        assert list(df.columns) == TABLE_COLUMNS

    def test_csv_export(self):
        data = frame_to_csv_bytes(entries_to_frame([final_entry("B")]))
        back = pd.read_csv(io.BytesIO(data))
        assert back.loc[0, "Course Code"] == "CSC1010"
        assert back.loc[0, "Credits"] == 3
