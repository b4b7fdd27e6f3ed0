import pytest

from grade_tracker.models import Assignment

from factories import scale_entry


@pytest.fixture
def half_graded_entry():
    return scale_entry(
        [
            Assignment(name="Midterm", grade=80.0, weight=50.0),
            Assignment(name="Final", grade=None, weight=50.0),
        ]
    )
