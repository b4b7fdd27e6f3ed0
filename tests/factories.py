from grade_tracker.models import CourseEntry


def final_entry(grade, year="2024", semester="Fall", course="CSC1010", credits=3):
    return CourseEntry(
        course=course,
        year=year,
        semester=semester,
        goal_grade="A",
        entry_type="final",
        final_grade=grade,
        credits=credits,
    )


def scale_entry(assignments, year="2024", semester="Fall", course="MAT2020", credits=3):
    return CourseEntry(
        course=course,
        year=year,
        semester=semester,
        goal_grade="B+",
        entry_type="scale",
        assignments=tuple(assignments),
        credits=credits,
    )
