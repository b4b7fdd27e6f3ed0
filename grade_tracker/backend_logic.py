from types import MappingProxyType
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence
import numpy as np

from grade_tracker.models import Assignment, CourseEntry, DEFAULT_CREDITS

# ------------------------
# Grade converter
# ------------------------

LETTER_TO_NUMERIC = MappingProxyType({
    "A+": 10,
    "A": 9,
    "A-": 8,
    "B+": 7,
    "B": 6,
    "C+": 5,
    "C": 4,
    "D+": 3,
    "D": 2,
    "E": 1,
    "F": 0,
    "ABS": 0,
    "EIN": 0,
})

LETTER_GRADES = tuple(LETTER_TO_NUMERIC.keys())

# Inclusive lower bounds, highest first
PERCENTAGE_BANDS = (
    (90.0, "A+"),
    (85.0, "A"),
    (80.0, "A-"),
    (75.0, "B+"),
    (70.0, "B"),
    (65.0, "C+"),
    (60.0, "C"),
    (55.0, "D+"),
    (50.0, "D"),
    (40.0, "E"),
)

NOT_AVAILABLE = "N/A"
OVERALL_LABEL = "Overall"


def percentage_to_letter(percentage: float) -> str:
    for lower_bound, letter in PERCENTAGE_BANDS:
        if percentage >= lower_bound:
            return letter
    return "F"


def letter_to_numeric(letter: str) -> int:
    return LETTER_TO_NUMERIC.get(letter, 0)


# ------------------------
# Average aggregator
# ------------------------

class ScaleSummary(NamedTuple):
    total_weight: float
    weighted_sum: float
    average: float
    letter: str
    remaining_weight: float
    count: int


def scale_summary(assignments: Optional[Sequence[Assignment]]) -> ScaleSummary:
    """
    Weighted average of a set of assignments on the percentage scale.

    An ungraded assignment (grade None) adds nothing to the weighted sum but
    its weight still counts toward the total, so it pulls the average down
    exactly as a 0% would.
    """
    assignments = list(assignments or [])
    if not assignments:
        return ScaleSummary(0.0, 0.0, 0.0, percentage_to_letter(0.0), 100.0, 0)

    weights = np.array([float(a.weight) for a in assignments], dtype=float)
    grades = np.array(
        [0.0 if a.grade is None else float(a.grade) for a in assignments],
        dtype=float,
    )
    total_weight = float(weights.sum())
    weighted_sum = float(np.dot(grades, weights))
    average = weighted_sum / total_weight if total_weight > 0 else 0.0

    return ScaleSummary(
        total_weight=total_weight,
        weighted_sum=weighted_sum,
        average=average,
        letter=percentage_to_letter(average),
        remaining_weight=max(0.0, 100.0 - total_weight),
        count=len(assignments),
    )


def entry_credits(entry: CourseEntry) -> float:
    # 0 counts as "not set", same as None
    return float(entry.credits or DEFAULT_CREDITS)


def compute_entry_numeric(entry: CourseEntry) -> int:
    if entry.entry_type == "final":
        return letter_to_numeric(entry.final_grade or "F")
    # Round-trip through the letter so the table and the CGPA always agree
    summary = scale_summary(entry.assignments)
    return letter_to_numeric(percentage_to_letter(summary.average))


def compute_average_cgpa(entries: Iterable[CourseEntry]) -> str:
    """
    Credit-weighted CGPA formatted to two decimals, or "N/A" for no entries.
    """
    entries = list(entries)
    if len(entries) == 0:
        return NOT_AVAILABLE

    points = np.array([compute_entry_numeric(e) for e in entries], dtype=float)
    credits = np.array([entry_credits(e) for e in entries], dtype=float)
    cgpa = float(np.dot(points, credits) / credits.sum())
    return f"{cgpa:.2f}"


def cgpa_to_float(value: str) -> float:
    """Chart-side conversion: the "N/A" sentinel plots as 0."""
    if value == NOT_AVAILABLE:
        return 0.0
    return float(value)


def format_remaining_weight(remaining: float) -> str:
    return f"{remaining:.2f}" if remaining > 0 else "0"


def describe_current_grade(entry: CourseEntry) -> str:
    if entry.entry_type == "final":
        return entry.final_grade or ""
    summary = scale_summary(entry.assignments)
    return f"{summary.average:.2f}% ({summary.letter})"


# ------------------------
# Terms & chart
# ------------------------

def term_key(year: str, semester: str) -> str:
    return f"{year} {semester}"


def group_by_term(entries: Iterable[CourseEntry]) -> Dict[str, List[CourseEntry]]:
    # dicts keep insertion order, so groups come out in encounter order
    groups: Dict[str, List[CourseEntry]] = {}
    for entry in entries:
        groups.setdefault(term_key(entry.year, entry.semester), []).append(entry)
    return groups


def filter_term(entries: Iterable[CourseEntry], year: str, semester: str) -> List[CourseEntry]:
    if not year or not semester:
        return []
    return [e for e in entries if e.year == year and e.semester == semester]


class ChartSeries(NamedTuple):
    labels: List[str]
    values: List[float]


def build_chart_series(entries: Sequence[CourseEntry]) -> ChartSeries:
    labels: List[str] = []
    values: List[float] = []
    for key, group in group_by_term(entries).items():
        labels.append(key)
        values.append(cgpa_to_float(compute_average_cgpa(group)))

    labels.append(OVERALL_LABEL)
    values.append(cgpa_to_float(compute_average_cgpa(entries)))
    return ChartSeries(labels, values)
