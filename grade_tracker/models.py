"""
Course entry data model
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

DEFAULT_CREDITS = 3
ENTRY_TYPES = ("final", "scale")


@dataclass(frozen=True)
class Assignment:
    """One graded (or not yet graded) piece of a grading-scale course"""

    name: str
    grade: Optional[float]  # None = not graded yet, distinct from 0
    weight: float  # percentage points

    @property
    def is_graded(self) -> bool:
        return self.grade is not None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "grade": self.grade, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict):
        grade = data.get("grade")
        return cls(
            name=data.get("name", ""),
            grade=None if grade is None else float(grade),
            weight=float(data.get("weight", 0) or 0),
        )


@dataclass(frozen=True)
class CourseEntry:
    """A course in one term, graded either by a final letter or by assignments"""

    course: str
    year: str
    semester: str
    goal_grade: str = ""
    entry_type: str = "final"  # "final" | "scale"
    final_grade: Optional[str] = None
    assignments: Optional[Tuple[Assignment, ...]] = None
    credits: Optional[float] = DEFAULT_CREDITS
    id: Optional[str] = field(default=None, compare=False)

    def with_id(self, entry_id: Optional[str]) -> "CourseEntry":
        return replace(self, id=entry_id)

    def to_record(self) -> Dict[str, Any]:
        """Document body as stored; the id lives outside the record"""
        record: Dict[str, Any] = {
            "course": self.course,
            "year": self.year,
            "semester": self.semester,
            "goalGrade": self.goal_grade,
            "entryType": self.entry_type,
        }
        if self.entry_type == "final":
            record["finalGrade"] = self.final_grade or ""
        else:
            record["assignments"] = [a.to_dict() for a in (self.assignments or ())]
        if self.credits is not None:
            record["credits"] = self.credits
        return record

    @classmethod
    def from_record(cls, record: dict, entry_id: Optional[str] = None):
        """Build an entry from a stored document (camelCase keys)"""
        entry_type = record.get("entryType", "final")
        if entry_type not in ENTRY_TYPES:
            entry_type = "final"

        assignments = None
        if record.get("assignments") is not None:
            assignments = tuple(Assignment.from_dict(a) for a in record["assignments"])

        return cls(
            course=record.get("course", ""),
            year=str(record.get("year", "")),
            semester=record.get("semester", ""),
            goal_grade=record.get("goalGrade", ""),
            entry_type=entry_type,
            final_grade=record.get("finalGrade"),
            assignments=assignments,
            credits=record.get("credits"),
            id=entry_id,
        )
