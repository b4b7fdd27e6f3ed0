"""
User actions against the store. Every mutation is followed by a full reload;
store failures are logged and absorbed so the page keeps its last good list.
"""

import logging
from typing import List, Optional, Tuple

from grade_tracker.models import CourseEntry
from grade_tracker.store import CourseStore, StoreError

logger = logging.getLogger(__name__)


class CourseTracker:

    def __init__(self, store: CourseStore):
        self.store = store

    def load_courses(self, current: Optional[List[CourseEntry]] = None) -> List[CourseEntry]:
        """Reload every entry; on failure keep `current` (or nothing)."""
        try:
            return self.store.list_all()
        except StoreError as e:
            logger.error("Error loading courses: %s", e)
            return list(current or [])

    def save_course(self, entry: CourseEntry) -> Optional[str]:
        try:
            return self.store.create(entry)
        except StoreError as e:
            logger.error("Error saving course: %s", e)
            return None

    def update_course(self, entry_id: str, entry: CourseEntry) -> bool:
        try:
            self.store.update(entry_id, entry)
        except StoreError as e:
            logger.error("Error updating course: %s", e)
            return False
        return True

    def delete_course(self, entry_id: str) -> bool:
        try:
            self.store.delete(entry_id)
        except StoreError as e:
            logger.error("Error deleting course: %s", e)
            return False
        return True

    def submit(
        self,
        entry: CourseEntry,
        editing_id: Optional[str],
        current: List[CourseEntry],
    ) -> Tuple[bool, List[CourseEntry]]:
        """
        Save a new entry, or replace `editing_id` when editing, then reload.

        Returns:
            tuple[bool, list]: (whether the write went through, reloaded entries)
        """
        if editing_id:
            ok = self.update_course(editing_id, entry)
        else:
            ok = self.save_course(entry) is not None
        return ok, self.load_courses(current)

    def remove(self, entry_id: str, current: List[CourseEntry]) -> Tuple[bool, List[CourseEntry]]:
        ok = self.delete_course(entry_id)
        return ok, self.load_courses(current)
