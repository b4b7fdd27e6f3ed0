"""
Persistence backends for course entries.

Both backends implement the same four calls; the document store (Firestore)
is the default for deployed use and the JSON file backend is for running
the tracker locally without cloud credentials.
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore

from grade_tracker.models import CourseEntry

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "courses"
DEFAULT_DATA_FILE = "course_data.json"


class StoreError(Exception):
    """Raised when a backend call fails"""


class CourseStore(ABC):
    """Persistence collaborator base class"""

    @abstractmethod
    def create(self, entry: CourseEntry) -> str:
        """
        Append a new entry.

        Returns:
            str: the generated identifier
        """

    @abstractmethod
    def update(self, entry_id: str, entry: CourseEntry) -> None:
        """Replace every field of an existing entry"""

    @abstractmethod
    def delete(self, entry_id: str) -> None:
        pass

    @abstractmethod
    def list_all(self) -> List[CourseEntry]:
        """All entries with their ids attached, in store order"""


class FirestoreCourseStore(CourseStore):
    """Course entries as documents of one Firestore collection"""

    def __init__(self, client: "firestore.Client", collection: str = DEFAULT_COLLECTION):
        self.client = client
        self.collection_name = collection

    @property
    def collection(self):
        return self.client.collection(self.collection_name)

    def create(self, entry: CourseEntry) -> str:
        try:
            _, doc_ref = self.collection.add(entry.to_record())
        except GoogleAPIError as e:
            raise StoreError(f"saving course {entry.course!r} failed: {e}") from e
        logger.info("Course saved with ID: %s", doc_ref.id)
        return doc_ref.id

    def update(self, entry_id: str, entry: CourseEntry) -> None:
        try:
            # set() without merge replaces the whole document
            self.collection.document(entry_id).set(entry.to_record())
        except GoogleAPIError as e:
            raise StoreError(f"updating course {entry_id} failed: {e}") from e
        logger.info("Course updated with ID: %s", entry_id)

    def delete(self, entry_id: str) -> None:
        try:
            self.collection.document(entry_id).delete()
        except GoogleAPIError as e:
            raise StoreError(f"deleting course {entry_id} failed: {e}") from e
        logger.info("Course deleted with ID: %s", entry_id)

    def list_all(self) -> List[CourseEntry]:
        try:
            entries = [
                CourseEntry.from_record(snap.to_dict() or {}, entry_id=snap.id)
                for snap in self.collection.stream()
            ]
        except GoogleAPIError as e:
            raise StoreError(f"loading courses failed: {e}") from e
        logger.info("Loaded %d courses from collection %s", len(entries), self.collection_name)
        return entries


class JsonFileCourseStore(CourseStore):
    """Course entries kept in a local JSON file, rewritten on every change"""

    def __init__(self, data_file: str = DEFAULT_DATA_FILE):
        self.data_file = Path(data_file)

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self.data_file.exists():
            return {}
        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"reading {self.data_file} failed: {e}") from e

        records = {}
        for index, item in enumerate(data.get("courses", [])):
            item = dict(item)
            # hand-written files may lack ids; the position keeps them stable across reads
            entry_id = item.pop("id", None) or f"record-{index}"
            records[entry_id] = item
        return records

    def _write(self, records: Dict[str, Dict[str, Any]]) -> None:
        backup_file = self.data_file.with_suffix(".json.bak")
        data = {
            "courses": [{"id": entry_id, **record} for entry_id, record in records.items()],
            "total_count": len(records),
        }
        had_previous = False
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            if self.data_file.exists():
                self.data_file.replace(backup_file)
                had_previous = True
            with open(self.data_file, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            # a half-written file must not replace the last good one
            if had_previous:
                backup_file.replace(self.data_file)
            elif self.data_file.exists():
                self.data_file.unlink()
            raise StoreError(f"writing {self.data_file} failed: {e}") from e

    def create(self, entry: CourseEntry) -> str:
        records = self._read()
        entry_id = uuid.uuid4().hex
        records[entry_id] = entry.to_record()
        self._write(records)
        logger.info("Course saved with ID: %s", entry_id)
        return entry_id

    def update(self, entry_id: str, entry: CourseEntry) -> None:
        records = self._read()
        if entry_id not in records:
            raise StoreError(f"no course with ID {entry_id}")
        records[entry_id] = entry.to_record()
        self._write(records)
        logger.info("Course updated with ID: %s", entry_id)

    def delete(self, entry_id: str) -> None:
        records = self._read()
        if records.pop(entry_id, None) is None:
            raise StoreError(f"no course with ID {entry_id}")
        self._write(records)
        logger.info("Course deleted with ID: %s", entry_id)

    def list_all(self) -> List[CourseEntry]:
        entries = [
            CourseEntry.from_record(record, entry_id=entry_id)
            for entry_id, record in self._read().items()
        ]
        logger.info("Loaded %d courses from %s", len(entries), self.data_file)
        return entries


def create_store_from_config(config: dict, client: Optional["firestore.Client"] = None) -> CourseStore:
    """
    Build the configured backend.

    Args:
        config: the "store" section of the app config
        client: an existing Firestore client, mainly for tests
    """
    backend = (config.get("backend") or "json").lower()

    if backend == "json":
        return JsonFileCourseStore(config.get("data_file") or DEFAULT_DATA_FILE)

    if backend == "firestore":
        collection = config.get("collection") or DEFAULT_COLLECTION
        if client is None:
            credentials_file = config.get("credentials_file")
            if credentials_file:
                client = firestore.Client.from_service_account_json(
                    credentials_file, project=config.get("project")
                )
            else:
                client = firestore.Client(project=config.get("project"))
        logger.info("Using Firestore collection %s", collection)
        return FirestoreCourseStore(client, collection=collection)

    raise ValueError(f"Unknown store backend: {backend!r}. Expected 'firestore' or 'json'.")
