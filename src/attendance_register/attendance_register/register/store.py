from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Callable, Optional, Sequence, TypeVar

from ..common.datetime_utils import parse_date_key
from ..common.validators import require_non_empty
from ..core.constants import STORAGE_KEY_RECORDS, STORAGE_KEY_STUDENTS
from ..core.exceptions import (
    DuplicateRollError,
    MalformedStorageDataError,
    RegisterInvariantError,
    StorageWriteError,
    StudentNotFoundError,
    ValidationError,
)
from ..storage.repository import KeyValueStorage
from ..students.model import Student, new_student_id
from .model import AttendanceEntry, AttendancePatch, DaySummary

logger = logging.getLogger(__name__)

T = TypeVar("T")

Register = dict[str, list[AttendanceEntry]]


def _reject_duplicate_rolls(rolls: list[str], where: str) -> None:
    seen: set[str] = set()
    for roll in rolls:
        if roll in seen:
            raise ValueError(f"duplicate roll {roll!r} in {where}")
        seen.add(roll)


def parse_roster(data: Any) -> list[Student]:
    if not isinstance(data, list):
        raise ValueError("roster must be a list")
    students = [Student.from_dict(item) for item in data]
    _reject_duplicate_rolls([s.roll for s in students], "roster")
    return students


def parse_register(data: Any) -> Register:
    if not isinstance(data, dict):
        raise ValueError("records must be an object keyed by date")
    register: Register = {}
    for date_key, entries in data.items():
        try:
            parse_date_key(date_key)
        except ValidationError as e:
            raise ValueError(str(e)) from e
        if not isinstance(entries, list):
            raise ValueError(f"records for {date_key!r} must be a list")
        bucket = [AttendanceEntry.from_dict(e) for e in entries]
        _reject_duplicate_rolls([e.roll for e in bucket], f"records for {date_key}")
        register[date_key] = bucket
    return register


class RegisterStore:
    """Owns the roster and the per-date attendance register.

    Every mutation is written through to ``storage`` before returning. A failed
    write raises ``StorageWriteError`` *after* the in-memory change is applied,
    so the caller can warn the user while the session keeps working from memory.
    """

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self._roster: list[Student] = []
        self._register: Register = {}
        self.load_notices: list[MalformedStorageDataError] = []
        self.storage_healthy = True

    # ---------- lifecycle ----------

    def load(self) -> list[MalformedStorageDataError]:
        """Read both tables from storage. Never raises.

        Missing blobs are normal first-run state. Unreadable ones reset the
        table to empty and are reported through ``load_notices``.
        """

        self.load_notices = []
        self._roster = self._read_table(STORAGE_KEY_STUDENTS, parse_roster, list)
        self._register = self._read_table(STORAGE_KEY_RECORDS, parse_register, dict)
        logger.debug("Loaded %d students and %d dates", len(self._roster), len(self._register))
        return list(self.load_notices)

    def _read_table(self, key: str, parse: Callable[[Any], T], empty: Callable[[], T]) -> T:
        try:
            raw = self._storage.get(key)
        except Exception as e:
            return self._reset_table(key, f"storage read failed: {e}", empty)

        if raw is None:
            return empty()

        try:
            return parse(json.loads(raw))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            return self._reset_table(key, str(e) or type(e).__name__, empty)

    def _reset_table(self, key: str, reason: str, empty: Callable[[], T]) -> T:
        notice = MalformedStorageDataError(key, reason)
        logger.warning("%s", notice)
        self.load_notices.append(notice)
        return empty()

    def snapshot(self) -> dict[str, Any]:
        """Plain-data copy of both tables, the shape used for storage and backups."""

        return {
            "students": [s.to_dict() for s in self._roster],
            "records": {d: [e.to_dict() for e in entries] for d, entries in self._register.items()},
        }

    def persist(self) -> None:
        snap = self.snapshot()
        blobs = (
            (STORAGE_KEY_STUDENTS, json.dumps(snap["students"], ensure_ascii=False)),
            (STORAGE_KEY_RECORDS, json.dumps(snap["records"], ensure_ascii=False)),
        )
        failed = [key for key, blob in blobs if not self._write(key, blob)]
        self.storage_healthy = not failed
        if failed:
            raise StorageWriteError(f"Could not save {', '.join(failed)}; changes are kept in memory only")

    def _write(self, key: str, blob: str) -> bool:
        try:
            ok = bool(self._storage.set(key, blob))
        except Exception:
            logger.exception("Storage adapter raised while writing %s", key)
            return False
        if not ok:
            logger.error("Storage rejected write of %s", key)
        return ok

    # ---------- reads ----------

    def students(self) -> list[Student]:
        return list(self._roster)

    def find_student(self, roll: str) -> Optional[Student]:
        return next((s for s in self._roster if s.roll == roll), None)

    def dates(self) -> list[str]:
        return sorted(self._register)

    def entries_for(self, date_key: str) -> list[AttendanceEntry]:
        return [replace(e) for e in self._register.get(date_key, [])]

    def summarize(self, date_key: str) -> DaySummary:
        # Reflects what has been recorded; an unloaded day is 0/0, not "everyone absent".
        entries = self._register.get(date_key, [])
        return DaySummary(
            date_key=date_key,
            total=len(entries),
            present_count=sum(1 for e in entries if e.present),
        )

    # ---------- roster ----------

    def add_student(self, name: str, roll: str) -> Student:
        name = require_non_empty(name, "Name")
        roll = require_non_empty(roll, "Roll / ID")
        if self.find_student(roll):
            raise DuplicateRollError(roll)

        student = Student(student_id=new_student_id(), name=name, roll=roll)
        self._roster.append(student)
        logger.debug("Added student %s (%s)", roll, name)
        self.persist()
        return student

    def update_student(self, old_roll: str, new_name: str, new_roll: str) -> Student:
        """Edit name and/or roll, carrying the change into every date bucket."""

        new_name = require_non_empty(new_name, "Name")
        new_roll = require_non_empty(new_roll, "Roll / ID")

        idx = next((i for i, s in enumerate(self._roster) if s.roll == old_roll), None)
        if idx is None:
            raise StudentNotFoundError(old_roll)
        if new_roll != old_roll and self.find_student(new_roll):
            raise DuplicateRollError(new_roll)

        # Nothing below can fail, so the roster edit and cascade land together.
        updated = replace(self._roster[idx], name=new_name, roll=new_roll)
        self._roster[idx] = updated
        for entries in self._register.values():
            for entry in entries:
                if entry.roll == old_roll:
                    entry.roll = new_roll
                    entry.name = new_name

        logger.debug("Updated student %s -> %s (%s)", old_roll, new_roll, new_name)
        self.persist()
        return updated

    def delete_student(self, roll: str) -> bool:
        """Remove a student and their entries from every date. Unknown rolls are a no-op."""

        before = len(self._roster)
        self._roster = [s for s in self._roster if s.roll != roll]
        removed_entries = 0
        for date_key, entries in self._register.items():
            kept = [e for e in entries if e.roll != roll]
            removed_entries += len(entries) - len(kept)
            self._register[date_key] = kept

        if len(self._roster) == before and not removed_entries:
            return False

        logger.debug("Deleted student %s and %d entries", roll, removed_entries)
        self.persist()
        return True

    def replace_all(self, students: Sequence[Student], register: Register) -> None:
        """Overwrite both tables wholesale (backup import). There is no undo."""

        self._roster = list(students)
        self._register = {d: list(entries) for d, entries in register.items()}
        logger.info("Replaced register: %d students, %d dates", len(self._roster), len(self._register))
        self.persist()

    # ---------- attendance ----------

    def _materialize(self, date_key: str) -> tuple[list[AttendanceEntry], bool]:
        parse_date_key(date_key)
        changed = date_key not in self._register
        bucket = self._register.setdefault(date_key, [])
        known = {e.roll for e in bucket}
        for s in self._roster:
            if s.roll not in known:
                bucket.append(AttendanceEntry(roll=s.roll, name=s.name))
                known.add(s.roll)
                changed = True
        return bucket, changed

    def materialize_date(self, date_key: str) -> list[AttendanceEntry]:
        """Make sure every current student has an entry for ``date_key``.

        Safe to call repeatedly: existing marks and notes are never reset.
        """

        _, changed = self._materialize(date_key)
        if changed:
            self.persist()
        return self.entries_for(date_key)

    def set_attendance(self, date_key: str, roll: str, patch: AttendancePatch) -> AttendanceEntry:
        parse_date_key(date_key)
        has_entry = any(e.roll == roll for e in self._register.get(date_key, []))
        if not has_entry and self.find_student(roll) is None:
            raise StudentNotFoundError(roll)

        bucket, _ = self._materialize(date_key)
        entry = next((e for e in bucket if e.roll == roll), None)
        if entry is None:
            raise RegisterInvariantError(f"No entry for roll {roll!r} on {date_key} after materialization")

        if patch.present is not None:
            entry.present = patch.present
        if patch.notes is not None:
            entry.notes = patch.notes

        self.persist()
        return replace(entry)

    def mark_all(self, date_key: str, present: bool) -> DaySummary:
        bucket, _ = self._materialize(date_key)
        for entry in bucket:
            entry.present = present
        self.persist()
        return self.summarize(date_key)
