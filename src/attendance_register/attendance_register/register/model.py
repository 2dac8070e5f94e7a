from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass
class AttendanceEntry:
    """One student's mark for one date bucket.

    ``name`` is a copy of the student's name as of the last roster edit; only
    ``RegisterStore.update_student`` rewrites it.
    """

    roll: str
    name: str
    present: bool = False
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"roll": self.roll, "name": self.name, "present": self.present, "notes": self.notes}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendanceEntry":
        notes = data.get("notes")
        present = data.get("present", False)
        if not isinstance(present, bool):
            raise ValueError(f"present for roll {data.get('roll')!r} must be true or false")
        return cls(
            roll=str(data["roll"]),
            name=str(data.get("name", "")),
            present=present,
            notes="" if notes is None else str(notes),
        )


@dataclass(frozen=True)
class AttendancePatch:
    """Partial update for an entry; ``None`` fields are left untouched."""

    present: Optional[bool] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class DaySummary:
    date_key: str
    total: int
    present_count: int

    @property
    def absent_count(self) -> int:
        return self.total - self.present_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date_key,
            "total": self.total,
            "present_count": self.present_count,
            "absent_count": self.absent_count,
        }
