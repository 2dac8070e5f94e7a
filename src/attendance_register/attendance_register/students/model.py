from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Union

StudentId = Union[str, int, float]


def new_student_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on the roster.

    ``roll`` is the natural key used by attendance entries. ``student_id`` is an
    opaque token for stable UI keys; values read back from storage or a backup
    are kept verbatim (older backups carry numeric ids).
    """

    student_id: StudentId
    name: str
    roll: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.student_id, "name": self.name, "roll": self.roll}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Student":
        return cls(
            student_id=data.get("id") if data.get("id") is not None else new_student_id(),
            name=str(data.get("name", "")),
            roll=str(data["roll"]),
        )
