from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..common.datetime_utils import today_key
from ..core.constants import CSV_HEADERS
from ..core.exceptions import InvalidBackupError
from ..register.store import RegisterStore, parse_register, parse_roster

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

BackupDocument = Union[str, bytes, Mapping[str, Any]]


@dataclass(frozen=True)
class ImportResult:
    student_count: int
    date_count: int


def csv_filename(date_key: str) -> str:
    return f"attendance_{date_key}.csv"


def printable_filename(date_key: str) -> str:
    return f"attendance_{date_key}.doc"


def backup_filename(date_key: str | None = None) -> str:
    return f"attendance_backup_{date_key or today_key()}.json"


class ExportService:
    """Use case: move register data in and out (CSV, JSON backup, printable doc)."""

    def __init__(self, store: RegisterStore, *, templates_dir: Path = TEMPLATES_DIR):
        self._store = store
        self._jinja = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def to_csv(self, date_key: str) -> str:
        """One day's entries as CSV, in bucket order.

        The header is bare; every data field is quoted with inner quotes doubled.
        An unloaded day yields the header alone.
        """

        out = io.StringIO()
        out.write(",".join(CSV_HEADERS))
        writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="")
        for entry in self._store.entries_for(date_key):
            out.write("\n")
            writer.writerow(
                [
                    date_key,
                    entry.roll,
                    entry.name,
                    "1" if entry.present else "0",
                    entry.notes or "",
                ]
            )
        return out.getvalue()

    def to_json(self) -> str:
        return json.dumps(self._store.snapshot(), ensure_ascii=False, indent=2)

    def from_json(self, document: BackupDocument) -> ImportResult:
        """Replace the whole roster and register with a backup's content.

        Destructive: callers must confirm with the user first. The store is not
        touched unless the document is accepted.
        """

        students, register = self._parse_backup(document)
        self._store.replace_all(students, register)
        logger.info("Imported backup with %d students over %d dates", len(students), len(register))
        return ImportResult(student_count=len(students), date_count=len(register))

    def preview_import(self, document: BackupDocument) -> ImportResult:
        """Check a backup without applying it."""

        students, register = self._parse_backup(document)
        return ImportResult(student_count=len(students), date_count=len(register))

    def current_counts(self) -> ImportResult:
        return ImportResult(student_count=len(self._store.students()), date_count=len(self._store.dates()))

    def _parse_backup(self, document: BackupDocument):
        data = self._decode(document)
        if not isinstance(data, Mapping):
            raise InvalidBackupError("Invalid backup file: expected a JSON object")
        missing = [k for k in ("students", "records") if data.get(k) is None]
        if missing:
            raise InvalidBackupError(f"Invalid backup file: missing {', '.join(missing)}")

        try:
            return parse_roster(data["students"]), parse_register(data["records"])
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise InvalidBackupError(f"Invalid backup file: {e}") from e

    @staticmethod
    def _decode(document: BackupDocument) -> Any:
        if isinstance(document, Mapping):
            return document
        if isinstance(document, bytes):
            try:
                document = document.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise InvalidBackupError(f"Error reading file: {e}") from e
        try:
            return json.loads(document)
        except ValueError as e:
            raise InvalidBackupError(f"Error reading file: {e}") from e

    def to_printable_document(self, date_key: str) -> str:
        template = self._jinja.get_template("printable_attendance.html")
        return template.render(date_key=date_key, entries=self._store.entries_for(date_key))
