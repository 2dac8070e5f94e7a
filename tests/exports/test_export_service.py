from __future__ import annotations

import json

import pytest

from src.attendance_register.attendance_register.core.exceptions import InvalidBackupError
from src.attendance_register.attendance_register.exports.service import (
    backup_filename,
    csv_filename,
    printable_filename,
)
from src.attendance_register.attendance_register.register.model import AttendancePatch

MONDAY = "2024-05-06"
TUESDAY = "2024-05-07"


@pytest.fixture
def populated(store):
    store.add_student("Asha", "11")
    store.add_student('Ben "The Bolt"', "12")
    store.set_attendance(MONDAY, "11", AttendancePatch(present=True, notes="on time, early"))
    store.set_attendance(TUESDAY, "12", AttendancePatch(notes="line1\nline2"))
    return store


def test_csv_unloaded_date_is_header_only(exports):
    assert exports.to_csv(MONDAY) == "date,roll,name,present,notes"


def test_csv_rows_follow_bucket_order_and_quoting(populated, exports):
    text = exports.to_csv(MONDAY)

    assert text.split("\n") == [
        "date,roll,name,present,notes",
        '"2024-05-06","11","Asha","1","on time, early"',
        '"2024-05-06","12","Ben ""The Bolt""","0",""',
    ]


def test_csv_keeps_embedded_newlines_inside_quotes(populated, exports):
    text = exports.to_csv(TUESDAY)

    assert text.endswith('"2024-05-07","12","Ben ""The Bolt""","0","line1\nline2"')
    assert not text.endswith("\n")


def test_json_export_is_full_snapshot(populated, exports):
    doc = json.loads(exports.to_json())

    assert set(doc) == {"students", "records"}
    assert [s["roll"] for s in doc["students"]] == ["11", "12"]
    assert set(doc["records"]) == {MONDAY, TUESDAY}
    assert doc["records"][MONDAY][0] == {"roll": "11", "name": "Asha", "present": True, "notes": "on time, early"}


def test_json_round_trip_reproduces_state(populated, exports):
    before = populated.snapshot()
    document = exports.to_json()

    populated.add_student("Extra", "99")
    populated.mark_all(MONDAY, False)
    exports.from_json(document)

    assert populated.snapshot() == before


def test_import_replaces_instead_of_merging(populated, exports):
    doc = {
        "students": [{"id": 5, "name": "Zed", "roll": "Z1"}],
        "records": {"2024-06-03": [{"roll": "Z1", "name": "Zed", "present": True, "notes": ""}]},
    }

    result = exports.from_json(json.dumps(doc).encode("utf-8"))

    assert (result.student_count, result.date_count) == (1, 1)
    assert [s.roll for s in populated.students()] == ["Z1"]
    assert populated.dates() == ["2024-06-03"]
    assert populated.snapshot() == doc


def test_import_accepts_decoded_mapping(store, exports):
    exports.from_json({"students": [], "records": {}})
    assert store.students() == []


@pytest.mark.parametrize(
    "document",
    [
        json.dumps({"students": []}),
        json.dumps({"records": {}}),
        json.dumps({"students": None, "records": {}}),
        json.dumps([1, 2]),
        "not json at all",
        json.dumps({"students": "abc", "records": {}}),
        json.dumps({"students": [], "records": {"2024-05-06": "x"}}),
        json.dumps({"students": [{"name": "no roll"}], "records": {}}),
        json.dumps({"students": [{"id": "a", "name": "A", "roll": "1"}, {"id": "b", "name": "B", "roll": "1"}], "records": {}}),
        json.dumps(
            {
                "students": [{"id": "a", "name": "A", "roll": "1"}],
                "records": {"2024-05-06": [{"roll": "1", "name": "A"}, {"roll": "1", "name": "A"}]},
            }
        ),
        json.dumps({"students": [], "records": {"2024-05-06": [{"roll": "1", "name": "A", "present": "false"}]}}),
        json.dumps({"students": [], "records": {"2024-5-6": []}}),
    ],
)
def test_invalid_backup_leaves_state_unchanged(populated, exports, document):
    before = populated.snapshot()

    with pytest.raises(InvalidBackupError):
        exports.from_json(document)

    assert populated.snapshot() == before


def test_preview_import_does_not_mutate(populated, exports):
    before = populated.snapshot()

    preview = exports.preview_import(json.dumps({"students": [], "records": {"2024-01-01": []}}))

    assert (preview.student_count, preview.date_count) == (0, 1)
    assert populated.snapshot() == before


def test_import_persists(storage, populated, exports):
    exports.from_json({"students": [{"id": "x", "name": "Q", "roll": "7"}], "records": {}})

    assert json.loads(storage.get("attendance_students_v1")) == [{"id": "x", "name": "Q", "roll": "7"}]


def test_printable_document_table(populated, exports):
    html = exports.to_printable_document(MONDAY)

    assert html.startswith("<!DOCTYPE html>")
    assert "<h2>Attendance for 2024-05-06</h2>" in html
    assert "<th>#</th><th>Name</th><th>Roll / ID</th><th>Status</th><th>Notes</th>" in html
    assert "<tr><td>1</td><td>Asha</td><td>11</td><td>Present</td><td>on time, early</td></tr>" in html
    assert "<td>2</td>" in html
    assert "<td>Absent</td>" in html


def test_printable_document_escapes_markup(store, exports):
    store.add_student("<script>alert(1)</script>", "1")
    store.set_attendance(MONDAY, "1", AttendancePatch(notes="a & b"))

    html = exports.to_printable_document(MONDAY)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "a &amp; b" in html


def test_printable_document_for_unloaded_date_has_no_rows(exports):
    html = exports.to_printable_document(MONDAY)
    assert "<td>" not in html


def test_filenames():
    assert csv_filename(MONDAY) == "attendance_2024-05-06.csv"
    assert printable_filename(MONDAY) == "attendance_2024-05-06.doc"
    assert backup_filename(MONDAY) == "attendance_backup_2024-05-06.json"


def test_rejected_duplicate_roll_backup_keeps_rename_cascade_intact(populated, exports):
    doc = {
        "students": [{"id": "a", "name": "A", "roll": "1"}, {"id": "b", "name": "B", "roll": "1"}],
        "records": {MONDAY: [{"roll": "1", "name": "A", "present": False, "notes": ""}]},
    }
    with pytest.raises(InvalidBackupError):
        exports.from_json(doc)

    populated.update_student("11", "Asha R", "21")

    assert [s.roll for s in populated.students()] == ["21", "12"]
    assert [(e.roll, e.name) for e in populated.entries_for(MONDAY)] == [("21", "Asha R"), ("12", 'Ben "The Bolt"')]


def test_import_keeps_boolean_present_values(store, exports):
    exports.from_json(
        {
            "students": [{"id": "a", "name": "A", "roll": "1"}],
            "records": {MONDAY: [{"roll": "1", "name": "A", "present": False, "notes": ""}]},
        }
    )

    assert store.summarize(MONDAY).present_count == 0
