"""Constants and defaults.

Note: Storage keys are part of the persisted format; changing them orphans existing data.
"""

STORAGE_KEY_STUDENTS = "attendance_students_v1"
STORAGE_KEY_RECORDS = "attendance_records_v1"

DATE_KEY_FORMAT = "%Y-%m-%d"

CSV_HEADERS = ("date", "roll", "name", "present", "notes")

DEFAULT_STORAGE_FILE = "attendance_storage.json"
