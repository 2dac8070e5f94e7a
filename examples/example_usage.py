"""Example: drive the register directly (no Flask).

Goal: show that controllers are a thin layer; the logic lives in RegisterStore / ExportService.
"""

from src.attendance_register.attendance_register.container import build_container
from src.attendance_register.attendance_register.register.model import AttendancePatch
from src.attendance_register.attendance_register.storage.memory_storage import InMemoryStorage


def main():
    container = build_container(storage=InMemoryStorage())
    store = container.register_store

    store.add_student("Asha", "11")
    store.add_student("Ravi", "12")
    store.materialize_date("2024-05-06")
    store.set_attendance("2024-05-06", "11", AttendancePatch(present=True, notes="on time"))

    print(store.summarize("2024-05-06"))
    print(container.export_service.to_csv("2024-05-06"))


if __name__ == "__main__":
    main()
