"""Add a few demo students to an empty register."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_register.attendance_register.container import build_container, build_storage

DEMO_STUDENTS = [
    ("Asha Rao", "11"),
    ("Ben Carter", "12"),
    ("Chen Wei", "13"),
    ("Dana Okafor", "14"),
]


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    storage = build_storage(
        settings.STORAGE_BACKEND,
        storage_path=getattr(settings, "STORAGE_PATH", None),
        db_config=getattr(settings, "DB_CONFIG", None),
    )
    store = build_container(storage=storage).register_store

    if store.students():
        print(f"SKIP: register already has {len(store.students())} students")
        return

    for name, roll in DEMO_STUDENTS:
        store.add_student(name, roll)
    print(f"OK: Seeded {len(DEMO_STUDENTS)} demo students")


if __name__ == "__main__":
    main()
