"""Write a JSON backup of the register.

Note: Same document as the "Export JSON" download; restore it with POST /import?confirm=1.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_register.attendance_register.container import build_container, build_storage
from src.attendance_register.attendance_register.exports.service import backup_filename


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    storage = build_storage(
        settings.STORAGE_BACKEND,
        storage_path=getattr(settings, "STORAGE_PATH", None),
        db_config=getattr(settings, "DB_CONFIG", None),
    )
    container = build_container(storage=storage)
    for notice in container.register_store.load_notices:
        print(f"WARNING: {notice}")

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    out_file = out_dir / backup_filename()
    out_file.write_text(container.export_service.to_json(), encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
