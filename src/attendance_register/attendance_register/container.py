from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.constants import DEFAULT_STORAGE_FILE
from .core.enums import StorageBackend
from .database.connection import DBConfig, DatabaseConnection
from .exports.service import ExportService
from .register.store import RegisterStore
from .storage.file_storage import JsonFileStorage
from .storage.memory_storage import InMemoryStorage
from .storage.mysql_storage import MySQLKeyValueStorage
from .storage.repository import KeyValueStorage


@dataclass(frozen=True)
class Container:
    storage: KeyValueStorage

    register_store: RegisterStore
    export_service: ExportService


def build_storage(
    backend: StorageBackend | str,
    *,
    storage_path: Optional[str] = None,
    db_config: Optional[dict] = None,
) -> KeyValueStorage:
    backend = StorageBackend(str(getattr(backend, "value", backend)).lower())

    if backend == StorageBackend.MEMORY:
        return InMemoryStorage()
    if backend == StorageBackend.FILE:
        return JsonFileStorage(Path(storage_path or DEFAULT_STORAGE_FILE))

    storage = MySQLKeyValueStorage(DatabaseConnection(DBConfig.from_mapping(db_config or {})))
    storage.ensure_schema()
    return storage


def build_container(*, storage: KeyValueStorage) -> Container:
    register_store = RegisterStore(storage)
    register_store.load()
    export_service = ExportService(register_store)

    return Container(
        storage=storage,
        register_store=register_store,
        export_service=export_service,
    )
