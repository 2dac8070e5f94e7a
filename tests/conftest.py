from __future__ import annotations

import pytest

from src.attendance_register.attendance_register.exports.service import ExportService
from src.attendance_register.attendance_register.main import create_app
from src.attendance_register.attendance_register.register.store import RegisterStore
from src.attendance_register.attendance_register.storage.memory_storage import InMemoryStorage


class FailingStorage(InMemoryStorage):
    """Accepts reads, rejects every write (e.g. quota exceeded)."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = True

    def set(self, key: str, value: str) -> bool:
        if self.fail_writes:
            return False
        return super().set(key, value)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    s = RegisterStore(storage)
    s.load()
    return s


@pytest.fixture
def exports(store):
    return ExportService(store)


@pytest.fixture
def app(storage):
    return create_app(settings_module="config.testing", storage=storage)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def failing_storage():
    return FailingStorage()
