from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .repository import KeyValueStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    """Key-value storage kept in a single JSON object on local disk.

    Every ``set`` rewrites the file through a temp file + ``os.replace`` so a
    crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("Cannot read storage file %s: %s", self._path, e)
            return {}

        try:
            data = json.loads(raw)
        except ValueError:
            # The store treats every key as missing; RegisterStore.load starts empty.
            logger.warning("Storage file %s is not valid JSON; ignoring its contents", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold a JSON object; ignoring it", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> bool:
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            logger.error("Writing storage file %s failed: %s", self._path, e)
            return False
        return True

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> bool:
        data = self._read_all()
        data[key] = value
        return self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)
