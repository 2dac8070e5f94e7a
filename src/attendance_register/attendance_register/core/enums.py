from __future__ import annotations

from enum import Enum


class ExportFormat(str, Enum):
    """Download formats offered by the export endpoints."""

    CSV = "csv"
    JSON = "json"
    DOC = "doc"

    @property
    def mimetype(self) -> str:
        return {
            ExportFormat.CSV: "text/csv",
            ExportFormat.JSON: "application/json",
            ExportFormat.DOC: "application/msword",
        }[self]


class StorageBackend(str, Enum):
    """Where the roster and register blobs are kept."""

    MEMORY = "memory"
    FILE = "file"
    MYSQL = "mysql"
