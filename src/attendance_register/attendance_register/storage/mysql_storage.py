from __future__ import annotations

import logging
from typing import Optional

import mysql.connector

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import KeyValueStorage

logger = logging.getLogger(__name__)

KV_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS kv_store (
    storage_key VARCHAR(191) NOT NULL PRIMARY KEY,
    storage_value LONGTEXT NOT NULL,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
)
"""


class MySQLKeyValueStorage(KeyValueStorage):
    """Key-value storage backed by one MySQL table (``kv_store``)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def ensure_schema(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(KV_TABLE_DDL)

    def get(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT storage_value FROM kv_store WHERE storage_key=%s", (key,))
            r = fetchone(cur)
            if not r:
                return None
            return r["storage_value"]

    def set(self, key: str, value: str) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO kv_store (storage_key, storage_value)
                    VALUES (%s, %s)
                    ON DUPLICATE KEY UPDATE storage_value=VALUES(storage_value)
                    """,
                    (key, value),
                )
        except mysql.connector.Error as e:
            logger.error("Writing %r to kv_store failed: %s", key, e)
            return False
        return True

    def remove(self, key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM kv_store WHERE storage_key=%s", (key,))
