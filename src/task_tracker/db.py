from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional

from .storage import KeyValueStorage, StorageError


@dataclass(frozen=True)
class _Cols:
    table: str = "kv"
    key: str = "key"
    value: str = "value"


_COLS = _Cols()


class SQLiteStorage(KeyValueStorage):
    """
    Lightweight SQLite key-value storage implementing the KeyValueStorage interface.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        try:
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
            self._init_db()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"cannot open sqlite storage at {db_path}") from e

    @property
    def name(self) -> str:
        return "sqlite"

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.key} TEXT PRIMARY KEY,
                    {_COLS.value} TEXT NOT NULL
                )
                """
            )

    def get(self, key: str) -> Optional[str]:
        try:
            with self._conn() as conn:
                row = conn.execute(
                    f"SELECT {_COLS.value} FROM {_COLS.table} WHERE {_COLS.key} = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"failed to read {key!r} from {self._db_path}") from e
        return None if row is None else str(row[0])

    def set(self, key: str, value: str) -> None:
        try:
            with self._conn() as conn:
                conn.execute(
                    f"""
                    INSERT INTO {_COLS.table} ({_COLS.key}, {_COLS.value})
                    VALUES (?, ?)
                    ON CONFLICT({_COLS.key}) DO UPDATE SET {_COLS.value} = excluded.{_COLS.value}
                    """,
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(f"failed to write {key!r} to {self._db_path}") from e
