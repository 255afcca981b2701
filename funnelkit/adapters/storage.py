"""Host key-value storage for persisted funnels.

A missing key is the normal "nothing stored" case and reads as None. Any
failure of the host storage itself is raised as StorageUnavailable.
"""

import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Protocol

from funnelkit.errors import StorageUnavailable


class KeyValueStore(Protocol):
    """Protocol for keyed string storage."""

    def get(self, key: str) -> str | None:
        """Return the value under key, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove key. Absent keys are ignored."""
        ...


class MemoryStore:
    """Stores values in a dict."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


class FileStore:
    """Writes each key to its own JSON file in a directory."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in key)
        return self.directory / f"{safe}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageUnavailable(f"Failed to read stored funnel: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._path(key).write_text(value, encoding="utf-8")
        except OSError as exc:
            raise StorageUnavailable(
                "Failed to save funnel. Please check storage permissions."
            ) from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"Failed to clear stored funnel: {exc}") from exc


class SqliteStore:
    """Keeps values in a single-table SQLite database."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    """
                    create table if not exists kv (
                        key text primary key,
                        value text not null
                    )
                    """
                )
                conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailable(f"Funnel storage is unavailable: {exc}") from exc

    def get(self, key: str) -> str | None:
        try:
            with closing(self._connect()) as conn, conn:
                row = conn.execute(
                    "select value from kv where key = ?",
                    (key,),
                ).fetchone()
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailable(f"Failed to read stored funnel: {exc}") from exc
        if not row:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    """
                    insert into kv (key, value) values (?, ?)
                    on conflict(key) do update set value = excluded.value
                    """,
                    (key, value),
                )
                conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailable(
                "Failed to save funnel. Please check storage permissions."
            ) from exc

    def delete(self, key: str) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute("delete from kv where key = ?", (key,))
                conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailable(f"Failed to clear stored funnel: {exc}") from exc
