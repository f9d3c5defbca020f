import sqlite3
from pathlib import Path
from typing import Optional

from hft_terminal.config import settings
from hft_terminal.domain.interfaces import IdentityStorage


DDL = """
CREATE TABLE IF NOT EXISTS kv (
key TEXT PRIMARY KEY,
value TEXT
);
"""


def get_conn(db_path: str | Path) -> sqlite3.Connection:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # poller działa w osobnym wątku, połączenie musi być współdzielone
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.executescript(DDL)
    return conn


def read_value(conn: sqlite3.Connection, key: str) -> Optional[str]:
    row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
    return row[0] if row else None


def write_value(conn: sqlite3.Connection, key: str, value: str):
    conn.execute(
        "INSERT INTO kv(key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
        (key, value),
    )
    conn.commit()


def delete_value(conn: sqlite3.Connection, key: str):
    conn.execute("DELETE FROM kv WHERE key = ?", (key,))
    conn.commit()


class SqliteIdentityStorage(IdentityStorage):
    """Jeden klucz z nazwą zalogowanego użytkownika, przeżywa restart procesu."""

    def __init__(self, db_path: str | Path | None = None, key: str | None = None):
        self.db_path = Path(db_path or settings.SESSION_DB)
        self.key = key or settings.SESSION_KEY
        self._conn: Optional[sqlite3.Connection] = None

    def _get(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = get_conn(self.db_path)
        return self._conn

    def load(self) -> Optional[str]:
        return read_value(self._get(), self.key)

    def save(self, identity: str) -> None:
        write_value(self._get(), self.key, identity)

    def remove(self) -> None:
        delete_value(self._get(), self.key)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
