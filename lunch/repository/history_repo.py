from sqlite3 import Connection
from typing import Optional


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            picked_at TEXT NOT NULL
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_history_name ON history(name)")


def record(conn: Connection, name: str, picked_at: str) -> int:
    cur = conn.execute("INSERT INTO history(name, picked_at) VALUES(?, ?)", (name, picked_at))
    return cur.lastrowid


def last_name(conn: Connection) -> Optional[str]:
    row = conn.execute("SELECT name FROM history ORDER BY id DESC LIMIT 1").fetchone()
    return row["name"] if row else None


def list_recent(conn: Connection, limit: int):
    return conn.execute(
        "SELECT name, picked_at FROM history ORDER BY id DESC LIMIT ?", (int(limit),)
    ).fetchall()


def rename(conn: Connection, old_name: str, new_name: str) -> int:
    cur = conn.execute("UPDATE history SET name=? WHERE name=?", (new_name, old_name))
    return cur.rowcount


def prune(conn: Connection, keep: int) -> int:
    """Drop everything but the newest `keep` rows."""
    cur = conn.execute(
        "DELETE FROM history WHERE id NOT IN (SELECT id FROM history ORDER BY id DESC LIMIT ?)",
        (int(keep),),
    )
    return cur.rowcount


def remove_all(conn: Connection) -> int:
    cur = conn.execute("DELETE FROM history")
    return cur.rowcount
