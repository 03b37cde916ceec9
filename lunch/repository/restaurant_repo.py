from sqlite3 import Connection
from typing import Iterable


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS restaurant (
            name TEXT PRIMARY KEY,
            category TEXT NOT NULL
        )
        """
    )


def count(conn: Connection) -> int:
    row = conn.execute("SELECT COUNT(1) AS cnt FROM restaurant").fetchone()
    return int(row["cnt"])


def exists(conn: Connection, name: str) -> bool:
    row = conn.execute("SELECT 1 FROM restaurant WHERE name=?", (name,)).fetchone()
    return row is not None


def get_one(conn: Connection, name: str):
    return conn.execute("SELECT name, category FROM restaurant WHERE name=?", (name,)).fetchone()


def insert(conn: Connection, name: str, category: str):
    conn.execute("INSERT INTO restaurant(name, category) VALUES(?, ?)", (name, category))


def insert_many(conn: Connection, rows: Iterable[tuple[str, str]]) -> int:
    cur = conn.executemany("INSERT OR IGNORE INTO restaurant(name, category) VALUES(?, ?)", list(rows))
    return cur.rowcount


def list_all(conn: Connection):
    return conn.execute("SELECT name, category FROM restaurant ORDER BY name").fetchall()


def list_by_category(conn: Connection, category: str):
    return conn.execute(
        "SELECT name, category FROM restaurant WHERE LOWER(category) = LOWER(?) ORDER BY name",
        (category,),
    ).fetchall()


def update(conn: Connection, original_name: str, new_name: str, category: str) -> int:
    cur = conn.execute(
        "UPDATE restaurant SET name=?, category=? WHERE name=?",
        (new_name, category, original_name),
    )
    return cur.rowcount


def remove(conn: Connection, name: str) -> int:
    cur = conn.execute("DELETE FROM restaurant WHERE name=?", (name,))
    return cur.rowcount


def remove_all(conn: Connection) -> int:
    cur = conn.execute("DELETE FROM restaurant")
    return cur.rowcount
