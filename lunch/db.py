from __future__ import annotations

# lunch/db.py
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from .errors import StoreBusyError, StoreIOError
from .services.config_svc import get_config

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


def _is_busy(e: sqlite3.OperationalError) -> bool:
    msg = str(e).lower()
    return "database is locked" in msg or "database is busy" in msg


def get_db_path(explicit: str | None = None) -> str:
    """
    Resolution order:
    1) explicit argument
    2) LUNCH_DB_PATH
    3) config.yaml db_path
    4) platform data dir
    The parent directory is created for file paths.
    """
    path = explicit or get_config()["db_path"]
    if path != MEMORY:
        dirn = os.path.dirname(os.path.abspath(path))
        os.makedirs(dirn, exist_ok=True)
    return path


class StoreHandle:
    """
    Owns the single SQLite connection behind the store.

    Every read and write goes through session(), which holds one lock for the
    whole operation. The wait for that lock is bounded by lock_timeout.
    """

    def __init__(self, conn: sqlite3.Connection, path: str, lock_timeout: float = 5.0):
        self._conn: sqlite3.Connection | None = conn
        self._lock = threading.Lock()
        self.path = path
        self.lock_timeout = lock_timeout

    @classmethod
    def open(cls, path: str, lock_timeout: float = 5.0) -> "StoreHandle":
        try:
            resolved = get_db_path(path)
            conn = sqlite3.connect(
                resolved,
                timeout=lock_timeout,
                check_same_thread=False,
                isolation_level=None,
            )
        except (OSError, sqlite3.Error) as e:
            raise StoreIOError(f"cannot open database {path}: {e}") from e
        conn.row_factory = sqlite3.Row
        return cls(conn, resolved, lock_timeout)

    @property
    def closed(self) -> bool:
        return self._conn is None

    @contextmanager
    def session(self) -> Iterator[sqlite3.Connection]:
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise StoreBusyError(f"store busy: lock not acquired within {self.lock_timeout}s")
        try:
            if self._conn is None:
                raise StoreIOError("store is closed")
            yield self._conn
        except sqlite3.OperationalError as e:
            if _is_busy(e):
                raise StoreBusyError(f"store busy: {e}") from e
            raise StoreIOError(str(e)) from e
        except sqlite3.Error as e:
            raise StoreIOError(str(e)) from e
        finally:
            self._lock.release()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """session() inside BEGIN IMMEDIATE ... COMMIT; rolls back on any exception."""
        with self.session() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                # a failed COMMIT leaves the transaction open
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
            finally:
                self._conn = None
        logger.debug("closed store %s", self.path)

    def __enter__(self) -> "StoreHandle":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "ready"
        return f"StoreHandle(path={self.path!r}, {state})"
