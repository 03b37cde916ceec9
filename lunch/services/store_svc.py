# lunch/services/store_svc.py
from __future__ import annotations

import logging
import sqlite3

from ..db import StoreHandle
from ..domain.models import Category, HistoryRecord, Restaurant, validate_name
from ..errors import ConflictError, NotFoundError, StoreIOError
from ..logs import LogContext
from ..repository import history_repo, restaurant_repo
from .config_svc import get_config
from .seed_svc import DEFAULT_SEED_CSV, seed_if_empty

logger = logging.getLogger(__name__)


def _to_restaurants(rows) -> list[Restaurant]:
    """Rows with a category outside the enum (hand edits, old backups) are skipped."""
    out = []
    for r in rows:
        try:
            out.append(Restaurant(name=r["name"], category=Category.parse(r["category"])))
        except ValueError:
            logger.warning("skipping %r: unknown category %r", r["name"], r["category"])
    return out


def initialize(
    path: str | None = None,
    *,
    seed: bool = True,
    seed_csv: str = DEFAULT_SEED_CSV,
    lock_timeout: float | None = None,
) -> StoreHandle:
    """
    Open (creating if needed) the database at `path` and return a ready handle.

    Creates both tables when absent and, when `seed` is set, fills the
    restaurant table from `seed_csv` if it is empty. Safe to call repeatedly
    against the same file. Any failure raises StoreIOError and the handle is
    not returned.
    """
    cfg = get_config()
    if lock_timeout is None:
        lock_timeout = cfg["lock_timeout"]
    store = StoreHandle.open(path or cfg["db_path"], lock_timeout=lock_timeout)
    try:
        with store.transaction() as conn:
            restaurant_repo.ensure_schema(conn)
            history_repo.ensure_schema(conn)
            if seed:
                seed_if_empty(conn, seed_csv)
    except (StoreIOError, OSError, ValueError) as e:
        store.close()
        if isinstance(e, StoreIOError):
            raise
        raise StoreIOError(f"cannot initialize store at {store.path}: {e}") from e
    logger.info("store ready at %s", store.path)
    return store


def add_restaurant(store: StoreHandle, name: str, category: str | Category, log: LogContext | None = None):
    name = validate_name(name)
    cat = Category.parse(category)
    with store.transaction() as conn:
        if restaurant_repo.exists(conn, name):
            raise ConflictError(name)
        try:
            restaurant_repo.insert(conn, name, cat.value)
        except sqlite3.IntegrityError as e:
            raise ConflictError(name) from e
    if log is not None:
        log.set_entity("RESTAURANT", name)
        log.set_after({"name": name, "category": cat.value})


def list_restaurants(store: StoreHandle) -> list[Restaurant]:
    with store.session() as conn:
        rows = restaurant_repo.list_all(conn)
    return _to_restaurants(rows)


def list_by_category(store: StoreHandle, category: str | Category) -> list[Restaurant]:
    cat = Category.parse(category)
    with store.session() as conn:
        rows = restaurant_repo.list_by_category(conn, cat.value)
    return _to_restaurants(rows)


def delete_restaurant(store: StoreHandle, name: str, log: LogContext | None = None):
    """Remove `name`; a missing name is not an error. History rows are kept."""
    with store.transaction() as conn:
        before = restaurant_repo.get_one(conn, name)
        restaurant_repo.remove(conn, name)
    if log is not None:
        log.set_entity("RESTAURANT", name)
        log.set_before(dict(before) if before else None)


def update_restaurant(
    store: StoreHandle,
    original_name: str,
    new_name: str,
    category: str | Category,
    log: LogContext | None = None,
):
    """
    Rename and/or recategorize `original_name`.

    A rename onto another live restaurant raises ConflictError and changes
    nothing. History rows naming `original_name` move to `new_name` in the
    same transaction as the row update.
    """
    new_name = validate_name(new_name)
    cat = Category.parse(category)
    with store.transaction() as conn:
        before = restaurant_repo.get_one(conn, original_name)
        if before is None:
            raise NotFoundError(original_name)
        if new_name != original_name and restaurant_repo.exists(conn, new_name):
            raise ConflictError(new_name)
        try:
            restaurant_repo.update(conn, original_name, new_name, cat.value)
        except sqlite3.IntegrityError as e:
            raise ConflictError(new_name) from e
        moved = 0
        if new_name != original_name:
            moved = history_repo.rename(conn, original_name, new_name)
    logger.debug("renamed %r -> %r, %d history rows moved", original_name, new_name, moved)
    if log is not None:
        log.set_entity("RESTAURANT", new_name)
        log.set_before(dict(before))
        log.set_after({"name": new_name, "category": cat.value, "history_moved": moved})


def recent_history(store: StoreHandle, limit: int = 14) -> list[HistoryRecord]:
    with store.session() as conn:
        rows = history_repo.list_recent(conn, limit)
    return [HistoryRecord(name=r["name"], picked_at=r["picked_at"]) for r in rows]
