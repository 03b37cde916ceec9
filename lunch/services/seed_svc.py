# lunch/services/seed_svc.py
from __future__ import annotations

import logging
import os
from sqlite3 import Connection

import pandas as pd

from ..domain.models import Category
from ..logs import LogContext
from ..repository import history_repo, restaurant_repo

logger = logging.getLogger(__name__)

DEFAULT_SEED_CSV = os.path.join(os.path.dirname(os.path.dirname(__file__)), "seeds", "lunch_list.csv")


def read_seed_csv(csv_path: str = DEFAULT_SEED_CSV) -> list[tuple[str, str]]:
    """Read (name, category) pairs from a CSV with `name` and `category` columns.

    Rows with an empty name or an unknown category are skipped with a warning.
    Repeated names keep their first occurrence.
    """
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    missing = {"name", "category"} - set(df.columns)
    if missing:
        raise ValueError(f"seed csv {csv_path} missing columns: {sorted(missing)}")

    out: list[tuple[str, str]] = []
    seen: set[str] = set()
    for _, r in df.iterrows():
        name = str(r["name"]).strip()
        if not name:
            logger.warning("seed row skipped: empty name")
            continue
        try:
            cat = Category.parse(str(r["category"]))
        except ValueError:
            logger.warning("seed row %r skipped: unknown category %r", name, r["category"])
            continue
        if name in seen:
            continue
        seen.add(name)
        out.append((name, cat.value))
    return out


def seed_if_empty(conn: Connection, csv_path: str = DEFAULT_SEED_CSV) -> int:
    """Insert the bundled defaults iff the restaurant table has no rows.

    Runs on every initialize; a table holding even one row is left alone. Rows
    deleted while a store is open are never refilled before the next initialize.
    """
    if restaurant_repo.count(conn) > 0:
        logger.debug("restaurant table not empty, seeding skipped")
        return 0
    rows = read_seed_csv(csv_path)
    inserted = restaurant_repo.insert_many(conn, rows)
    logger.info("seeded %d restaurants from %s", inserted, csv_path)
    return inserted


def seed_load(conn: Connection, csv_path: str, log: LogContext, clear_history: bool = False) -> dict:
    """Destructive reload: clear the restaurant table (and history on request), then load csv_path.

    Callers hold the store transaction; nothing is committed here.
    """
    rows = read_seed_csv(csv_path)
    removed = restaurant_repo.remove_all(conn)
    removed_history = history_repo.remove_all(conn) if clear_history else 0
    created = restaurant_repo.insert_many(conn, rows)
    res = {"removed": removed, "removed_history": removed_history, "created": created}
    log.set_entity("RESTAURANT", csv_path)
    log.set_after(res)
    return res
