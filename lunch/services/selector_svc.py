# lunch/services/selector_svc.py
from __future__ import annotations

import datetime as dt
import logging
import random

from ..db import StoreHandle
from ..domain.models import Category, Restaurant
from ..errors import EmptyError
from ..repository import history_repo, restaurant_repo

logger = logging.getLogger(__name__)


def _choose(candidates: list[Restaurant], rng: random.Random | None) -> Restaurant:
    # module-level random is the process-wide source
    return (rng or random).choice(candidates)


def pick(store: StoreHandle, category: str | Category, rng: random.Random | None = None) -> Restaurant:
    """Uniform random restaurant of `category`; EmptyError when none match. Writes nothing."""
    cat = Category.parse(category)
    with store.session() as conn:
        rows = restaurant_repo.list_by_category(conn, cat.value)
    if not rows:
        raise EmptyError(cat.value)
    candidates = [Restaurant(name=r["name"], category=Category.parse(r["category"])) for r in rows]
    return _choose(candidates, rng)


def roll(
    store: StoreHandle,
    category: str | Category,
    rng: random.Random | None = None,
    history_limit: int = 14,
) -> Restaurant:
    """
    pick() that avoids repeating the previous pick and records the result.

    The most recent pick is excluded when another candidate exists. The chosen
    name is appended to history, which is then pruned to the newest
    `history_limit` rows. Read, choice and write share one transaction.
    """
    cat = Category.parse(category)
    with store.transaction() as conn:
        rows = restaurant_repo.list_by_category(conn, cat.value)
        if not rows:
            raise EmptyError(cat.value)
        candidates = [Restaurant(name=r["name"], category=Category.parse(r["category"])) for r in rows]
        last = history_repo.last_name(conn)
        available = [c for c in candidates if c.name != last] or candidates
        chosen = _choose(available, rng)
        history_repo.record(conn, chosen.name, dt.datetime.now(dt.timezone.utc).isoformat())
        history_repo.prune(conn, history_limit)
    logger.debug("rolled %r from %d candidates (last=%r)", chosen.name, len(available), last)
    return chosen
