"""
Reset the restaurant list from a seed CSV.

WARNING: This will DELETE all rows in `restaurant` (and `history` with
--clear-history), then re-create them from the CSV. Startup only seeds an
empty table; this is the explicit, destructive reseed for a store that
already has rows.

Usage:
  python -m lunch.scripts.reset_from_seeds --db ~/lunch.db \
      --seeds lunch/seeds/lunch_list.csv [--clear-history]
"""
from __future__ import annotations

import argparse

from lunch.logs import LogContext, configure_logging
from lunch.services.config_svc import get_config
from lunch.services.seed_svc import DEFAULT_SEED_CSV, seed_load
from lunch.services.store_svc import initialize


def reset(db_path: str, seeds: str = DEFAULT_SEED_CSV, clear_history: bool = False) -> dict:
    log = LogContext("RESET_FROM_SEEDS")
    log.set_payload({"db": db_path, "seeds": seeds, "clear_history": clear_history})
    with initialize(db_path, seed=False) as store:
        try:
            with store.transaction() as conn:
                res = seed_load(conn, seeds, log, clear_history=clear_history)
        except Exception as e:
            log.write("ERROR", str(e))
            raise
    log.write("OK")
    return res


def main(argv: list[str] | None = None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--db", default=None)
    ap.add_argument("--seeds", default=DEFAULT_SEED_CSV)
    ap.add_argument("--clear-history", action="store_true", default=False)
    args = ap.parse_args(argv)

    cfg = get_config()
    configure_logging(cfg["log_level"])
    res = reset(args.db or cfg["db_path"], args.seeds, args.clear_history)
    print({"message": "ok", **res})


if __name__ == "__main__":
    main()
