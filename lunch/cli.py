"""
Lunch picker CLI (SQLite)

Commands:
  init                Create the database and seed the default restaurant list if it is empty
  list                Print all restaurants, optionally only one category
  add                 Add a restaurant
  update              Rename and/or recategorize a restaurant
  delete              Remove a restaurant
  roll                Pick a random restaurant of a category
  history             Show the most recent picks
  serve               Run the HTTP command API (uvicorn)

Exit status: 0 ok, 1 expected error (duplicate name, nothing to pick, bad input),
2 the store could not be opened.
"""
from __future__ import annotations

import argparse
import logging
import sys

from .db import StoreHandle
from .domain.models import Category
from .errors import ConflictError, EmptyError, NotFoundError, StoreIOError
from .logs import LogContext, configure_logging
from .services.config_svc import get_config
from .services.selector_svc import pick, roll
from .services.store_svc import (
    add_restaurant,
    delete_restaurant,
    initialize,
    list_by_category,
    list_restaurants,
    recent_history,
    update_restaurant,
)

logger = logging.getLogger(__name__)

CATEGORY_CHOICES = [c.value for c in Category]


def cmd_init(store: StoreHandle, args, cfg: dict):
    n = len(list_restaurants(store))
    print(f"{store.path}: {n} restaurants")


def cmd_list(store: StoreHandle, args, cfg: dict):
    items = list_by_category(store, args.category) if args.category else list_restaurants(store)
    if not items:
        print("(no restaurants)")
    for r in items:
        print(f"{r.name}\t{r.category.value}")


def cmd_add(store: StoreHandle, args, cfg: dict):
    log = LogContext("RESTAURANT_ADD")
    log.set_payload({"name": args.name, "category": args.category})
    add_restaurant(store, args.name, args.category, log)
    log.write("OK")
    print(f"added {args.name}")


def cmd_update(store: StoreHandle, args, cfg: dict):
    new_name = args.name or args.original_name
    category = args.category
    if category is None:
        current = {r.name: r for r in list_restaurants(store)}
        if args.original_name not in current:
            raise NotFoundError(args.original_name)
        category = current[args.original_name].category
    log = LogContext("RESTAURANT_UPDATE")
    log.set_payload({"original_name": args.original_name, "name": new_name, "category": Category.parse(category).value})
    update_restaurant(store, args.original_name, new_name, category, log)
    log.write("OK")
    print(f"updated {new_name}")


def cmd_delete(store: StoreHandle, args, cfg: dict):
    log = LogContext("RESTAURANT_DELETE")
    log.set_payload({"name": args.name})
    delete_restaurant(store, args.name, log)
    log.write("OK")
    print(f"deleted {args.name}")


def cmd_roll(store: StoreHandle, args, cfg: dict):
    if args.avoid_repeats or cfg["avoid_repeats"]:
        chosen = roll(store, args.category, history_limit=cfg["history_limit"])
    else:
        chosen = pick(store, args.category)
    print(chosen.name)


def cmd_history(store: StoreHandle, args, cfg: dict):
    for h in recent_history(store, args.limit):
        print(f"{h.picked_at}\t{h.name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lunch", description="Pick where to eat (SQLite)")
    parser.add_argument("--db", default=None, metavar="PATH", help="database path (default: config / platform data dir)")
    parser.add_argument("--debug", action="store_true", default=False, help="verbose logging")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create db and seed defaults")
    p_init.set_defaults(func=cmd_init)

    p_list = sub.add_parser("list", help="list restaurants")
    p_list.add_argument("--category", type=str.lower, choices=CATEGORY_CHOICES)
    p_list.set_defaults(func=cmd_list)

    p_add = sub.add_parser("add", help="add a restaurant")
    p_add.add_argument("name")
    p_add.add_argument("category", type=str.lower, choices=CATEGORY_CHOICES)
    p_add.set_defaults(func=cmd_add)

    p_upd = sub.add_parser("update", help="rename and/or recategorize")
    p_upd.add_argument("original_name")
    p_upd.add_argument("--name", default=None, help="new name (default: unchanged)")
    p_upd.add_argument("--category", type=str.lower, choices=CATEGORY_CHOICES, default=None)
    p_upd.set_defaults(func=cmd_update)

    p_del = sub.add_parser("delete", help="remove a restaurant")
    p_del.add_argument("name")
    p_del.set_defaults(func=cmd_delete)

    p_roll = sub.add_parser("roll", help="random restaurant of a category")
    p_roll.add_argument("category", type=str.lower, choices=CATEGORY_CHOICES)
    p_roll.add_argument("--avoid-repeats", action="store_true", default=False, help="skip the previous pick and record this one")
    p_roll.set_defaults(func=cmd_roll)

    p_hist = sub.add_parser("history", help="recent picks")
    p_hist.add_argument("--limit", type=int, default=14)
    p_hist.set_defaults(func=cmd_history)

    p_serve = sub.add_parser("serve", help="run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=None, serve=True)
    return parser


def serve(cfg: dict, host: str, port: int):
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(settings=cfg), host=host, port=port)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = get_config()
    if args.db:
        cfg["db_path"] = args.db
    configure_logging("DEBUG" if args.debug else cfg["log_level"])

    if getattr(args, "serve", False):
        serve(cfg, args.host, args.port)
        return 0
    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    try:
        store = initialize(cfg["db_path"], lock_timeout=cfg["lock_timeout"])
    except StoreIOError as e:
        logger.critical("cannot open store: %s", e)
        print(f"fatal: {e}", file=sys.stderr)
        return 2

    with store:
        try:
            args.func(store, args, cfg)
        except (ConflictError, EmptyError, NotFoundError, ValueError, StoreIOError) as e:
            print(str(e), file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
