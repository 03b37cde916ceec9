from __future__ import annotations

import threading

import pytest

from lunch.db import StoreHandle, get_db_path
from lunch.errors import StoreBusyError, StoreIOError
from lunch.services.store_svc import add_restaurant, initialize, list_restaurants


def test_get_db_path_creates_parent(tmp_path):
    p = tmp_path / "nested" / "dir" / "lunch.db"
    assert get_db_path(str(p)) == str(p)
    assert p.parent.is_dir()


def test_get_db_path_from_env(tmp_path, monkeypatch):
    p = tmp_path / "env.db"
    monkeypatch.setenv("LUNCH_DB_PATH", str(p))
    assert get_db_path() == str(p)


def test_initialize_unopenable_path_is_store_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    # parent "directory" is a regular file
    with pytest.raises(StoreIOError):
        initialize(str(blocker / "lunch.db"))


def test_initialize_corrupt_file_is_store_error(tmp_path):
    bad = tmp_path / "bad.db"
    bad.write_bytes(b"this is not a sqlite database at all" * 100)
    with pytest.raises(StoreIOError):
        initialize(str(bad))


def test_lock_wait_is_bounded(tmp_db_path):
    s = initialize(tmp_db_path, seed=False, lock_timeout=0.2)
    entered = threading.Event()
    release = threading.Event()

    def hold():
        with s.session():
            entered.set()
            release.wait(5)

    t = threading.Thread(target=hold)
    t.start()
    try:
        assert entered.wait(5)
        with pytest.raises(StoreBusyError):
            list_restaurants(s)
    finally:
        release.set()
        t.join()
        s.close()


def test_transaction_rolls_back_on_error(store):
    add_restaurant(store, "Kept", "cheap")
    with pytest.raises(RuntimeError):
        with store.transaction() as conn:
            conn.execute("DELETE FROM restaurant")
            raise RuntimeError("boom")
    assert [r.name for r in list_restaurants(store)] == ["Kept"]


def test_sqlite_errors_become_store_errors(store):
    with pytest.raises(StoreIOError):
        with store.session() as conn:
            conn.execute("SELECT * FROM no_such_table")


def test_closed_store(tmp_db_path):
    s = initialize(tmp_db_path, seed=False)
    s.close()
    s.close()
    assert s.closed
    with pytest.raises(StoreIOError):
        list_restaurants(s)


def test_concurrent_adds_all_land(store):
    errors = []

    def worker(i):
        try:
            add_restaurant(store, f"r{i}", "cheap")
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
    assert len(list_restaurants(store)) == 20


def test_open_returns_ready_handle(tmp_db_path):
    h = StoreHandle.open(tmp_db_path, lock_timeout=1.0)
    try:
        assert not h.closed
        assert "ready" in repr(h)
    finally:
        h.close()


def test_failed_commit_rolls_back_and_store_recovers(tmp_db_path):
    import sqlite3

    s = initialize(tmp_db_path, seed=False, lock_timeout=0.2)
    reader = sqlite3.connect(tmp_db_path, isolation_level=None)
    try:
        # an outside reader holding a shared lock blocks our COMMIT
        reader.execute("BEGIN")
        reader.execute("SELECT * FROM restaurant").fetchall()
        with pytest.raises(StoreBusyError):
            add_restaurant(s, "A", "cheap")
        with s.session() as conn:
            assert not conn.in_transaction
        assert list_restaurants(s) == []

        reader.execute("COMMIT")
        add_restaurant(s, "A", "cheap")
        assert [r.name for r in list_restaurants(s)] == ["A"]
    finally:
        reader.close()
        s.close()


def test_busy_database_maps_to_store_busy(tmp_db_path):
    import sqlite3

    s = initialize(tmp_db_path, seed=False, lock_timeout=0.2)
    writer = sqlite3.connect(tmp_db_path, isolation_level=None)
    try:
        writer.execute("BEGIN IMMEDIATE")
        with pytest.raises(StoreBusyError):
            add_restaurant(s, "B", "normal")
        writer.execute("ROLLBACK")
        add_restaurant(s, "B", "normal")
        assert [r.name for r in list_restaurants(s)] == ["B"]
    finally:
        writer.close()
        s.close()
