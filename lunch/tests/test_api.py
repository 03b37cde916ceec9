from __future__ import annotations

import pytest

from lunch.services.seed_svc import DEFAULT_SEED_CSV, read_seed_csv


def _names(client):
    return [(r["name"], r["category"]) for r in client.get("/api/restaurants/list").json()["items"]]


def _clear(client):
    for name, _ in _names(client):
        client.post("/api/restaurants/delete", json={"name": name})


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "lunch-api"


def test_startup_seeds_defaults(client):
    assert len(_names(client)) == len(read_seed_csv(DEFAULT_SEED_CSV))


def test_add_conflict_delete(client):
    _clear(client)
    r = client.post("/api/restaurants/add", json={"name": "Arbys", "category": "Cheap"})
    assert r.status_code == 201
    assert r.json().get("message") == "ok"
    assert _names(client) == [("Arbys", "cheap")]

    dup = client.post("/api/restaurants/add", json={"name": "Arbys", "category": "Normal"})
    assert dup.status_code == 409
    assert dup.json()["detail"] == "Arbys already exists"
    assert _names(client) == [("Arbys", "cheap")]

    d = client.post("/api/restaurants/delete", json={"name": "Arbys"})
    assert d.status_code == 200
    assert _names(client) == []


def test_add_bad_category(client):
    r = client.post("/api/restaurants/add", json={"name": "X", "category": "fancy"})
    assert r.status_code == 400


def test_update_conflict_and_success(client):
    _clear(client)
    client.post("/api/restaurants/add", json={"name": "A", "category": "Cheap"})
    client.post("/api/restaurants/add", json={"name": "B", "category": "Normal"})

    r = client.post("/api/restaurants/update", json={"original_name": "A", "name": "B", "category": "Cheap"})
    assert r.status_code == 409
    assert r.json()["detail"] == "B already exists"
    assert _names(client) == [("A", "cheap"), ("B", "normal")]

    ok = client.post("/api/restaurants/update", json={"original_name": "A", "name": "C", "category": "normal"})
    assert ok.status_code == 200
    assert _names(client) == [("B", "normal"), ("C", "normal")]

    missing = client.post("/api/restaurants/update", json={"original_name": "Z", "name": "Y", "category": "cheap"})
    assert missing.status_code == 404


def test_roll(client):
    _clear(client)
    client.post("/api/restaurants/add", json={"name": "C", "category": "Cheap"})

    empty = client.post("/api/lunch/roll", json={"category": "Normal"})
    assert empty.status_code == 404
    assert empty.json()["detail"] == "No restaurants found!"

    r = client.post("/api/lunch/roll", json={"category": "cheap"})
    assert r.status_code == 200
    assert r.json() == {"name": "C", "category": "cheap"}


@pytest.fixture()
def repeat_client(tmp_db_path):
    from fastapi.testclient import TestClient
    from lunch.api import create_app
    from lunch.services.config_svc import get_config
    settings = {**get_config(), "avoid_repeats": True, "history_limit": 5}
    with TestClient(create_app(db_path=tmp_db_path, settings=settings)) as c:
        yield c


def test_roll_with_history(repeat_client):
    _clear(repeat_client)
    repeat_client.post("/api/restaurants/add", json={"name": "P", "category": "cheap"})
    repeat_client.post("/api/restaurants/add", json={"name": "Q", "category": "cheap"})
    picks = [repeat_client.post("/api/lunch/roll", json={"category": "cheap"}).json()["name"] for _ in range(4)]
    assert all(a != b for a, b in zip(picks, picks[1:]))

    hist = repeat_client.get("/api/lunch/history", params={"limit": 10}).json()["items"]
    assert [h["name"] for h in hist] == list(reversed(picks))


def test_startup_fails_on_unopenable_store(tmp_path):
    from fastapi.testclient import TestClient
    from lunch.api import create_app
    from lunch.errors import StoreIOError
    from lunch.services.config_svc import get_config
    blocker = tmp_path / "file"
    blocker.write_text("x")
    app = create_app(db_path=str(blocker / "lunch.db"), settings=get_config())
    with pytest.raises(StoreIOError):
        with TestClient(app):
            pass
