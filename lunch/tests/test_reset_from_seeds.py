from __future__ import annotations

from lunch.scripts.reset_from_seeds import reset
from lunch.services.selector_svc import roll
from lunch.services.store_svc import add_restaurant, initialize, list_restaurants, recent_history


def test_reset_replaces_entries(tmp_path, tmp_db_path):
    with initialize(tmp_db_path, seed=False) as s:
        add_restaurant(s, "Mine", "cheap")
        roll(s, "cheap")
    csv = tmp_path / "seed.csv"
    csv.write_text("name,category\nOne,cheap\nTwo,normal\n", encoding="utf-8")

    res = reset(tmp_db_path, str(csv))
    assert res == {"removed": 1, "removed_history": 0, "created": 2}
    with initialize(tmp_db_path) as s:
        assert [r.name for r in list_restaurants(s)] == ["One", "Two"]
        assert [h.name for h in recent_history(s)] == ["Mine"]


def test_reset_can_clear_history(tmp_path, tmp_db_path):
    with initialize(tmp_db_path, seed=False) as s:
        add_restaurant(s, "Mine", "cheap")
        roll(s, "cheap")
    res = reset(tmp_db_path, clear_history=True)
    assert res["removed_history"] == 1
    with initialize(tmp_db_path) as s:
        assert recent_history(s) == []
        assert "Arbys" in [r.name for r in list_restaurants(s)]
