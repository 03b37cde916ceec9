import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    # Never pick up a developer's config.yaml or LUNCH_* overrides
    for k in ("LUNCH_DB_PATH", "LUNCH_LOCK_TIMEOUT", "LUNCH_AVOID_REPEATS", "LUNCH_HISTORY_LIMIT", "LUNCH_LOG_LEVEL"):
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("LUNCH_CONFIG", str(tmp_path / "no-config.yaml"))
    yield


@pytest.fixture()
def tmp_db_path(tmp_path):
    return str(tmp_path / "lunch_test.db")


@pytest.fixture()
def store(tmp_db_path):
    """Empty, unseeded store backed by a temp file."""
    from lunch.services.store_svc import initialize
    s = initialize(tmp_db_path, seed=False, lock_timeout=1.0)
    yield s
    s.close()


@pytest.fixture()
def client(tmp_db_path):
    from fastapi.testclient import TestClient
    from lunch.api import create_app
    from lunch.services.config_svc import get_config
    app = create_app(db_path=tmp_db_path, settings=get_config())
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def names():
    def _names(store):
        from lunch.services.store_svc import list_restaurants
        return [(r.name, r.category.value) for r in list_restaurants(store)]
    return _names
