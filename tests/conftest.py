import itertools
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from lottery_backend import db


@pytest.fixture(autouse=True)
def _temp_db(tmp_path, monkeypatch):
    """Every test gets its own SQLite file and the canned chat mode."""
    monkeypatch.setenv("DB_PATH", str(tmp_path / "data" / "lottery.sqlite"))
    monkeypatch.setenv("CHAT_MODE", "demo")
    db.init_db()
    yield


@pytest.fixture
def fake_clock(monkeypatch):
    """Timestamps one second apart, in call order."""
    start = datetime(2026, 1, 1, 12, 0, 0)
    ticks = itertools.count()

    def _now():
        return (start + timedelta(seconds=next(ticks))).isoformat(timespec="microseconds")

    monkeypatch.setattr(db, "now_iso", _now)
    return _now


@pytest.fixture
def client():
    from lottery_backend.app import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def seed():
    """Insert (numbers, bonus) pairs oldest first."""
    def _seed(draws):
        for numbers, bonus in draws:
            db.insert_past_result(sorted(numbers), bonus)
    return _seed
