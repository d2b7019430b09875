import pytest
from sqlalchemy import inspect

from golf_league import db as db_module


def test_init_db_creates_league_tables():
    engine = db_module.make_engine("sqlite://")
    db_module.init_db(engine)
    tables = set(inspect(engine).get_table_names())
    assert {"leagues", "players", "courses", "holes", "matches", "scores", "handicap_records"} <= tables
    engine.dispose()


def test_get_db_rolls_back_and_closes_on_error(monkeypatch):
    calls = []

    class RecordingSession:
        def rollback(self):
            calls.append("rollback")

        def close(self):
            calls.append("close")

    monkeypatch.setattr(db_module, "SessionLocal", RecordingSession)

    gen = db_module.get_db()
    next(gen)
    with pytest.raises(RuntimeError):
        gen.throw(RuntimeError("request failed"))
    assert calls == ["rollback", "close"]


def test_get_db_closes_after_request(monkeypatch):
    calls = []

    class RecordingSession:
        def close(self):
            calls.append("close")

    monkeypatch.setattr(db_module, "SessionLocal", RecordingSession)

    gen = db_module.get_db()
    next(gen)
    gen.close()
    assert calls == ["close"]
