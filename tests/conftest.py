import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "dev")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from golf_league import crud, schemas
from golf_league.db import get_db, init_db, make_engine, make_session_factory
from golf_league.golf_calc import Hole
from golf_league.main import app

PARS = [4, 4, 3, 5, 4, 4, 3, 5, 4]           # 36
STROKE_INDEXES = [5, 1, 9, 3, 7, 2, 8, 4, 6]


def make_holes():
    return tuple(Hole(par=p, stroke_index=si) for p, si in zip(PARS, STROKE_INDEXES))


def course_payload(**overrides):
    data = {
        "name": "Pine Valley Nine",
        "par": 36,
        "course_rating": 35.0,
        "slope_rating": 113,
        "holes": [
            {"number": i + 1, "par": p, "stroke_index": si}
            for i, (p, si) in enumerate(zip(PARS, STROKE_INDEXES))
        ],
    }
    data.update(overrides)
    return data


def card(total: int):
    """Gross card adding (total - 36) strokes over par, spread from hole 1."""
    base, extra = divmod(total - sum(PARS), len(PARS))
    return [p + base + (1 if i < extra else 0) for i, p in enumerate(PARS)]


@pytest.fixture
def holes():
    return make_holes()


@pytest.fixture
def db():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    TestingSession = make_session_factory(engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def league(db):
    return crud.create_league(db, schemas.LeagueCreate(name="Tuesday Night League"))


@pytest.fixture
def course(db):
    return crud.create_course(db, schemas.CourseCreate(**course_payload()))


@pytest.fixture
def player_a(db):
    return crud.create_player(db, schemas.PlayerCreate(name="Alice", provisional_handicap=10.0))


@pytest.fixture
def player_b(db):
    return crud.create_player(db, schemas.PlayerCreate(name="Bob", provisional_handicap=5.0))
