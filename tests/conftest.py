"""
Shared pytest fixtures.

Uses a SQLite database so no Postgres is required for tests. Every test
starts from an empty `engine_state` table, so the single state key never
leaks between tests.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from harmony.db.base import Base, get_db
from harmony.main import app
from harmony.models.engine_state import EngineStateRecord
from harmony.services.room_score import RoomMetrics

SQLITE_URL = "sqlite:///./test_harmony.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_state():
    db = TestingSessionLocal()
    try:
        db.query(EngineStateRecord).delete()
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_metrics(clutter=5, functionality=5, joy=5, energy=5, accessibility=5) -> RoomMetrics:
    return RoomMetrics(
        clutter_level=clutter,
        functionality_score=functionality,
        joy_factor=joy,
        energy_flow=energy,
        accessibility_score=accessibility,
    )


@pytest.fixture()
def metrics_factory():
    return make_metrics
