import os

# base en mémoire pour l'import de api.py (moteur de production jamais utilisé)
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from config import Settings
from models import Reservation
from repository import ReservationRepository
from scheduler import ReservationService

ZONES = ("UTC", "America/New_York", "Asia/Tokyo", "America/Mexico_City")

# 2024-01-15 est un lundi
MONDAY = "2024-01-15"
FRIDAY = "2024-01-19"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    return Settings(allowed_timezones=ZONES)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def repo(session):
    return ReservationRepository(session)


@pytest.fixture
def service(session, settings):
    return ReservationService(session, settings, clock=lambda: utc(2024, 1, 1, 8, 0))


@pytest.fixture
def add(repo, session):
    """Insère directement une réservation (heures UTC) et valide."""
    def _add(start, end, priority="normal", projector=False, capacity=4, tz="UTC"):
        r = repo.create(Reservation(
            start_time=start, end_time=end, priority=priority,
            projector=projector, capacity=capacity, timezone=tz,
        ))
        session.commit()
        return r
    return _add


@pytest.fixture
def client(engine, settings, monkeypatch):
    import api
    from app import app

    def get_session_override():
        with Session(engine) as s:
            yield s

    monkeypatch.setattr(api, "settings", settings)
    app.dependency_overrides[api.get_session] = get_session_override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
