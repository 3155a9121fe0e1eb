from __future__ import annotations

import datetime as dt
import sys
from pathlib import Path

import pytest
from sqlalchemy.pool import StaticPool


BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from seshlock.core.config import Settings  # noqa: E402
from seshlock.db.session import build_session_factory, create_db_engine, init_db  # noqa: E402
from seshlock.services.gateway import AuthenticationGateway  # noqa: E402
from seshlock.services.sessions import SessionEngine  # noqa: E402
from seshlock.services.users import create_user  # noqa: E402

START = dt.datetime(2026, 3, 1, 12, 0, tzinfo=dt.timezone.utc)
PASSWORD = "correct horse battery staple"


class FrozenClock:
    def __init__(self, now: dt.datetime) -> None:
        self.now = now

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + dt.timedelta(**kwargs)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def db_engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(START)


@pytest.fixture
def sessions(settings, clock) -> SessionEngine:
    return SessionEngine(settings, clock=clock)


@pytest.fixture
def gateway(sessions) -> AuthenticationGateway:
    return AuthenticationGateway(sessions)


@pytest.fixture
def user(db):
    return create_user(db, "u1@example.com", PASSWORD)
