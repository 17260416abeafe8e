# backend/tests/conftest.py
"""
Pytest configuration.

Each test gets its own SQLite database file under tmp_path, created from the
models. Email goes to the console provider so no test can send real mail.
"""

import os

# Set before any app import so settings and the module-level engine pick them up
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["SESSION_REVIEW_TRIGGER"] = "on_completion"

from typing import Iterator

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session, sessionmaker

from app.api.dependencies.auth import build_caller_context
from app.database import Base, build_engine, get_db
from app.main import app
from app.models.profile import CoachProfile, EnsembleProfile
from app.principal import CallerContext

from .factories import FrozenClock, auth_headers_for, make_coach, make_ensemble


@pytest.fixture
def engine(tmp_path):
    test_engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def other_db(session_factory) -> Iterator[Session]:
    """A second, independent session for race tests."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


# ============================================================================
# Profiles and callers
# ============================================================================


@pytest.fixture
def coach(db) -> CoachProfile:
    return make_coach(db)


@pytest.fixture
def ensemble(db) -> EnsembleProfile:
    return make_ensemble(db)


@pytest.fixture
def coach_caller(db, coach) -> CallerContext:
    return build_caller_context(db, coach.user_id, "maria@example.com")


@pytest.fixture
def ensemble_caller(db, ensemble) -> CallerContext:
    return build_caller_context(db, ensemble.user_id, "brass@example.com")


@pytest.fixture
def stranger_caller() -> CallerContext:
    return CallerContext(user_id="stranger", email="stranger@example.com")


# ============================================================================
# HTTP
# ============================================================================


@pytest.fixture
def client(session_factory):
    """Test client whose requests each get a fresh session on the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def coach_headers(coach) -> dict:
    return auth_headers_for(coach.user_id, "maria@example.com")


@pytest.fixture
def ensemble_headers(ensemble) -> dict:
    return auth_headers_for(ensemble.user_id, "brass@example.com")
