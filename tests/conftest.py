# tests/conftest.py

import os

# Settings are read at import time, so the test environment has to be in
# place before anything from matchpoint is imported.
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///./matchpoint_test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["KAFKA_ENABLED"] = "false"

import pytest
from starlette.testclient import TestClient
from sqlalchemy_utils import create_database, database_exists, drop_database

from matchpoint.main import app
from matchpoint.api import deps
from matchpoint.db.base import Base
from matchpoint.db.session import SessionLocal, engine, get_db
from matchpoint.schemas.token import TokenPayload


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    if database_exists(engine.url):
        drop_database(engine.url)
    create_database(engine.url)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()
    drop_database(engine.url)


@pytest.fixture(scope="function")
def db_session():
    session = SessionLocal()
    yield session
    session.close()
    # Services commit for real, so wipe the tables instead of rolling back
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


# --- Mock Dependencies Setup ---
class AuthState:
    """The user the mocked `get_current_user` dependency reports."""

    def __init__(self, user_id: str = "user_host"):
        self.user_id = user_id


@pytest.fixture(scope="function")
def auth():
    return AuthState()


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def test_client(db_session, auth):
    """
    TestClient on the test database with authentication mocked. Switch the
    acting user by setting `auth.user_id`.
    """

    def override_get_db():
        yield db_session

    def override_get_current_user():
        return TokenPayload(sub=auth.user_id, exp=9999999999)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_current_user] = override_get_current_user

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def anon_client(db_session):
    """TestClient with the real token verification in place."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
