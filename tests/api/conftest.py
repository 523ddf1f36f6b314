"""
API tests run against an in-memory SQLite database shared through a StaticPool.
The TestClient is used without a context manager, so the app's startup hook
(which creates tables on the configured database) never runs.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shiftboard.api.deps import get_db
from shiftboard.core.security import create_access_token, get_password_hash
from shiftboard.db import models  # noqa: F401
from shiftboard.db.database import Base
from shiftboard.db.models.credentials import Credentials
from shiftboard.db.models.profiles import Profiles
from shiftboard.main import app
from shiftboard.services.rules.types import Role

PASSWORD = "secret123"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory: insert a credential and a matching profile."""
    def _make(user_id: int, role: Role = Role.EMPLOYEE, name: str = None, password: str = PASSWORD) -> Profiles:
        email = f"user{user_id}@example.com"
        db.add(Credentials(id=user_id, email=email, password_hash=get_password_hash(password)))
        profile = Profiles(
            id=user_id,
            email=email,
            name=name or f"User {user_id}",
            role=role,
            must_change_password=False,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make


@pytest.fixture
def auth():
    """Factory: bearer headers for a profile."""
    def _headers(user: Profiles) -> dict:
        token = create_access_token(data={"sub": user.id, "email": user.email, "role": user.role})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def manager(make_user):
    return make_user(1, Role.MANAGER, "Dana")


@pytest.fixture
def shift_manager(make_user):
    return make_user(2, Role.SHIFT_MANAGER, "Noa")


@pytest.fixture
def employee(make_user):
    return make_user(3, Role.EMPLOYEE, "Avi")


@pytest.fixture
def other_employee(make_user):
    return make_user(4, Role.EMPLOYEE, "Maya")


@pytest.fixture
def week() -> str:
    # a Sunday
    return "2025-01-19"


@pytest.fixture
def minimum_payload() -> dict:
    return {
        "selections": [
            {"day_index": 0, "shift_id": "s1"},
            {"day_index": 1, "shift_id": "s2"},
            {"day_index": 2, "shift_id": "s4"},
        ]
    }


@pytest.fixture
def password() -> str:
    return PASSWORD
