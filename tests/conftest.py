from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from workforce.core import security
from workforce.db import models, session
from workforce.main import app

PASSWORD = "secret"

# Monday 2026-03-02, 09:00 UTC
DAY_START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    models.Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    db = session_factory()
    yield db
    db.close()


def make_user(db, email: str, role: str, name: str = "Test User") -> models.User:
    user = models.User(email=email, name=name, role=role, hashed_password=security.get_password_hash(PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def employee(db):
    return make_user(db, "employee@example.com", models.ROLE_EMPLOYEE, "John Employee")


@pytest.fixture
def other_employee(db):
    return make_user(db, "jane@example.com", models.ROLE_EMPLOYEE, "Jane Employee")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", models.ROLE_ADMIN, "Admin User")


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[session.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def login(client: TestClient, email: str, password: str = PASSWORD):
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response
