# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os
import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["WORKTIME_DATABASE_URL"] = "sqlite:///./test.db"
os.environ["WORKTIME_LOG_LEVEL"] = "WARNING"

from worktime.api.deps import get_db
from worktime.main import app
from worktime.models import Department, User, UserRole, WorkModelDay
from worktime.models.base import Base
from worktime.services.balance_service import balance_cache

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def fresh_balance_cache():
    """Keep the balance cache subscribed and empty for every test."""
    balance_cache.clear()
    balance_cache.subscribe()
    yield balance_cache
    balance_cache.unsubscribe()
    balance_cache.clear()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_user(
    db_session,
    name: str,
    role: UserRole = UserRole.INSTALLER,
    department_id: str | None = None,
    **kwargs,
) -> User:
    """Helper to create a persisted user."""
    user = User(
        id=uuid.uuid4(),
        display_name=name,
        email=f"{name}@example.com",
        role=role,
        department_id=department_id,
        **kwargs,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def auth(user: User) -> dict[str, str]:
    """Request headers identifying a user."""
    return {"X-User-Id": str(user.id)}


@pytest.fixture
def department(db_session) -> Department:
    """Department without approvers; tests assign them as needed."""
    dept = Department(id="field", label="Field service")
    db_session.add(dept)
    db_session.commit()
    return dept


@pytest.fixture
def admin_user(db_session) -> User:
    return create_user(db_session, "admin", UserRole.ADMIN)


@pytest.fixture
def office_user(db_session) -> User:
    return create_user(db_session, "office", UserRole.OFFICE)


@pytest.fixture
def lead_user(db_session, department) -> User:
    """Installer responsible for the field department."""
    user = create_user(db_session, "lead", department_id=department.id)
    department.responsible_user_id = user.id
    db_session.commit()
    return user


@pytest.fixture
def owner_user(db_session, department, lead_user) -> User:
    """Installer whose entries are under test."""
    return create_user(
        db_session,
        "owner",
        department_id=department.id,
        employment_start_date=date(2026, 1, 1),
    )


@pytest.fixture
def apprentice_user(db_session, department, lead_user) -> User:
    return create_user(
        db_session, "apprentice", UserRole.APPRENTICE, department_id=department.id
    )


@pytest.fixture
def other_user(db_session) -> User:
    """Installer without any authority over the owner."""
    return create_user(db_session, "other")


@pytest.fixture
def eight_hour_model(db_session, owner_user) -> list[WorkModelDay]:
    """8h Monday to Friday, nothing on weekends."""
    days = [
        WorkModelDay(user_id=owner_user.id, weekday=weekday, target_hours=8.0)
        for weekday in range(5)
    ] + [
        WorkModelDay(user_id=owner_user.id, weekday=weekday, target_hours=0.0)
        for weekday in (5, 6)
    ]
    db_session.add_all(days)
    db_session.commit()
    return days
