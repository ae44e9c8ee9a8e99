# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["LOG_LEVEL"] = "DEBUG"

from adsguard.api.deps import get_identity
from adsguard.database import get_db
from adsguard.main import app
from adsguard.models import Role, User
from adsguard.models.base import Base
from adsguard.rbac.principal import Identity, Principal
from adsguard.services import rbac_service
from adsguard.services.permission_resolver import PermissionResolver
from adsguard.services.rbac_seed_service import seed_rbac_data

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def reset_resolver():
    """Give every test a fresh permission cache."""
    PermissionResolver.reset_instance()
    yield
    PermissionResolver.reset_instance()


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


@pytest.fixture
def seeded(db_session):
    """Seed permissions and default roles."""
    seed_rbac_data(db_session)
    return db_session


def create_role(db_session, name: str, level: int, is_active: bool = True) -> Role:
    """Helper to create a persisted role without grants."""
    role = Role(name=name, level=level, is_active=is_active)
    db_session.add(role)
    db_session.commit()
    db_session.refresh(role)
    return role


def create_user(db_session, username: str, role: Role | str) -> User:
    """Helper to create a persisted user holding role (object or seeded name)."""
    if isinstance(role, str):
        role = rbac_service.get_role_by_name(db_session, role)
    user = User(
        username=username,
        email=f"{username}@example.com",
        is_active=True,
        role_id=role.id,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def principal_for(user: User) -> Principal:
    """Build the principal the authorization layer would derive for user."""
    return Principal(
        user_id=user.id,
        role_id=user.role.id,
        role_level=user.role.level,
        role_name=user.role.name,
        role_is_active=user.role.is_active,
    )


def login(user: User) -> None:
    """Act as user for subsequent requests, standing in for authentication."""
    app.dependency_overrides[get_identity] = lambda: Identity(
        user_id=user.id, role_id=user.role_id
    )


@pytest.fixture
def superadmin(seeded) -> User:
    return create_user(seeded, "root", "SuperAdmin")


@pytest.fixture
def admin(seeded) -> User:
    return create_user(seeded, "admin", "Admin")


@pytest.fixture
def editor(seeded) -> User:
    return create_user(seeded, "editor1", "Editor")


@pytest.fixture
def other_editor(seeded) -> User:
    return create_user(seeded, "editor2", "Editor")


@pytest.fixture
def advertiser(seeded) -> User:
    return create_user(seeded, "advertiser", "Advertiser")
