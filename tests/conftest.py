import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.models.base import Base
from app.config import settings
from app.core.security import hash_password
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.role import UserRole
from app.models.tenant import Tenant
from app.models.user import User
from app.models.project import Project
from app.models.task import Task
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "secret123"
# Hash once; bcrypt is deliberately slow
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user: User, expired: bool = False, role: str | None = None) -> str:
    """
    Generate JWT token for a user.

    Args:
        user: User whose id/tenant go into the claims
        expired: If True, create expired token
        role: Override the role claim (the server ignores it in favour of the stored role)

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {
        "sub": str(user.id),
        "tenant_id": user.tenant_id,
        "role": role or user.role.value,
        "exp": exp,
        "iat": datetime.now(UTC),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def headers_for(user: User) -> dict:
    """Authorization headers for a user"""
    return {"Authorization": f"Bearer {create_test_token(user)}"}


def make_user(db, tenant: Tenant, email: str, name: str, role: UserRole = UserRole.MEMBER) -> User:
    user = User(
        tenant_id=tenant.id,
        email=email,
        name=name,
        password_hash=TEST_PASSWORD_HASH,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def tenant_a(db_session):
    tenant = Tenant(name="Acme", subdomain="acme")
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def tenant_b(db_session):
    tenant = Tenant(name="Globex", subdomain="globex")
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def admin_a(db_session, tenant_a):
    """Only ADMIN of tenant A"""
    return make_user(db_session, tenant_a, "alice@acme.example.com", "Alice", UserRole.ADMIN)


@pytest.fixture
def member_a(db_session, tenant_a):
    return make_user(db_session, tenant_a, "bob@acme.example.com", "Bob", UserRole.MEMBER)


@pytest.fixture
def admin_b(db_session, tenant_b):
    return make_user(db_session, tenant_b, "gina@globex.example.com", "Gina", UserRole.ADMIN)


@pytest.fixture
def admin_a_headers(admin_a):
    return headers_for(admin_a)


@pytest.fixture
def member_a_headers(member_a):
    return headers_for(member_a)


@pytest.fixture
def admin_b_headers(admin_b):
    return headers_for(admin_b)


@pytest.fixture
def project_a(db_session, tenant_a):
    project = Project(tenant_id=tenant_a.id, name="Alpha", description="First project")
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project


@pytest.fixture
def project_b(db_session, tenant_b):
    project = Project(tenant_id=tenant_b.id, name="Beta")
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project


@pytest.fixture
def task_a(db_session, project_a, member_a):
    task = Task(
        project_id=project_a.id,
        title="Write docs",
        description="Initial draft",
        assignee_id=member_a.id,
        due_date=datetime(2030, 1, 15, 12, 0),
    )
    db_session.add(task)
    db_session.commit()
    db_session.refresh(task)
    return task
