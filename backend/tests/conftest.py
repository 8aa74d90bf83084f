import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.dialects.sqlite import base as sqlite_base
from sqlalchemy.orm import sessionmaker

import rollcall.models  # noqa: F401 - register models with Base.metadata
from rollcall.core.database import Base, get_db
from rollcall.main import app as fastapi_app
from rollcall.models import User

# ---------------------------------------------------------------------------
# SQLite compatibility for PostgreSQL-specific types (JSONB, UUID)
# ---------------------------------------------------------------------------
sqlite_base.SQLiteTypeCompiler.visit_JSONB = lambda self, type_, **kw: self.visit_JSON(type_, **kw)

# In-memory SQLite for tests, no PostgreSQL needed. Foreign keys are switched
# on by the connect listener in rollcall.core.database.
TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """Provide a test database session."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_factory():
    """Factory for extra sessions on the test database, independent of ``db``."""
    return TestSessionLocal


@pytest.fixture
def client(db):
    """TestClient with overridden DB dependency."""

    def _override_get_db():
        try:
            yield db
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def _create_user(db, email: str, name: str | None = None, role: str = "USER") -> User:
    user = User(email=email, name=name or email.split("@")[0].title(), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db) -> User:
    """The user who creates forms and groups in most tests."""
    return _create_user(db, "instructor@example.com", "Instructor")


@pytest.fixture
def students(db) -> list[User]:
    return [_create_user(db, f"student{i}@example.com", f"Student {i}") for i in range(1, 6)]


@pytest.fixture
def outsider(db) -> User:
    return _create_user(db, "outsider@example.com", "Outsider")
