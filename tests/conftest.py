"""
Shared fixtures: in-memory SQLite database wired into the app, plus helpers
to create recruiters with a given subscription.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.db.models.user import User
from app.db.models.subscription import Subscription
from app.core.rate_limit import reset_rate_limits
from app.core.security import hash_password, create_access_token


TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_db():
    """Fresh tables and a clean app for every test."""
    Base.metadata.create_all(bind=test_engine)
    app.dependency_overrides[get_db] = override_get_db
    reset_rate_limits()
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_recruiter(db_session):
    """Create a recruiter with a subscription and return (user, auth headers)."""
    def _make(email="recruiter@example.com", plan_id="basico", status="active"):
        user = User(
            full_name="Test Recruiter",
            email=email,
            password_hash=hash_password("testpass123"),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        if plan_id is not None:
            db_session.add(Subscription(user_id=user.id, plan_id=plan_id, status=status))
            db_session.commit()
        token = create_access_token({"sub": user.email})
        return user, {"Authorization": f"Bearer {token}"}

    return _make
