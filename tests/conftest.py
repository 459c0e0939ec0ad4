"""
Test configuration and fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salonhub.main import app
from salonhub.core.database import Base, get_db, register_sqlite_functions
from salonhub.core.security import get_password_hash
from salonhub.models.models import User, UserFollow
from salonhub.schemas.schemas import SalonCreate
from salonhub.services.salon_service import create_salon


# Create an in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", register_sqlite_functions)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with overridden database dependency"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app=app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_user(db, username, name=None, created_offset_minutes=0, **fields):
    """Insert a user directly; later offsets mean a more recently created account"""
    user = User(
        username=username,
        name=name or username.capitalize(),
        email=fields.pop("email", f"{username}@test.com"),
        created_at=BASE_TIME + timedelta(minutes=created_offset_minutes),
        **fields
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def follow(db, follower, following):
    """Insert a follow edge directly"""
    db.add(UserFollow(follower_id=follower.id, following_id=following.id))
    db.commit()


@pytest.fixture
def test_user(db):
    """The authenticated caller in API tests"""
    return create_user(
        db,
        "alice",
        name="Alice Walker",
        hashed_password=get_password_hash("alicepass123"),
    )


@pytest.fixture
def other_users(db):
    """Three more users created one minute apart (bob oldest, dave newest)"""
    return {
        "bob": create_user(db, "bob", name="Bob Stone", created_offset_minutes=1),
        "carol": create_user(db, "carol", name="Carol Bobbins", created_offset_minutes=2),
        "dave": create_user(db, "dave", name="Dave Green", created_offset_minutes=3),
    }


@pytest.fixture
def user_token(client, test_user):
    """Get an access token for the test user"""
    response = client.post(
        "/api/v1/auth/login-email",
        json={
            "email": "alice@test.com",
            "password": "alicepass123"
        }
    )
    if response.status_code == 200:
        return response.json()["access_token"]
    return None


@pytest.fixture
def auth_headers(user_token):
    """Get authorization headers for the test user"""
    return {"Authorization": f"Bearer {user_token}"}


def salon_payload(name="Test Salon", latitude=12.0, longitude=77.0, **overrides):
    """A valid salon creation body"""
    payload = {
        "name": name,
        "images": ["https://example.com/salon.jpg"],
        "location_name": "MG Road",
        "description": "A test salon",
        "location": {"latitude": latitude, "longitude": longitude},
        "service_categories": [
            {
                "name": "Hair",
                "services": [
                    {"service_id": "s1", "title": "Haircut", "price": "₹100", "duration": 30},
                    {"service_id": "s2", "title": "Hair Spa", "price": "₹200", "duration": 60},
                ],
            },
            {
                "name": "Nails",
                "services": [
                    {"service_id": "s3", "title": "Manicure", "price": "₹300"},
                ],
            },
        ],
        "stylists": [
            {"profile_photo": "https://example.com/stylist.jpg", "name": "Asha", "rating": 4.5},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_salon(db):
    """Factory creating salons through the service layer"""
    def _make_salon(**kwargs):
        return create_salon(db, SalonCreate(**salon_payload(**kwargs)))
    return _make_salon


@pytest.fixture
def test_salon(make_salon):
    """Create a test salon"""
    return make_salon()


@pytest.fixture
def make_user(db):
    """Factory fixture wrapping ``create_user``"""
    def _make_user(username, **kwargs):
        return create_user(db, username, **kwargs)
    return _make_user


@pytest.fixture
def make_follow(db):
    """Factory fixture wrapping ``follow``"""
    def _make_follow(follower, following):
        follow(db, follower, following)
    return _make_follow


@pytest.fixture
def salon_body():
    """Builder for salon creation request bodies"""
    return salon_payload
