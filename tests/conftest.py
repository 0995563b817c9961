"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.models.listing import Hotel, Trip, Vehicle  # noqa: E402
from app.models.review import Review  # noqa: E402, F401
from app.models.user import User  # noqa: E402, F401
from app.services.auth import AuthService  # noqa: E402
from app.services.jwt import get_jwt_service  # noqa: E402


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


def _make_user(db: Session, name: str, email: str, role: str, verified: bool = True) -> dict:
    user = AuthService().register(db, name, email, "password123", role)
    if user.verified != verified:
        user.verified = verified
        db.commit()
    token = get_jwt_service().create_token(user_id=user.id, role=user.role)
    return {"user_id": user.id, "email": user.email, "name": user.name, "role": user.role, "token": token}


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Create a verified traveller and return its data and token."""
    return _make_user(db_session, "Test User", "test@example.com", "user")


@pytest.fixture(name="other_user")
def other_user_fixture(db_session: Session):
    return _make_user(db_session, "Other User", "other@example.com", "user")


@pytest.fixture(name="admin_user")
def admin_user_fixture(db_session: Session):
    """Create a verified admin."""
    return _make_user(db_session, "Admin", "admin@example.com", "admin")


@pytest.fixture(name="car_owner")
def car_owner_fixture(db_session: Session):
    """Create a car owner already verified by an admin."""
    return _make_user(db_session, "Car Owner", "owner@example.com", "car_owner")


@pytest.fixture(name="trip")
def trip_fixture(db_session: Session) -> Trip:
    trip = Trip(
        title="Lake Tour",
        description="Three days around the lake",
        destination="Bahir Dar",
        duration=3,
        price=450.0,
        trip_type="weekly",
        start_date=date(2026, 11, 1),
        end_date=date(2026, 11, 4),
        max_participants=12,
    )
    db_session.add(trip)
    db_session.commit()
    db_session.refresh(trip)
    return trip


@pytest.fixture(name="hotel")
def hotel_fixture(db_session: Session, admin_user: dict) -> Hotel:
    hotel = Hotel(
        owner_id=admin_user["user_id"],
        name="Blue Nile Lodge",
        description="Lakeside rooms",
        city="Bahir Dar",
        price_per_night=80.0,
        amenities=["wifi"],
    )
    db_session.add(hotel)
    db_session.commit()
    db_session.refresh(hotel)
    return hotel


@pytest.fixture(name="vehicle")
def vehicle_fixture(db_session: Session, car_owner: dict) -> Vehicle:
    vehicle = Vehicle(
        owner_id=car_owner["user_id"],
        make="Toyota",
        model="Land Cruiser",
        year=2021,
        vehicle_type="suv",
        seats=7,
        price_per_day=120.0,
        features=["4x4"],
        status="active",
    )
    db_session.add(vehicle)
    db_session.commit()
    db_session.refresh(vehicle)
    return vehicle
