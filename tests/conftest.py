import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.rate_limit import limiter
from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.user import User, GuideProfile, TravelerProfile
from app.models.availability_slot import AvailabilitySlot
from app.models.reservation import Reservation, Booking
from app.utils.slots import slot_end

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the lifespan (database bootstrap, cleanup loop) stays off
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    role = user.role.value if hasattr(user.role, "value") else user.role
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id), role=role)}"}


def next_hour(hours_ahead: int = 24) -> datetime:
    now = datetime.now(timezone.utc) + timedelta(hours=hours_ahead)
    return now.replace(minute=0, second=0, microsecond=0)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="traveler", display_name=None, status="active"):
        counter["n"] += 1
        user = User(
            email=f"{role}{counter['n']}@example.com",
            role=role,
            display_name=display_name or f"{role.title()} {counter['n']}",
            status=status,
        )
        db.add(user)
        db.flush()
        if role == "traveler":
            db.add(TravelerProfile(uid=user.id, display_name=user.display_name))
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_guide(db, make_user):
    def _make(base_rate_hour=None, prices=None, handle=None):
        user = make_user(role="guide")
        db.add(GuideProfile(
            uid=user.id,
            handle=handle or f"guide-{user.id.hex[:8]}",
            display_name=user.display_name,
            city="Barcelona",
            city_slug="barcelona",
            country="Spain",
            timezone="Europe/Madrid",
            bio="",
            languages=["English"],
            themes=["History"],
            photos=[],
            prices=prices or {"h4": 100, "h6": 140, "h8": 180, "currency": "EUR"},
            base_rate_hour=base_rate_hour,
            max_group_size=6,
            rating_avg=0,
            rating_count=0,
        ))
        db.commit()
        return user

    return _make


@pytest.fixture
def make_slot(db):
    def _make(guide, start_time=None, duration_hours=4, status="open"):
        start_time = start_time or next_hour()
        slot = AvailabilitySlot(
            guide_id=guide.id,
            start_time=start_time,
            end_time=slot_end(start_time, duration_hours),
            duration_hours=duration_hours,
            status=status,
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make


@pytest.fixture
def make_reservation(db):
    def _make(traveler, guide, status="pending", slot=None):
        reservation = Reservation(
            traveler_id=traveler.id,
            guide_id=guide.id,
            slot_id=slot.id if slot else None,
            status=status,
            currency="USD",
            subtotal=140,
            traveler_fee_pct=10,
            platform_commission_pct=25,
            platform_commission_min_usd=25,
            total=154,
        )
        db.add(reservation)
        db.flush()
        db.add(Booking(
            reservation_id=reservation.id,
            traveler_id=traveler.id,
            guide_id=guide.id,
            sessions=[{"date": "2030-05-01", "start_time": "10:00:00", "duration_hours": 4}],
            meeting={"type": "hotel", "address": "Carrer de Mallorca 1"},
            status=status if status != "refunded" else "cancelled",
        ))
        db.commit()
        db.refresh(reservation)
        return reservation

    return _make


@pytest.fixture
def traveler(make_user):
    return make_user(role="traveler")


@pytest.fixture
def guide(make_guide):
    return make_guide(base_rate_hour=35)


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")
