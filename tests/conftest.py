from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.property import Property
from app.models.review import Review
from app.models.user import User

RENTER_ID = 1
OTHER_RENTER_ID = 2
LANDLORD_ID = 10
OTHER_LANDLORD_ID = 11
PROPERTY_ID = 100
OTHER_PROPERTY_ID = 101


@pytest.fixture
def engine():
    # One in-memory database shared across threads (TestClient runs sync routes in a pool)
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db):
    """External users and properties the service reads but never writes."""
    db.add_all([
        User(id=RENTER_ID, role="renter", first_name="Jane", last_name="Doe"),
        User(id=OTHER_RENTER_ID, role="renter", first_name="Sam", last_name="Lee"),
        User(id=LANDLORD_ID, role="landlord", first_name="Lou", last_name="Lord"),
        User(id=OTHER_LANDLORD_ID, role="landlord", first_name="Ann", last_name="Other"),
    ])
    db.flush()
    db.add_all([
        Property(id=PROPERTY_ID, landlord_id=LANDLORD_ID, address="1 Main St", city="Springfield", state="IL"),
        Property(id=OTHER_PROPERTY_ID, landlord_id=OTHER_LANDLORD_ID, address="9 Elm Ave", city="Shelbyville", state="IL"),
    ])
    db.commit()
    return db


def review_payload(**overrides) -> dict:
    payload = {
        "property_id": PROPERTY_ID,
        "reviewer_id": RENTER_ID,
        "overall_rating": 5,
        "communication_rating": 4,
        "maintenance_rating": 5,
        "property_condition_rating": 4,
        "value_rating": 5,
        "title": "Great place!!!!",  # 15 chars
        "review_text": "Quiet building, responsive landlord, and fair rent overall!!",  # 60 chars
        "would_recommend": True,
    }
    payload.update(overrides)
    return payload


_BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def add_review(db, minutes: int = 0, **overrides) -> Review:
    """Insert a review directly with a deterministic created_at."""
    fields = dict(
        property_id=PROPERTY_ID,
        reviewer_id=RENTER_ID,
        overall_rating=4,
        communication_rating=4,
        maintenance_rating=4,
        property_condition_rating=4,
        value_rating=4,
        title="A reasonable title",
        review_text="x" * 60,
        would_recommend=True,
        anonymous=False,
        verified=False,
        helpful_count=0,
        created_at=_BASE_TIME + timedelta(minutes=minutes),
    )
    fields.update(overrides)
    review = Review(**fields)
    db.add(review)
    db.commit()
    db.refresh(review)
    return review
