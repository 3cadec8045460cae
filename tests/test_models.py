"""
Model definitions: mappers configure and the Postgres DDL carries the constraints.
"""

from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import configure_mappers
from sqlalchemy.schema import CreateTable

from app.db.base import Base
from app.models.review import Review, LandlordResponse, ReviewHelpfulness, OWNED_TABLES


def _ddl(model) -> str:
    return str(CreateTable(model.__table__).compile(dialect=postgresql.dialect()))


def test_mappers_configure():
    configure_mappers()
    assert {"reviews", "landlord_responses", "review_helpfulness", "properties", "users"} <= set(Base.metadata.tables)


def test_owned_tables_exclude_external():
    assert [t.name for t in OWNED_TABLES] == ["reviews", "landlord_responses", "review_helpfulness"]


def test_review_ddl_constraints():
    ddl = _ddl(Review)

    assert "UNIQUE (property_id, reviewer_id)" in ddl
    for column in ("overall_rating", "communication_rating", "value_rating"):
        assert f"CHECK ({column} >= 1 AND {column} <= 5)" in ddl
    assert "REFERENCES properties (id) ON DELETE CASCADE" in ddl
    assert "REFERENCES users (id) ON DELETE CASCADE" in ddl


def test_response_unique_per_review():
    ddl = _ddl(LandlordResponse)
    assert "UNIQUE (review_id)" in ddl


def test_helpfulness_unique_per_user():
    ddl = _ddl(ReviewHelpfulness)
    assert "UNIQUE (review_id, user_id)" in ddl
