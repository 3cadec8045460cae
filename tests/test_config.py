"""
Tests for settings: database URL assembly.
"""

import pytest

from app.core.config import Settings, with_psycopg2_driver


@pytest.mark.parametrize("url, expected", [
    ("postgresql://u:p@db:5432/reviews", "postgresql+psycopg2://u:p@db:5432/reviews"),
    ("postgres://u:p@db/reviews", "postgresql+psycopg2://u:p@db/reviews"),
    ("postgresql+psycopg2://u:p@db/reviews", "postgresql+psycopg2://u:p@db/reviews"),
    ("sqlite://", "sqlite://"),
])
def test_bare_postgres_urls_pinned_to_psycopg2(url, expected):
    assert with_psycopg2_driver(url) == expected


def test_database_url_is_pinned():
    configured = Settings(DATABASE_URL="postgresql://reviews@db/reviews")
    assert configured.assemble_db_url() == "postgresql+psycopg2://reviews@db/reviews"


def test_url_from_parts_uses_psycopg2():
    parts = Settings(
        DATABASE_URL=None,
        POSTGRES_USER="svc",
        POSTGRES_PASSWORD="pw",
        POSTGRES_SERVER="db",
        POSTGRES_PORT=5433,
        POSTGRES_DB="reviews",
    )
    assert parts.assemble_db_url() == "postgresql+psycopg2://svc:pw@db:5433/reviews"
