from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import settings


def _connect_args() -> dict:
    # Managed Postgres in production only accepts TLS connections
    if settings.is_production and settings.assemble_db_url().startswith("postgresql"):
        return {"sslmode": "require"}
    return {}


# Create engine
# A single pooled engine is shared by every request; sessions are per request.
engine = create_engine(
    settings.assemble_db_url(),
    pool_pre_ping=True,
    connect_args=_connect_args(),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
