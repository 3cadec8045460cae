from sqlalchemy import Column, Integer, String
from app.db.session import Base

class User(Base):
    """Read-only mapping of the externally managed users table."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    role = Column(String(20), nullable=False) # renter, landlord
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
