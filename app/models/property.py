from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.db.session import Base

class Property(Base):
    """Read-only mapping of the externally managed properties table."""
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True)
    landlord_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)

    landlord = relationship("User")
    reviews = relationship("Review", back_populates="property", passive_deletes=True)
