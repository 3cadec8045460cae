from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, Text, ForeignKey,
    CheckConstraint, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression
from app.db.session import Base

RATING_COLUMNS = (
    "overall_rating",
    "communication_rating",
    "maintenance_rating",
    "property_condition_rating",
    "value_rating",
)


def _rating_check(column: str) -> CheckConstraint:
    return CheckConstraint(f"{column} >= 1 AND {column} <= 5", name=f"ck_reviews_{column}")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    overall_rating = Column(Integer, nullable=False) # 1-5
    communication_rating = Column(Integer, nullable=False)
    maintenance_rating = Column(Integer, nullable=False)
    property_condition_rating = Column(Integer, nullable=False)
    value_rating = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    review_text = Column(Text, nullable=False)
    move_in_date = Column(Date, nullable=True)
    move_out_date = Column(Date, nullable=True)
    would_recommend = Column(Boolean, nullable=False)
    anonymous = Column(Boolean, default=False, server_default=expression.false(), nullable=False)
    # Set by an external verification process, never by this service
    verified = Column(Boolean, default=False, server_default=expression.false(), nullable=False)
    helpful_count = Column(Integer, default=0, server_default="0", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    property = relationship("Property", back_populates="reviews")
    reviewer = relationship("User")
    response = relationship("LandlordResponse", back_populates="review", uselist=False, passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("property_id", "reviewer_id", name="uq_reviews_property_reviewer"),
        *(_rating_check(column) for column in RATING_COLUMNS),
    )


class LandlordResponse(Base):
    __tablename__ = "landlord_responses"

    id = Column(Integer, primary_key=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, unique=True)
    landlord_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    response_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    review = relationship("Review", back_populates="response")
    landlord = relationship("User")


# Helpfulness votes; no endpoint writes these yet
class ReviewHelpfulness(Base):
    __tablename__ = "review_helpfulness"

    id = Column(Integer, primary_key=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_helpful = Column(Boolean, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("review_id", "user_id", name="uq_review_helpfulness_review_user"),
    )


# Tables owned (created) by this service; properties and users are external
OWNED_TABLES = [Review.__table__, LandlordResponse.__table__, ReviewHelpfulness.__table__]
