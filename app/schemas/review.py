from typing import Annotated, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import date, datetime

from app.schemas.common import Pagination

Rating = Annotated[int, Field(ge=1, le=5)]

SortBy = Literal["newest", "oldest", "rating_high", "rating_low", "most_helpful"]


# Review: Create (POST /reviews)
class ReviewCreate(BaseModel):
    property_id: int
    reviewer_id: int
    overall_rating: Rating
    communication_rating: Rating
    maintenance_rating: Rating
    property_condition_rating: Rating
    value_rating: Rating
    title: Annotated[str, Field(min_length=10, max_length=200)]
    review_text: Annotated[str, Field(min_length=50, max_length=2000)]
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    would_recommend: bool
    anonymous: bool = False

    class Config:
        extra = "forbid"

    @field_validator("move_in_date", mode="before")
    @classmethod
    def move_in_not_null(cls, v):
        # Optional, but an explicit null is not a date; move_out_date may be null
        if v is None:
            raise ValueError("move_in_date must be a date")
        return v

    @field_validator("would_recommend", "anonymous", mode="before")
    @classmethod
    def strict_boolean(cls, v):
        # true/false or their string forms only; no "yes", "on" or 1
        if isinstance(v, bool):
            return v
        if isinstance(v, str) and v.lower() in ("true", "false"):
            return v.lower() == "true"
        raise ValueError("must be a boolean")

    @field_validator("move_in_date")
    @classmethod
    def move_in_not_in_future(cls, v):
        if v is not None and v > date.today():
            raise ValueError("move_in_date must not be in the future")
        return v

    @model_validator(mode="after")
    def move_out_not_before_move_in(self):
        if (
            self.move_in_date is not None
            and self.move_out_date is not None
            and self.move_out_date < self.move_in_date
        ):
            raise ValueError("move_out_date must be on or after move_in_date")
        return self


# Review search: query string (GET /reviews)
class ReviewSearchParams(BaseModel):
    property_id: Optional[int] = None
    landlord_id: Optional[int] = None
    min_rating: Optional[Rating] = None
    max_rating: Optional[Rating] = None
    sort_by: SortBy = "newest"
    limit: Annotated[int, Field(ge=1, le=50)] = 20
    offset: Annotated[int, Field(ge=0)] = 0

    class Config:
        extra = "forbid"

    @model_validator(mode="after")
    def max_not_below_min(self):
        if (
            self.min_rating is not None
            and self.max_rating is not None
            and self.max_rating < self.min_rating
        ):
            raise ValueError("max_rating must be greater than or equal to min_rating")
        return self


# Landlord response: Create (POST /reviews/{id}/response)
class LandlordResponseCreate(BaseModel):
    landlord_id: int
    response_text: Annotated[str, Field(min_length=20, max_length=1000)]
    # Accepted alongside the body; the path id is the one used
    review_id: Optional[int] = None

    class Config:
        extra = "forbid"


# Nested response objects
class SubRatings(BaseModel):
    communication: int
    maintenance: int
    property_condition: int
    value: int


class Ratings(SubRatings):
    overall: int


class PropertySummary(BaseModel):
    id: int
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


class ReviewerSummary(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ResponseSummary(BaseModel):
    text: str
    created_at: Optional[datetime] = None


# Review: Full record (POST /reviews)
class Review(BaseModel):
    id: int
    property_id: int
    reviewer_id: int
    overall_rating: int
    ratings: SubRatings
    title: str
    review_text: str
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    would_recommend: bool
    anonymous: bool
    verified: bool
    helpful_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewCreated(BaseModel):
    success: bool = True
    message: str = "Review created successfully"
    review: Review


# Review: Search result row (GET /reviews)
class ReviewListItem(BaseModel):
    id: int
    property: PropertySummary
    # Always None for anonymous reviews
    reviewer: Optional[ReviewerSummary] = None
    ratings: Ratings
    title: str
    review_text: str
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    would_recommend: bool
    anonymous: bool
    verified: bool
    helpful_count: int
    created_at: Optional[datetime] = None
    landlord_response: Optional[ResponseSummary] = None


class ReviewSearchResult(BaseModel):
    success: bool = True
    reviews: List[ReviewListItem]
    pagination: Pagination


# Landlord response: record
class LandlordResponse(BaseModel):
    id: int
    review_id: int
    landlord_id: int
    response_text: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LandlordResponseCreated(BaseModel):
    success: bool = True
    message: str = "Response added successfully"
    response: LandlordResponse


# Statistics (GET /reviews/stats)
class AverageRatings(BaseModel):
    overall: Optional[float] = None
    communication: Optional[float] = None
    maintenance: Optional[float] = None
    property_condition: Optional[float] = None
    value: Optional[float] = None


class ReviewStatistics(BaseModel):
    total_reviews: int
    verified_reviews: int
    verification_rate: int
    average_ratings: AverageRatings
    recommendation_rate: int
    anonymous_rate: int
    properties_reviewed: int


class ReviewStatsResult(BaseModel):
    success: bool = True
    statistics: ReviewStatistics
