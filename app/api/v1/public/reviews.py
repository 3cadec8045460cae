import logging
import re

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    BadRequest,
    Conflict,
    Forbidden,
    InternalError,
    NotFound,
    ValidationFailed,
    format_errors,
)
from app.db.session import get_db
from app.models.property import Property
from app.models.review import Review, LandlordResponse
from app.models.user import User
from app.schemas.common import ErrorResponse, ValidationErrorResponse, DuplicateReviewError, Pagination
from app.schemas.review import (
    ReviewCreate,
    ReviewSearchParams,
    LandlordResponseCreate,
    Review as ReviewSchema,
    ReviewCreated,
    ReviewListItem,
    ReviewSearchResult,
    LandlordResponse as LandlordResponseSchema,
    LandlordResponseCreated,
    ReviewStatsResult,
    SubRatings,
    Ratings,
    PropertySummary,
    ReviewerSummary,
    ResponseSummary,
)
from app.utils.review_queries import search_reviews, page_numbers, review_statistics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])

RENTER_ROLE = "renter"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_search_params(request: Request) -> ReviewSearchParams:
    """Validate the raw query string; unknown parameters are rejected."""
    try:
        return ReviewSearchParams.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise ValidationFailed(format_errors(e.errors()), error="Invalid search parameters")


def _existing_review_id(db: Session, property_id: int, reviewer_id: int):
    row = (
        db.query(Review.id)
        .filter(Review.property_id == property_id, Review.reviewer_id == reviewer_id)
        .first()
    )
    return row.id if row else None


def _existing_response_id(db: Session, review_id: int):
    row = db.query(LandlordResponse.id).filter(LandlordResponse.review_id == review_id).first()
    return row.id if row else None


def _parse_review_id(raw: str) -> int:
    # Plain ASCII digits only; int() alone would also take "1_0" or " 7"
    if not re.fullmatch(r"-?[0-9]+", raw):
        raise BadRequest("Invalid review ID", "Review ID must be a number")
    return int(raw)


def _duplicate_review(review_id: int) -> Conflict:
    return Conflict(
        "Review already exists",
        "You have already reviewed this property",
        existing_review_id=review_id,
    )


def _serialize_review(review: Review) -> ReviewSchema:
    return ReviewSchema(
        id=review.id,
        property_id=review.property_id,
        reviewer_id=review.reviewer_id,
        overall_rating=review.overall_rating,
        ratings=SubRatings(
            communication=review.communication_rating,
            maintenance=review.maintenance_rating,
            property_condition=review.property_condition_rating,
            value=review.value_rating,
        ),
        title=review.title,
        review_text=review.review_text,
        move_in_date=review.move_in_date,
        move_out_date=review.move_out_date,
        would_recommend=review.would_recommend,
        anonymous=review.anonymous,
        verified=review.verified,
        helpful_count=review.helpful_count,
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


def _serialize_list_item(row) -> ReviewListItem:
    """Shape one search row; reviewer identity is dropped for anonymous reviews."""
    review = row.Review
    reviewer = None
    if not review.anonymous:
        reviewer = ReviewerSummary(
            first_name=row.reviewer_first_name,
            last_name=row.reviewer_last_name,
        )
    landlord_response = None
    if row.landlord_response is not None:
        landlord_response = ResponseSummary(
            text=row.landlord_response,
            created_at=row.response_created_at,
        )

    return ReviewListItem(
        id=review.id,
        property=PropertySummary(
            id=review.property_id,
            address=row.address,
            city=row.city,
            state=row.state,
        ),
        reviewer=reviewer,
        ratings=Ratings(
            overall=review.overall_rating,
            communication=review.communication_rating,
            maintenance=review.maintenance_rating,
            property_condition=review.property_condition_rating,
            value=review.value_rating,
        ),
        title=review.title,
        review_text=review.review_text,
        move_in_date=review.move_in_date,
        move_out_date=review.move_out_date,
        would_recommend=review.would_recommend,
        anonymous=review.anonymous,
        verified=review.verified,
        helpful_count=review.helpful_count,
        created_at=review.created_at,
        landlord_response=landlord_response,
    )


# ---------------------------------------------------------------------------
# POST /reviews: create a review
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ReviewCreated,
    status_code=201,
    responses={
        400: {"model": ValidationErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": DuplicateReviewError},
        500: {"model": ErrorResponse},
    },
)
def create_review(data: ReviewCreate, db: Session = Depends(get_db)):
    """
    Submit ratings and a written review for a property.

    Rules:
    - Property and reviewer must exist.
    - Only users with the `renter` role may review.
    - One review per reviewer per property (409 carries `existing_review_id`).
    - `verified` and `helpful_count` always start at false / 0.
    """
    try:
        if db.get(Property, data.property_id) is None:
            raise NotFound("Property not found", "The specified property does not exist")

        reviewer = db.get(User, data.reviewer_id)
        if reviewer is None:
            raise NotFound("Reviewer not found", "The specified reviewer does not exist")
        if reviewer.role != RENTER_ROLE:
            raise Forbidden("Invalid user role", "Only renters can create reviews")

        existing_id = _existing_review_id(db, data.property_id, data.reviewer_id)
        if existing_id is not None:
            logger.info(
                "Duplicate review rejected: reviewer %d, property %d (existing %d)",
                data.reviewer_id, data.property_id, existing_id,
            )
            raise _duplicate_review(existing_id)

        review = Review(**data.model_dump(), verified=False, helpful_count=0)
        db.add(review)
        db.commit()
        db.refresh(review)
    except IntegrityError:
        # Lost a race against a concurrent insert for the same pair
        db.rollback()
        existing_id = _existing_review_id(db, data.property_id, data.reviewer_id)
        if existing_id is None:
            logger.exception("Error creating review")
            raise InternalError("Failed to create review")
        raise _duplicate_review(existing_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating review")
        raise InternalError("Failed to create review")

    logger.info("Created review %d for property %d", review.id, review.property_id)
    return ReviewCreated(review=_serialize_review(review))


# ---------------------------------------------------------------------------
# GET /reviews: search and filter
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=ReviewSearchResult,
    responses={400: {"model": ValidationErrorResponse}, 500: {"model": ErrorResponse}},
)
def list_reviews(
    params: ReviewSearchParams = Depends(get_search_params),
    db: Session = Depends(get_db),
):
    """
    Search reviews. All filters are optional and combined with AND.

    Query parameters: `property_id`, `landlord_id`, `min_rating`, `max_rating`,
    `sort_by` (newest | oldest | rating_high | rating_low | most_helpful),
    `limit` (1-50, default 20), `offset` (default 0).
    """
    try:
        rows, total = search_reviews(db, params)
    except SQLAlchemyError:
        logger.exception("Error searching reviews")
        raise InternalError("Failed to search reviews")

    return ReviewSearchResult(
        reviews=[_serialize_list_item(row) for row in rows],
        pagination=Pagination(**page_numbers(total, params.limit, params.offset)),
    )


# ---------------------------------------------------------------------------
# POST /reviews/{id}/response: landlord response
# ---------------------------------------------------------------------------


@router.post(
    "/{review_id}/response",
    response_model=LandlordResponseCreated,
    status_code=201,
    responses={
        400: {"model": ValidationErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def respond_to_review(
    review_id: str,
    data: LandlordResponseCreate,
    db: Session = Depends(get_db),
):
    """Post the property owner's single response to a review."""
    review_pk = _parse_review_id(review_id)

    try:
        target = (
            db.query(Review.id, Property.landlord_id.label("property_landlord_id"))
            .join(Property, Property.id == Review.property_id)
            .filter(Review.id == review_pk)
            .first()
        )
        if target is None:
            raise NotFound("Review not found", "The specified review does not exist")

        if target.property_landlord_id != data.landlord_id:
            logger.warning(
                "Landlord %d attempted to respond to review %d they do not own",
                data.landlord_id, review_pk,
            )
            raise Forbidden("Unauthorized", "Only the property owner can respond to this review")

        if _existing_response_id(db, review_pk) is not None:
            raise Conflict("Response already exists", "A response to this review already exists")

        response = LandlordResponse(
            review_id=review_pk,
            landlord_id=data.landlord_id,
            response_text=data.response_text,
        )
        db.add(response)
        db.commit()
        db.refresh(response)
    except IntegrityError:
        db.rollback()
        raise Conflict("Response already exists", "A response to this review already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating landlord response")
        raise InternalError("Failed to create response")

    logger.info("Landlord %d responded to review %d", data.landlord_id, review_pk)
    return LandlordResponseCreated(response=LandlordResponseSchema.model_validate(response))


# ---------------------------------------------------------------------------
# GET /reviews/stats: aggregate statistics
# ---------------------------------------------------------------------------


@router.get("/stats", response_model=ReviewStatsResult, responses={500: {"model": ErrorResponse}})
def get_review_stats(db: Session = Depends(get_db)):
    """Totals, rates (whole percent) and average ratings across all reviews."""
    try:
        statistics = review_statistics(db)
    except SQLAlchemyError:
        logger.exception("Error fetching review statistics")
        raise InternalError("Failed to fetch review statistics")
    return ReviewStatsResult(statistics=statistics)
