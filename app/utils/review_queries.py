from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from sqlalchemy import and_, case, false, func, true
from sqlalchemy.orm import Query, Session

from app.models.property import Property
from app.models.review import Review, LandlordResponse
from app.models.user import User
from app.schemas.review import ReviewSearchParams, ReviewStatistics, AverageRatings


# Primary ordering per sort mode; every mode falls back to created_at
SORT_ORDERINGS = {
    "newest": (Review.created_at.desc(), Review.id.desc()),
    "oldest": (Review.created_at.asc(), Review.id.asc()),
    "rating_high": (Review.overall_rating.desc(), Review.created_at.desc(), Review.id.desc()),
    "rating_low": (Review.overall_rating.asc(), Review.created_at.desc(), Review.id.desc()),
    "most_helpful": (Review.helpful_count.desc(), Review.created_at.desc(), Review.id.desc()),
}


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def search_filters(params: ReviewSearchParams) -> list:
    """Conjunctive filters for the fields that were supplied; absent fields add nothing."""
    filters = []
    if params.property_id is not None:
        filters.append(Review.property_id == params.property_id)
    if params.landlord_id is not None:
        filters.append(Property.landlord_id == params.landlord_id)
    if params.min_rating is not None:
        filters.append(Review.overall_rating >= params.min_rating)
    if params.max_rating is not None:
        filters.append(Review.overall_rating <= params.max_rating)
    return filters


def _base(db: Session, *entities) -> Query:
    """Reviews joined to their property (landlord filter needs it)."""
    return db.query(*entities).select_from(Review).join(Property, Property.id == Review.property_id)


def page_query(db: Session, params: ReviewSearchParams) -> Query:
    """
    One page of matching reviews with property, reviewer and landlord response.

    The reviewer join only matches non-anonymous reviews, so anonymous rows
    come back with NULL names. limit and offset are bound like every other value.
    """
    return (
        _base(
            db,
            Review,
            Property.address.label("address"),
            Property.city.label("city"),
            Property.state.label("state"),
            User.first_name.label("reviewer_first_name"),
            User.last_name.label("reviewer_last_name"),
            LandlordResponse.response_text.label("landlord_response"),
            LandlordResponse.created_at.label("response_created_at"),
        )
        .outerjoin(User, and_(User.id == Review.reviewer_id, Review.anonymous == false()))
        .outerjoin(LandlordResponse, LandlordResponse.review_id == Review.id)
        .filter(*search_filters(params))
        .order_by(*SORT_ORDERINGS[params.sort_by])
        .limit(params.limit)
        .offset(params.offset)
    )


def count_query(db: Session, params: ReviewSearchParams) -> Query:
    """Total matches for the same filters, ignoring limit/offset."""
    return _base(db, func.count(Review.id)).filter(*search_filters(params))


def search_reviews(db: Session, params: ReviewSearchParams) -> Tuple[List, int]:
    """Return (rows, total_count). Both queries run in the caller's session."""
    total = count_query(db, params).scalar() or 0
    rows = page_query(db, params).all()
    return rows, int(total)


def page_numbers(total_count: int, limit: int, offset: int) -> dict:
    """Pagination block: 1-indexed current page and ceil(total / limit) pages."""
    total_pages = -(-total_count // limit)
    current_page = offset // limit + 1
    return {
        "total_count": total_count,
        "total_pages": total_pages,
        "current_page": current_page,
        "limit": limit,
        "offset": offset,
        "has_next": current_page < total_pages,
        "has_previous": current_page > 1,
    }


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def _round_half_up(value, places: int = 0) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _rate(count: int, total: int) -> int:
    if not total:
        return 0
    return int(_round_half_up(Decimal(count) * 100 / total))


def _average(value) -> Optional[float]:
    if value is None:
        return None
    return float(_round_half_up(value, 1))


def review_statistics(db: Session) -> ReviewStatistics:
    """
    Aggregate every review in a single pass.

    Rates are whole percentages and are 0 on an empty table; averages are
    rounded to one decimal place and are None on an empty table.
    """
    s = (
        db.query(
            func.count(Review.id).label("total_reviews"),
            func.count(case((Review.verified == true(), 1))).label("verified_reviews"),
            func.avg(Review.overall_rating).label("avg_overall"),
            func.avg(Review.communication_rating).label("avg_communication"),
            func.avg(Review.maintenance_rating).label("avg_maintenance"),
            func.avg(Review.property_condition_rating).label("avg_property_condition"),
            func.avg(Review.value_rating).label("avg_value"),
            func.count(case((Review.would_recommend == true(), 1))).label("would_recommend_count"),
            func.count(case((Review.anonymous == true(), 1))).label("anonymous_reviews"),
            func.count(Review.property_id.distinct()).label("properties_reviewed"),
        )
        .one()
    )

    total = int(s.total_reviews or 0)
    return ReviewStatistics(
        total_reviews=total,
        verified_reviews=int(s.verified_reviews or 0),
        verification_rate=_rate(s.verified_reviews or 0, total),
        average_ratings=AverageRatings(
            overall=_average(s.avg_overall),
            communication=_average(s.avg_communication),
            maintenance=_average(s.avg_maintenance),
            property_condition=_average(s.avg_property_condition),
            value=_average(s.avg_value),
        ),
        recommendation_rate=_rate(s.would_recommend_count or 0, total),
        anonymous_rate=_rate(s.anonymous_reviews or 0, total),
        properties_reviewed=int(s.properties_reviewed or 0),
    )
