from app.schemas.common import Pagination, ErrorResponse, ValidationErrorResponse, DuplicateReviewError
from app.schemas.review import (
    ReviewCreate, ReviewSearchParams, LandlordResponseCreate,
    Review, ReviewCreated, ReviewListItem, ReviewSearchResult,
    LandlordResponse, LandlordResponseCreated,
    AverageRatings, ReviewStatistics, ReviewStatsResult,
)
