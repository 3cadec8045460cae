from typing import List
from pydantic import BaseModel


# Pagination block returned by GET /reviews
class Pagination(BaseModel):
    total_count: int
    total_pages: int
    current_page: int
    limit: int
    offset: int
    has_next: bool
    has_previous: bool


# Error responses
class ErrorResponse(BaseModel):
    error: str
    message: str


class ValidationErrorResponse(BaseModel):
    error: str
    details: List[str]


class DuplicateReviewError(ErrorResponse):
    existing_review_id: int
