from fastapi import APIRouter

# Service: health, diagnostics, table setup
from app.api.v1.public.service import router as service_router

# Public: reviews
from app.api.v1.public.reviews import router as reviews_router

api_router = APIRouter()

# --- Service ---
api_router.include_router(service_router)

# --- Public: reviews ---
api_router.include_router(reviews_router)
