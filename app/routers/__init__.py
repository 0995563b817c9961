"""API routers."""

from app.routers.auth import router as auth_router
from app.routers.listings import hotels_router, trips_router, vehicles_router
from app.routers.reviews import router as reviews_router

__all__ = ["auth_router", "reviews_router", "trips_router", "hotels_router", "vehicles_router"]
