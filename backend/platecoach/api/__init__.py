from fastapi import APIRouter

from .analyze import router as analyze_router
from .food_logs import router as food_logs_router
from .health import router as health_router

api_router = APIRouter()
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(analyze_router, tags=["analysis"])
api_router.include_router(food_logs_router, tags=["food-logs"])

__all__ = ["api_router"]
