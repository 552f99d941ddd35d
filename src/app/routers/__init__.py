"""API routers for the car feed."""

from app.routers.cars import router as cars_router
from app.routers.ws import router as ws_router

__all__ = ["cars_router", "ws_router"]
