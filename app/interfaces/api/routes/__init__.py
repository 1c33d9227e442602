from fastapi import FastAPI

from .auth import router as auth_router
from .circulars import router as circulars_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(auth_router)
    app.include_router(circulars_router)
    app.include_router(notifications_router)
