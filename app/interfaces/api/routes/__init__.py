from fastapi import FastAPI

from .handoff import router as handoff_router
from .notification_events import router as notification_events_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notifications_router)
    app.include_router(notification_events_router)
    app.include_router(handoff_router)
