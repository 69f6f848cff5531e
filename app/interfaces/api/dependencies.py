"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from app.application.use_cases.notifications import ActionDispatcher
from app.infrastructure.notifications import HandoffChannel, NotificationStore


def _state_attribute(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification services are not ready",
        )
    return value


def get_notification_store(request: Request) -> NotificationStore:
    """Return the store created for the running application."""

    return _state_attribute(request, "notification_store")


def get_handoff_channel(request: Request) -> HandoffChannel:
    """Return the channel views use to receive assign handoffs."""

    return _state_attribute(request, "handoff_channel")


def get_action_dispatcher(request: Request) -> ActionDispatcher:
    """Return the dispatcher bound to the application's store."""

    return _state_attribute(request, "action_dispatcher")
