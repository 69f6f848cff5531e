"""Endpoints and websocket handler for the admin notification feed."""

from __future__ import annotations

import logging
from datetime import timedelta

from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from app.application.use_cases.notifications import (
    ActionDispatcher,
    ActionOutcome,
    ContactOption,
    FeedFilter,
    PendingCounters,
    choose_by_channel,
    compose_feed,
)
from app.domain.entities import NotificationType
from app.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationStore,
    serialize_snapshot,
)
from app.interfaces.api.dependencies import get_action_dispatcher, get_notification_store
from app.interfaces.api.schemas import (
    ContactOptionRead,
    NotificationActionRequest,
    NotificationActionResult,
    NotificationFeedRead,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])

logger = logging.getLogger(__name__)


class _PanelSurface:
    """Collect the navigation requested by an action for the HTTP response."""

    def __init__(self) -> None:
        self.target_view: str | None = None
        self.closed = False

    def navigate(self, target_view: str) -> None:
        self.target_view = target_view

    def close(self) -> None:
        self.closed = True


def _option_to_schema(option: ContactOption | None) -> ContactOptionRead | None:
    if option is None:
        return None
    return ContactOptionRead(
        channel=option.channel, label=option.label, uri=option.uri, target=option.target
    )


def _outcome_to_schema(outcome: ActionOutcome, surface: _PanelSurface) -> NotificationActionResult:
    return NotificationActionResult(
        kind=outcome.kind,
        notification_id=outcome.notification_id,
        target_view=surface.target_view or outcome.target_view,
        close_panel=surface.closed,
        options=[_option_to_schema(option) for option in outcome.options],
        selected=_option_to_schema(outcome.selected),
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    store: NotificationStore = Depends(get_notification_store),
) -> list[NotificationRead]:
    """Return every stored notification, newest first."""

    return [NotificationRead.from_record(record) for record in store.get_all()]


@router.get("/feed", response_model=NotificationFeedRead)
def read_feed(
    active_filter: FeedFilter = Query(FeedFilter.ALL, alias="filter"),
    pending_staff_applications: int = Query(0, ge=0),
    pending_tapping_requests: int = Query(0, ge=0),
    pending_land_registrations: int = Query(0, ge=0),
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationFeedRead:
    """Return the merged feed for ``filter`` and the count for every tab."""

    counters = PendingCounters(
        staff_applications=pending_staff_applications,
        tapping_requests=pending_tapping_requests,
        land_registrations=pending_land_registrations,
    )
    feed = compose_feed(store.snapshot(), counters, active_filter)
    return NotificationFeedRead(
        filter=feed.active_filter.value,
        items=[NotificationRead.from_record(record) for record in feed.items],
        counts={key.value: value for key, value in feed.counts.items()},
        unread_count=feed.unread_count,
    )


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    store: NotificationStore = Depends(get_notification_store),
) -> UnreadCountRead:
    return UnreadCountRead(unread_count=store.get_unread_count())


@router.get("/recent", response_model=list[NotificationRead])
def list_recent_notifications(
    hours: int = Query(24, gt=0, le=24 * 365),
    store: NotificationStore = Depends(get_notification_store),
) -> list[NotificationRead]:
    """Return notifications created within the last ``hours`` hours."""

    return [
        NotificationRead.from_record(record)
        for record in store.recent(timedelta(hours=hours))
    ]


@router.get("/high-priority", response_model=list[NotificationRead])
def list_high_priority_notifications(
    store: NotificationStore = Depends(get_notification_store),
) -> list[NotificationRead]:
    """Return unread notifications flagged as high priority."""

    return [NotificationRead.from_record(record) for record in store.high_priority_unread()]


@router.get("/types/{notification_type}", response_model=list[NotificationRead])
def list_notifications_by_type(
    notification_type: NotificationType,
    store: NotificationStore = Depends(get_notification_store),
) -> list[NotificationRead]:
    return [NotificationRead.from_record(record) for record in store.by_type(notification_type)]


@router.post("/read-all", response_model=UnreadCountRead)
def mark_all_notifications_read(
    store: NotificationStore = Depends(get_notification_store),
) -> UnreadCountRead:
    store.mark_all_as_read()
    return UnreadCountRead(unread_count=store.get_unread_count())


@router.post("/{notification_id}/read", response_model=UnreadCountRead)
def mark_notification_read(
    notification_id: str,
    store: NotificationStore = Depends(get_notification_store),
) -> UnreadCountRead:
    """Mark a notification as read; unknown identifiers are ignored."""

    store.mark_as_read(notification_id)
    return UnreadCountRead(unread_count=store.get_unread_count())


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    store.delete(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def clear_notifications(
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    store.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{notification_id}/actions", response_model=NotificationActionResult)
def dispatch_notification_action(
    notification_id: str,
    payload: NotificationActionRequest,
    store: NotificationStore = Depends(get_notification_store),
    dispatcher: ActionDispatcher = Depends(get_action_dispatcher),
) -> NotificationActionResult:
    """Run the side effect of ``payload.action`` and mark the notification read."""

    record = store.get(notification_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    declared = {action.action_key for action in record.actions}
    if payload.action not in declared:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Action '{payload.action}' is not offered by this notification",
        )

    surface = _PanelSurface()
    outcome = dispatcher.dispatch(
        record,
        payload.action,
        surface=surface,
        choose_channel=choose_by_channel(payload.channel),
    )
    return _outcome_to_schema(outcome, surface)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams store snapshots to an open panel."""

    state = websocket.app.state
    manager: NotificationConnectionManager | None = getattr(state, "connection_manager", None)
    store: NotificationStore | None = getattr(state, "notification_store", None)
    if manager is None or store is None:
        await websocket.close(code=1011)
        return

    await manager.connect(websocket)
    try:
        # Store calls run in worker threads; the store lock must never block the loop.
        snapshot = await to_thread.run_sync(store.snapshot)
        await websocket.send_json({"type": "init", "data": serialize_snapshot(snapshot)})
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except Exception:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in ids:
                        await to_thread.run_sync(store.mark_as_read, str(notification_id))
                continue
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception:  # pragma: no cover - unexpected socket failure
        manager.disconnect(websocket)
        logger.exception("Notification websocket closed unexpectedly")
        raise
