"""Endpoint a dashboard view calls to pick up its pending handoff."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.infrastructure.notifications import HandoffChannel
from app.interfaces.api.dependencies import get_handoff_channel
from app.interfaces.api.schemas import HandoffRead

router = APIRouter(prefix="/handoff", tags=["notifications"])


@router.get("/{target_view}", response_model=HandoffRead)
def take_handoff(
    target_view: str,
    channel: HandoffChannel = Depends(get_handoff_channel),
) -> HandoffRead:
    """Consume the payload waiting for ``target_view``; a second call gets 404."""

    message = channel.take(target_view)
    if message is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No pending handoff for this view",
        )
    return HandoffRead(
        target_view=message.target_view,
        notification_id=message.notification_id,
        payload=message.payload,
    )
