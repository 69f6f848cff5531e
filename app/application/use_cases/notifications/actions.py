"""Carry out the action a user picked on a notification."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Protocol, Sequence, assert_never
from urllib.parse import quote

from app.domain.entities import (
    AcknowledgeAction,
    AssignAction,
    ContactAction,
    ContactChannel,
    NotificationRecord,
    NotificationType,
    resolve_action,
)
from app.infrastructure.notifications import HandoffChannel, HandoffMessage, NotificationStore

logger = logging.getLogger(__name__)

SIGNATURE = "RubberEco Admin Team"

_SUBJECT_LABELS = {
    NotificationType.TAPPER_REQUEST: "tapping request",
    NotificationType.SERVICE_REQUEST: "service request",
    NotificationType.LAND_LEASE: "land lease application",
    NotificationType.LAND_REGISTRATION: "land registration",
    NotificationType.TENANCY_OFFERING: "tenancy offering",
    NotificationType.LEAVE_REQUEST: "leave request",
    NotificationType.STAFF_REQUEST: "staff application",
}
_REFERENCE_KEYS = ("requestId", "applicationId", "registrationId", "offeringId")
_LOCATION_KEYS = ("farmLocation", "desiredLocation", "landLocation")


class PresentationSurface(Protocol):
    """The UI hosting the notification panel."""

    def navigate(self, target_view: str) -> None:
        ...

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class ContactOption:
    """One way of reaching the requester, ready to hand to the OS handler."""

    channel: ContactChannel
    label: str
    uri: str
    target: str = "_self"


ChannelChooser = Callable[[Sequence[ContactOption]], "ContactOption | None"]
LinkOpener = Callable[[str], Any]


@dataclass(frozen=True)
class ActionOutcome:
    """What the dispatcher did for a single action."""

    kind: str
    notification_id: str
    target_view: str | None = None
    options: tuple[ContactOption, ...] = field(default_factory=tuple)
    selected: ContactOption | None = None


def _first(data: Mapping[str, Any], keys: Sequence[str]) -> Any:
    return next((data[key] for key in keys if data.get(key)), None)


def build_contact_options(record: NotificationRecord) -> list[ContactOption]:
    """Return the call, email and WhatsApp links for ``record``'s requester.

    Values are interpolated as found in ``record.data``. A missing name,
    reference or location drops its clause from the message text.
    """

    data = record.data
    name = data.get("farmerName") or data.get("staffName")
    email = data.get("farmerEmail") or data.get("staffEmail")
    phone = str(data.get("farmerPhone") or data.get("staffPhone") or "")
    reference = _first(data, _REFERENCE_KEYS)
    location = _first(data, _LOCATION_KEYS)
    subject_label = _SUBJECT_LABELS.get(record.type, "request")

    reference_clause = f" {reference}" if reference else ""
    reference_note = f" ({reference})" if reference else ""
    farm_clause = f" for your farm at {location}" if location else ""
    greeting_name = f" {name}" if name else ""

    subject = f"Regarding your {subject_label}{reference_clause}"
    body = (
        f"Dear{greeting_name},\r\n\r\n"
        f"Regarding your rubber {subject_label}{reference_note}{farm_clause}.\r\n\r\n"
        f"Best regards,\r\n{SIGNATURE}"
    )
    text = (
        f"Hello{greeting_name}, regarding your {subject_label}{reference_clause}"
        f"{farm_clause}. We will get back to you soon."
    )
    digits = re.sub(r"[^0-9]", "", phone)

    return [
        ContactOption(ContactChannel.CALL, "Call Farmer", f"tel:{phone}"),
        ContactOption(
            ContactChannel.EMAIL,
            "Send Email",
            f"mailto:{email}?subject={quote(subject)}&body={quote(body)}",
        ),
        ContactOption(
            ContactChannel.WHATSAPP,
            "WhatsApp",
            f"https://wa.me/{digits}?text={quote(text)}",
            target="_blank",
        ),
    ]


class ActionDispatcher:
    """Resolve ``(record, action_key)`` into its side effect.

    Assign actions publish the record payload on the handoff channel and move
    the surface to the target view. Contact actions ask ``choose_channel``
    which link to open; nothing is opened without a choice. Every dispatch
    ends by marking the record as read, even if the side effect raised.
    """

    def __init__(self, store: NotificationStore, handoff: HandoffChannel) -> None:
        self._store = store
        self._handoff = handoff

    def dispatch(
        self,
        record: NotificationRecord,
        action_key: str,
        *,
        surface: PresentationSurface | None = None,
        choose_channel: ChannelChooser | None = None,
        open_link: LinkOpener | None = None,
    ) -> ActionOutcome:
        action = resolve_action(action_key)
        try:
            if isinstance(action, AssignAction):
                return self._assign(record, action, surface)
            if isinstance(action, ContactAction):
                return self._contact(record, action, choose_channel, open_link)
            if isinstance(action, AcknowledgeAction):
                return ActionOutcome(kind="acknowledge", notification_id=record.id)
            assert_never(action)
        finally:
            self._store.mark_as_read(record.id)

    def _assign(
        self,
        record: NotificationRecord,
        action: AssignAction,
        surface: PresentationSurface | None,
    ) -> ActionOutcome:
        self._handoff.publish(
            HandoffMessage(
                target_view=action.target_view,
                payload=dict(record.data),
                notification_id=record.id,
            )
        )
        if surface is not None:
            surface.navigate(action.target_view)
            surface.close()
        logger.info("Handed notification %s over to %s", record.id, action.target_view)
        return ActionOutcome(
            kind="assign", notification_id=record.id, target_view=action.target_view
        )

    def _contact(
        self,
        record: NotificationRecord,
        action: ContactAction,
        choose_channel: ChannelChooser | None,
        open_link: LinkOpener | None,
    ) -> ActionOutcome:
        options = tuple(
            option
            for option in build_contact_options(record)
            if option.channel in action.channels
        )
        selected = choose_channel(options) if choose_channel is not None else None
        if selected is not None and open_link is not None:
            open_link(selected.uri)
        return ActionOutcome(
            kind="contact",
            notification_id=record.id,
            options=options,
            selected=selected,
        )


def choose_by_channel(channel: ContactChannel | None) -> ChannelChooser:
    """Return a chooser that picks the option for ``channel`` (or nothing)."""

    def chooser(options: Sequence[ContactOption]) -> ContactOption | None:
        if channel is None:
            return None
        return next((option for option in options if option.channel is channel), None)

    return chooser


__all__ = [
    "ActionDispatcher",
    "ActionOutcome",
    "ChannelChooser",
    "ContactOption",
    "LinkOpener",
    "PresentationSurface",
    "build_contact_options",
    "choose_by_channel",
]
