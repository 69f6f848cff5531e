"""Typed side effects that a notification action key resolves to."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Union


class ContactChannel(str, Enum):
    """External channels an operator can use to reach a requester."""

    CALL = "call"
    EMAIL = "email"
    WHATSAPP = "whatsapp"


@dataclass(frozen=True)
class AssignAction:
    """Hand the notification payload over to another dashboard view."""

    target_view: str


@dataclass(frozen=True)
class ContactAction:
    """Offer the requester's contact channels and open the chosen one."""

    channels: tuple[ContactChannel, ...] = tuple(ContactChannel)


@dataclass(frozen=True)
class AcknowledgeAction:
    """No side effect beyond marking the notification as read."""


ResolvedAction = Union[AssignAction, ContactAction, AcknowledgeAction]

ASSIGN_TARGET_VIEWS: Final[dict[str, str]] = {
    "assign_tapper": "assign-tasks",
    "assign_provider": "services",
}
CONTACT_ACTION_KEYS: Final[frozenset[str]] = frozenset(
    {"contact_farmer", "contact_applicant", "contact_owner"}
)


def resolve_action(action_key: str) -> ResolvedAction:
    """Map a declared ``action_key`` to the side effect it triggers."""

    target_view = ASSIGN_TARGET_VIEWS.get(action_key)
    if target_view is not None:
        return AssignAction(target_view=target_view)
    if action_key in CONTACT_ACTION_KEYS:
        return ContactAction()
    return AcknowledgeAction()


__all__ = [
    "ASSIGN_TARGET_VIEWS",
    "AcknowledgeAction",
    "AssignAction",
    "CONTACT_ACTION_KEYS",
    "ContactAction",
    "ContactChannel",
    "ResolvedAction",
    "resolve_action",
]
