"""In-process channel used to pass a notification payload to another view."""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandoffMessage:
    """Payload that pre-fills ``target_view`` when it opens."""

    target_view: str
    payload: dict[str, Any] = field(default_factory=dict)
    notification_id: str | None = None


HandoffListener = Callable[[HandoffMessage], Any]


class HandoffChannel:
    """Deliver one-shot handoffs to the view that should consume them.

    Each target view owns a single slot holding its most recent message, and
    publishing overwrites it. Views that are already listening receive the
    message immediately; views opened later call :meth:`take` to consume
    the slot. There is no acknowledgement or retry.
    """

    def __init__(self) -> None:
        self._slots: dict[str, HandoffMessage] = {}
        self._listeners: DefaultDict[str, list[HandoffListener]] = defaultdict(list)
        self._broadcast: list[HandoffListener] = []

    def publish(self, message: HandoffMessage) -> None:
        stored = HandoffMessage(
            target_view=message.target_view,
            payload=copy.deepcopy(message.payload),
            notification_id=message.notification_id,
        )
        self._slots[message.target_view] = stored

        listeners = list(self._listeners.get(message.target_view, ())) + list(self._broadcast)
        for listener in listeners:
            try:
                listener(stored)
            except Exception:
                logger.exception("Handoff listener %r failed", listener)

    def subscribe(self, target_view: str, listener: HandoffListener) -> Callable[[], None]:
        """Listen for handoffs addressed to ``target_view``."""

        self._listeners[target_view].append(listener)
        return lambda: _discard(self._listeners.get(target_view), listener)

    def subscribe_all(self, listener: HandoffListener) -> Callable[[], None]:
        """Listen for handoffs addressed to any view."""

        self._broadcast.append(listener)
        return lambda: _discard(self._broadcast, listener)

    def peek(self, target_view: str) -> HandoffMessage | None:
        return self._slots.get(target_view)

    def take(self, target_view: str) -> HandoffMessage | None:
        """Return and clear the pending handoff for ``target_view``."""

        return self._slots.pop(target_view, None)

    def close(self) -> None:
        self._listeners.clear()
        self._broadcast.clear()
        self._slots.clear()


def _discard(listeners: list[HandoffListener] | None, listener: HandoffListener) -> None:
    if not listeners:
        return
    try:
        listeners.remove(listener)
    except ValueError:
        pass


__all__ = ["HandoffChannel", "HandoffListener", "HandoffMessage"]
