"""Durable notification store with synchronous subscriber fan-out."""

from __future__ import annotations

import copy
import json
import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable

from app.domain.entities import (
    NotificationAction,
    NotificationPriority,
    NotificationRecord,
    NotificationType,
)
from app.infrastructure.storage import KeyValueStorage
from app.utils import now_in_app_timezone

from .codec import dumps_records, loads_records

logger = logging.getLogger(__name__)

DEFAULT_RECENT_WINDOW = timedelta(hours=24)


@dataclass(frozen=True)
class NotificationSnapshot:
    """State handed to subscribers after every mutation."""

    records: tuple[NotificationRecord, ...]
    unread_count: int


Listener = Callable[[NotificationSnapshot], Any]
Unsubscribe = Callable[[], None]


class NotificationStore:
    """Single source of truth for durable notification records.

    Records are kept newest-first. Every mutation updates memory, writes the
    full collection to ``storage`` under ``storage_key`` and then calls each
    subscriber with the resulting :class:`NotificationSnapshot` before
    returning. Mutations from different threads are serialized, so writes
    reach storage and subscribers in the order they were applied. Storage
    failures are logged and otherwise ignored so callers always observe the
    in-memory update.

    Records handed out are immutable and carry their own copy of ``data``.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        storage_key: str = "adminNotifications",
        clock: Callable[[], datetime] = now_in_app_timezone,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._clock = clock
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._records: list[NotificationRecord] = []
        self._listeners: list[Listener] = []
        self._initialized = False
        self._lock = threading.RLock()

    def initialize(self) -> "NotificationStore":
        """Load the persisted collection once; corrupt state yields no records."""

        with self._lock:
            if self._initialized:
                return self
            self._records = self._read_persisted()
            self._initialized = True
        logger.debug("Notification store loaded %s record(s)", len(self._records))
        return self

    def dispose(self) -> None:
        """Drop every subscriber. The store stays usable in memory."""

        with self._lock:
            self._listeners.clear()

    def get_all(self) -> tuple[NotificationRecord, ...]:
        with self._lock:
            return tuple(_detached(record) for record in self._records)

    def get(self, notification_id: str) -> NotificationRecord | None:
        with self._lock:
            record = next((r for r in self._records if r.id == notification_id), None)
            return None if record is None else _detached(record)

    def get_unread_count(self) -> int:
        with self._lock:
            return sum(1 for record in self._records if not record.read)

    def by_type(self, notification_type: NotificationType | str) -> list[NotificationRecord]:
        wanted = NotificationType(notification_type)
        return [record for record in self.get_all() if record.type is wanted]

    def recent(
        self,
        window: timedelta = DEFAULT_RECENT_WINDOW,
        *,
        now: datetime | None = None,
    ) -> list[NotificationRecord]:
        """Return records created within ``window`` of ``now``."""

        cutoff = (now or self._clock()) - window
        return [record for record in self.get_all() if record.timestamp > cutoff]

    def high_priority_unread(self) -> list[NotificationRecord]:
        return [
            record
            for record in self.get_all()
            if record.is_high_priority and not record.read
        ]

    def snapshot(self) -> NotificationSnapshot:
        with self._lock:
            return NotificationSnapshot(
                records=self.get_all(), unread_count=self.get_unread_count()
            )

    def add(
        self,
        *,
        type: NotificationType | str,
        title: str,
        message: str,
        priority: NotificationPriority | str = NotificationPriority.NORMAL,
        data: dict[str, Any] | None = None,
        actions: Iterable[NotificationAction] = (),
        actionable: bool | None = None,
    ) -> NotificationRecord:
        """Create, persist and broadcast a new unread record."""

        if not title or not message:
            raise ValueError("Notifications require a title and a message")

        action_list = tuple(actions)
        with self._lock:
            record = NotificationRecord(
                id=self._next_id(),
                type=NotificationType(type),
                title=title,
                message=message,
                timestamp=self._clock(),
                read=False,
                priority=NotificationPriority(priority),
                data=copy.deepcopy(dict(data or {})),
                actions=action_list,
                actionable=bool(action_list) if actionable is None else actionable,
            )
            self._records.insert(0, record)
            self._commit()
            return _detached(record)

    def mark_as_read(self, notification_id: str) -> None:
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id != notification_id:
                    continue
                if record.read:
                    return
                self._records[index] = replace(record, read=True)
                self._commit()
                return

    def mark_all_as_read(self) -> None:
        with self._lock:
            self._records = [
                record if record.read else replace(record, read=True)
                for record in self._records
            ]
            self._commit()

    def delete(self, notification_id: str) -> None:
        with self._lock:
            remaining = [record for record in self._records if record.id != notification_id]
            if len(remaining) == len(self._records):
                return
            self._records = remaining
            self._commit()

    def clear(self) -> None:
        with self._lock:
            self._records = []
            self._commit()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register ``listener`` and return a function that removes it.

        The returned callable may be invoked any number of times, including
        after :meth:`dispose`.
        """

        handle = _Subscription(listener)
        with self._lock:
            self._listeners.append(handle)

        def unsubscribe() -> None:
            with self._lock:
                try:
                    self._listeners.remove(handle)
                except ValueError:
                    pass

        return unsubscribe

    def _next_id(self) -> str:
        existing = {record.id for record in self._records}
        candidate = self._id_factory()
        while candidate in existing:
            candidate = self._id_factory()
        return candidate

    def _commit(self) -> None:
        # Caller holds the lock for the whole persist-then-notify sequence.
        self._persist()
        self._notify()

    def _persist(self) -> None:
        try:
            self._storage.set_item(self._storage_key, dumps_records(self._records))
        except Exception as exc:
            logger.warning(
                "Could not persist %s notification(s); keeping in-memory state only: %s",
                len(self._records),
                exc,
            )

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Notification listener %r failed", listener)

    def _read_persisted(self) -> list[NotificationRecord]:
        try:
            raw = self._storage.get_item(self._storage_key)
        except Exception as exc:
            logger.warning("Could not read persisted notifications: %s", exc)
            return []
        if not raw:
            return []
        try:
            return loads_records(raw)
        except (TypeError, ValueError, json.JSONDecodeError) as exc:
            logger.warning("Discarding unreadable persisted notifications: %s", exc)
            return []


def _detached(record: NotificationRecord) -> NotificationRecord:
    return replace(record, data=copy.deepcopy(record.data))


class _Subscription:
    """Wrapper giving each registration its own identity.

    The same callable may be subscribed twice; each registration is removed
    by its own ``unsubscribe`` only.
    """

    __slots__ = ("listener",)

    def __init__(self, listener: Listener) -> None:
        self.listener = listener

    def __call__(self, snapshot: NotificationSnapshot) -> Any:
        return self.listener(snapshot)

    def __repr__(self) -> str:
        return repr(self.listener)


__all__ = [
    "DEFAULT_RECENT_WINDOW",
    "Listener",
    "NotificationSnapshot",
    "NotificationStore",
    "Unsubscribe",
]
