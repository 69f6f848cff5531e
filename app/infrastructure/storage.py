"""Durable key/value storage used to mirror client-side state."""

from __future__ import annotations

from typing import Callable, Protocol

from sqlalchemy.orm import Session

from app.infrastructure.repositories import StorageEntryRepository


class KeyValueStorage(Protocol):
    """Minimal string storage contract shared by the store and its tests."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class DurableStorage:
    """Key/value storage persisted through SQLAlchemy.

    Every call opens its own session so writes coming from different request
    threads never share a transaction. Each ``set_item`` is a single
    overwrite followed by one commit.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get_item(self, key: str) -> str | None:
        session = self._session_factory()
        try:
            return StorageEntryRepository(session).get_value(key)
        finally:
            session.close()

    def set_item(self, key: str, value: str) -> None:
        session = self._session_factory()
        try:
            StorageEntryRepository(session).put_value(key, value)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def remove_item(self, key: str) -> None:
        session = self._session_factory()
        try:
            StorageEntryRepository(session).delete(key)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


class MemoryStorage:
    """Process-local storage with the same interface as :class:`DurableStorage`."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


__all__ = ["DurableStorage", "KeyValueStorage", "MemoryStorage"]
