"""Persistence helpers for key/value storage entries."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.infrastructure.models import StorageEntryModel


class StorageEntryRepository:
    """Provide read/overwrite/delete operations on :class:`StorageEntryModel`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_value(self, key: str) -> str | None:
        model = self.session.get(StorageEntryModel, key)
        if model is None:
            return None
        return model.value

    def put_value(self, key: str, value: str) -> None:
        model = self.session.get(StorageEntryModel, key)
        if model is None:
            model = StorageEntryModel(key=key, value=value)
        else:
            model.value = value
        self.session.add(model)
        self.session.commit()

    def delete(self, key: str) -> None:
        model = self.session.get(StorageEntryModel, key)
        if model is None:
            return
        self.session.delete(model)
        self.session.commit()


__all__ = ["StorageEntryRepository"]
