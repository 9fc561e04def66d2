"""Persists the active status code to the shared store."""

from __future__ import annotations

from apipreview.models.status import StatusCode
from apipreview.service.storage import ObservableStore

PROGRESS_KEY = "progress"


class StatusPersister:
    def __init__(self, store: ObservableStore) -> None:
        self._store = store

    def persist(self, status: StatusCode) -> None:
        self._store.save(PROGRESS_KEY, status.value)

    def current(self) -> StatusCode | None:
        value = self._store.get(PROGRESS_KEY)
        return StatusCode(value) if value is not None else None
