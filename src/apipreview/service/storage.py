"""Observable single-slot key-value store with optional per-key JSON durability."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from collections.abc import Callable
from pathlib import Path
from typing import Any

logger = logging.getLogger("apipreview.storage")

ChangeListener = Callable[[Any], Any]


class ObservableStore:
    """Last-write-wins key-value store.

    Every :meth:`save` notifies the listeners registered for that key, in
    registration order, synchronously.  When ``directory`` is given each key
    lives in its own ``<key>.json`` file there, so a save rewrites only the
    slot that changed; existing files are read back on construction.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory
        self._values: dict[str, Any] = {}
        self._listeners: dict[str, list[ChangeListener]] = defaultdict(list)
        if directory is not None:
            directory.mkdir(parents=True, exist_ok=True)
            for slot in sorted(directory.glob("*.json")):
                with slot.open("r", encoding="utf-8") as handle:
                    self._values[slot.stem] = json.load(handle)

    def save(self, key: str, value: Any) -> None:
        self._values[key] = value
        if self._directory is not None:
            self._flush(key)
        for listener in list(self._listeners[key]):
            listener(value)

    async def load(self, key: str) -> Any:
        return self._values.get(key)

    def get(self, key: str) -> Any:
        """Synchronous read of the current value (``None`` if unset)."""
        return self._values.get(key)

    def add_change_listener(self, key: str, listener: ChangeListener) -> None:
        self._listeners[key].append(listener)

    def remove_change_listener(self, key: str, listener: ChangeListener) -> None:
        self._listeners[key].remove(listener)

    def slot_path(self, key: str) -> Path | None:
        return self._directory / f"{key}.json" if self._directory is not None else None

    def _flush(self, key: str) -> None:
        path = self.slot_path(key)
        assert path is not None
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(self._values[key], handle)
        tmp.replace(path)
        logger.debug("slot %r flushed to %s", key, path)
