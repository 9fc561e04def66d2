"""User preferences consulted by the pipeline gates."""

from __future__ import annotations

from typing import Any

from apipreview.settings import Settings


class Preferences:
    """Named preference values seeded from :class:`Settings`."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or Settings()
        self._values: dict[str, Any] = {"liveRender": settings.live_render}

    def get(self, key: str) -> Any:
        try:
            return self._values[key]
        except KeyError:
            raise KeyError(f"Unknown preference '{key}'") from None

    def set(self, key: str, value: Any) -> None:
        if key not in self._values:
            raise KeyError(f"Unknown preference '{key}'")
        self._values[key] = value

    def all(self) -> dict[str, Any]:
        return dict(self._values)
