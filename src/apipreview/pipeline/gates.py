"""Guards that may suppress a rebuild before the builder is called."""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol


class _PreferenceSource(Protocol):
    def get(self, key: str) -> object: ...


class _HealthSource(Protocol):
    def is_healthy(self) -> bool: ...


class GateDecision(StrEnum):
    PROCEED = "proceed"
    DEFER = "defer"  # pipeline goes dirty, status becomes progress-unsaved
    DROP = "drop"  # silently skipped


class ChangeGate:
    """Defers rebuilds while live-render is off, except forced or first builds."""

    def __init__(self, preferences: _PreferenceSource) -> None:
        self._preferences = preferences

    def check(self, *, force: bool, has_result: bool) -> GateDecision:
        if not self._preferences.get("liveRender") and not force and has_result:
            return GateDecision.DEFER
        return GateDecision.PROCEED


class HealthGate:
    """Drops rebuilds while the build backend is unhealthy."""

    def __init__(self, health: _HealthSource) -> None:
        self._health = health

    def check(self) -> GateDecision:
        return GateDecision.PROCEED if self._health.is_healthy() else GateDecision.DROP
