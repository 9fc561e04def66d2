"""Shared pipeline state.

``PreviewController`` is the only writer; gates, router and the visibility
filter read it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from apipreview.models.errors import Diagnostic
from apipreview.models.status import StatusCode


@dataclass
class PipelineContext:
    status: StatusCode | None = None
    is_dirty: bool = False
    latest_text: str = ""
    specs: dict[str, Any] | None = None
    errors: tuple[Diagnostic, ...] | None = None
    warnings: tuple[Diagnostic, ...] = field(default_factory=tuple)
    builds_started: int = 0
    builds_completed: int = 0

    @property
    def has_result(self) -> bool:
        return self.specs is not None
