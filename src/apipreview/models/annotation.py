"""Editor annotations produced from diagnostics."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class AnnotationKind(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class Annotation(BaseModel):
    """One gutter annotation on the editing surface (0-based row/column)."""

    model_config = ConfigDict(frozen=True)

    row: int
    column: int = 0
    text: str
    type: AnnotationKind
