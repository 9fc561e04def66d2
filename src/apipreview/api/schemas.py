"""API request/response Pydantic schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from apipreview.models.annotation import Annotation
from apipreview.models.errors import Diagnostic
from apipreview.models.status import StatusCode


class HealthResponse(BaseModel):
    status: str
    version: str
    backend_healthy: bool


class DocumentRequest(BaseModel):
    """Request body for PUT /document."""

    yaml: str = Field(description="Full YAML text of the API description")


class PipelineStateResponse(BaseModel):
    """Pipeline state after the triggered build (if any) has completed."""

    status: StatusCode | None
    is_dirty: bool
    has_result: bool
    errors: list[Diagnostic] | None = None
    warnings: list[Diagnostic] = []


class AnnotationListResponse(BaseModel):
    annotations: list[Annotation]


class TagInfo(BaseModel):
    name: str
    description: str | None = None
    index: int


class PreviewResponse(BaseModel):
    """Visible paths (name -> visible operation names) for the current tags."""

    current_tags: list[str]
    all_tags: list[TagInfo]
    paths: dict[str, list[str]]
    show_definitions: bool
    edit_paths: dict[str, str] = {}


class PreferenceRequest(BaseModel):
    value: Any


class FocusRequest(BaseModel):
    path: list[str | int] = Field(description="Key path into the document, e.g. ['paths', '/pets', 'get']")


class FocusResponse(BaseModel):
    line: int | None
