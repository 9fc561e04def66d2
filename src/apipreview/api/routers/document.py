"""Document and pipeline-state endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from apipreview.api.deps import PreviewServices, get_services
from apipreview.api.schemas import (
    AnnotationListResponse,
    DocumentRequest,
    FocusRequest,
    FocusResponse,
    PipelineStateResponse,
    PreferenceRequest,
)
from apipreview.pipeline.controller import DOCUMENT_KEY

router = APIRouter()


def _state(services: PreviewServices) -> PipelineStateResponse:
    ctx = services.controller.context
    return PipelineStateResponse(
        status=ctx.status,
        is_dirty=ctx.is_dirty,
        has_result=ctx.has_result,
        errors=list(ctx.errors) if ctx.errors is not None else None,
        warnings=list(ctx.warnings),
    )


@router.put("/document", response_model=PipelineStateResponse)
async def put_document(
    body: DocumentRequest,
    services: PreviewServices = Depends(get_services),  # noqa: B008
) -> PipelineStateResponse:
    """Store new document text; waits for the build it triggers, if any."""
    services.store.save(DOCUMENT_KEY, body.yaml)
    await services.controller.drain()
    return _state(services)


@router.post("/document/reload", response_model=PipelineStateResponse)
async def reload_document(
    services: PreviewServices = Depends(get_services),  # noqa: B008
) -> PipelineStateResponse:
    """Force a rebuild of the stored document regardless of live-render."""
    await services.controller.load_latest()
    await services.controller.drain()
    return _state(services)


@router.get("/status", response_model=PipelineStateResponse)
async def get_status(
    services: PreviewServices = Depends(get_services),  # noqa: B008
) -> PipelineStateResponse:
    return _state(services)


@router.get("/annotations", response_model=AnnotationListResponse)
async def get_annotations(
    services: PreviewServices = Depends(get_services),  # noqa: B008
) -> AnnotationListResponse:
    return AnnotationListResponse(annotations=services.editor.annotations)


@router.put("/preferences/{key}")
async def put_preference(
    key: str,
    body: PreferenceRequest,
    services: PreviewServices = Depends(get_services),  # noqa: B008
) -> dict[str, Any]:
    try:
        services.preferences.set(key, body.value)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown preference '{key}'") from None
    return services.preferences.all()


@router.post("/focus", response_model=FocusResponse)
async def focus_path(
    body: FocusRequest,
    services: PreviewServices = Depends(get_services),  # noqa: B008
) -> FocusResponse:
    """Move the editor cursor to where a key path begins."""
    line = services.controller.focus_edit(body.path)
    if line is None:
        raise HTTPException(status_code=404, detail=f"Path {body.path!r} not found in document")
    return FocusResponse(line=line)
