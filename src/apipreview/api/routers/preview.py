"""Tag-filtered view of the last successful model."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from apipreview.api.deps import PreviewServices, get_services
from apipreview.api.schemas import PreviewResponse, TagInfo
from apipreview.preview.visibility import edit_path_for, show_definitions

router = APIRouter()


@router.get("", response_model=PreviewResponse)
async def get_preview(
    tags: str | None = Query(default=None, description="Comma-separated tag selection"),
    services: PreviewServices = Depends(get_services),  # noqa: B008
) -> PreviewResponse:
    """Apply the tag selection and return what the preview pane would render."""
    services.tags.set_current_tags(tags)
    specs = services.controller.context.specs
    paths = services.visibility.visible_paths(specs)
    return PreviewResponse(
        current_tags=services.tags.get_current_tags(),
        all_tags=[
            TagInfo(name=t.name, description=t.description, index=i)
            for i, t in enumerate(services.tags.get_all_tags())
        ],
        paths=paths,
        show_definitions=show_definitions((specs or {}).get("definitions")),
        edit_paths={name: edit_path_for(name) for name in paths},
    )
