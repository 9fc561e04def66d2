"""Display-visibility rules for the preview pane."""

from apipreview.preview.visibility import (
    VisibilityFilter,
    edit_path_for,
    is_vendor_extension,
    show_definitions,
)

__all__ = ["VisibilityFilter", "edit_path_for", "is_vendor_extension", "show_definitions"]
