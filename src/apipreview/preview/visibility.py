"""Show/hide rules for paths and operations of the last successful model."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from apipreview.service.tags import TagRegistry


def is_vendor_extension(key: str) -> bool:
    """Vendor extensions always start with ``x-``."""
    return isinstance(key, str) and key.startswith("x-")


def show_definitions(definitions: Any) -> bool:
    return isinstance(definitions, dict)


def edit_path_for(path_name: str) -> str:
    return "#/paths?path=" + quote(path_name, safe="")


class VisibilityFilter:
    """Predicates evaluated against the registry's current tag selection.

    Nothing is cached, so a new selection takes effect on the next call.
    """

    def __init__(self, tags: TagRegistry) -> None:
        self._tags = tags

    def show_operation(self, operation: Any, operation_name: str) -> bool:
        if is_vendor_extension(operation_name):
            return False
        if operation_name == "parameters":
            return False

        current = self._tags.get_current_tags()
        if not current:
            return True

        op_tags = operation.get("tags") if isinstance(operation, dict) else None
        if not isinstance(op_tags, list):
            return False
        return any(tag in current for tag in op_tags if isinstance(tag, str))

    def show_path(self, path: Any, path_name: str) -> bool:
        if is_vendor_extension(path_name):
            return False
        if not isinstance(path, dict):
            return False
        return any(self.show_operation(op, name) for name, op in path.items())

    def visible_paths(self, specs: dict[str, Any] | None) -> dict[str, list[str]]:
        """Map each visible path name to its visible operation names."""
        if not isinstance(specs, dict) or not isinstance(specs.get("paths"), dict):
            return {}
        visible: dict[str, list[str]] = {}
        for path_name, path in specs["paths"].items():
            if self.show_path(path, path_name):
                visible[path_name] = [
                    name for name, op in path.items() if self.show_operation(op, name)
                ]
        return visible
