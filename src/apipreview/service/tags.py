"""Tag registry: all tags known from the last model plus the active selection."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Tag:
    name: str
    description: str | None = None


class TagRegistry:
    """Collects tags from a parsed model and holds the current tag selection."""

    def __init__(self) -> None:
        self._tags: list[Tag] = []
        self._current: list[str] = []

    def register_tags_from_specs(self, specs: dict[str, Any]) -> None:
        """Rebuild the tag list from top-level ``tags`` and every operation's tags.

        First occurrence wins, so declared descriptions take precedence over
        bare operation tags.
        """
        self._tags = []

        declared = specs.get("tags")
        if isinstance(declared, list):
            for entry in declared:
                if isinstance(entry, dict) and isinstance(entry.get("name"), str):
                    self.register_tag(entry["name"], entry.get("description"))

        paths = specs.get("paths")
        if isinstance(paths, dict):
            for path_item in paths.values():
                if not isinstance(path_item, dict):
                    continue
                for operation in path_item.values():
                    if not isinstance(operation, dict):
                        continue
                    op_tags = operation.get("tags")
                    if isinstance(op_tags, list):
                        for name in op_tags:
                            if isinstance(name, str):
                                self.register_tag(name)

    def register_tag(self, name: str, description: str | None = None) -> None:
        if self.tag_index_for(name) is None:
            self._tags.append(Tag(name=name, description=description))

    def tag_index_for(self, name: str) -> int | None:
        for index, tag in enumerate(self._tags):
            if tag.name == name:
                return index
        return None

    def get_all_tags(self) -> list[Tag]:
        return list(self._tags)

    def get_current_tags(self) -> list[str]:
        return list(self._current)

    def set_current_tags(self, tags: Iterable[str] | str | None) -> None:
        """Set the active selection from names or a comma-separated string."""
        if tags is None:
            self._current = []
            return
        if isinstance(tags, str):
            tags = tags.split(",")
        self._current = [t.strip() for t in tags if t and t.strip()]
