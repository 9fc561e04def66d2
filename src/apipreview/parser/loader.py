"""YAML loader with position tracking for rich diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from apipreview.models.errors import KeyPath, SourceSpan, YamlErrorDetail

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 200_000
_MAX_DEPTH = 64


class YAMLSafetyError(Exception):
    """Raised when YAML input violates size or expansion limits.

    Aliases are legal in API descriptions, so expansion is bounded by the
    post-parse node count rather than by rejecting anchors outright.
    """


class YAMLStructureError(Exception):
    """Raised when the text is not well-formed YAML."""

    def __init__(self, detail: YamlErrorDetail) -> None:
        self.detail = detail
        super().__init__(detail.message)


@dataclass
class SourceMap:
    """Maps key paths (tuples of keys/indices) to their source positions."""

    _positions: dict[KeyPath, SourceSpan] = field(default_factory=dict)

    def add(self, path: KeyPath, span: SourceSpan) -> None:
        self._positions[path] = span

    def get(self, path: KeyPath) -> SourceSpan | None:
        return self._positions.get(tuple(path))

    def nearest(self, path: KeyPath) -> SourceSpan | None:
        """Return the span of ``path`` or of its closest located ancestor."""
        key = tuple(path)
        while key:
            span = self._positions.get(key)
            if span is not None:
                return span
            key = key[:-1]
        return None

    @property
    def paths(self) -> list[KeyPath]:
        return list(self._positions.keys())


class TrackedLoader:
    """YAML loader that tracks source positions for diagnostics.

    Uses ruamel.yaml which preserves line/column info on every parsed node.
    A ``YAML`` instance is not safe to share across threads, so create one
    loader per build.
    """

    def __init__(self, max_document_size: int = _MAX_DOCUMENT_SIZE) -> None:
        self._yaml = YAML()
        self._yaml.preserve_quotes = True
        self._max_document_size = max_document_size

    # -- safety checks -------------------------------------------------------

    def _check_document_size(self, content: str) -> None:
        if len(content) > self._max_document_size:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {self._max_document_size:,} limit)"
            )

    @staticmethod
    def _check_node_count(data: Any, limit: int = _MAX_NODE_COUNT) -> None:
        """Reject documents whose alias expansion yields too many nodes."""
        count = 0
        stack: list[Any] = [data]
        while stack:
            node = stack.pop()
            count += 1
            if count > limit:
                raise YAMLSafetyError(f"YAML document exceeds maximum node count ({limit:,})")
            if isinstance(node, dict):
                stack.extend(node.values())
            elif isinstance(node, list):
                stack.extend(node)

    @staticmethod
    def _check_depth(data: Any, limit: int = _MAX_DEPTH) -> None:
        """Reject nesting deeper than ``limit`` before the recursive passes run."""
        stack: list[tuple[Any, int]] = [(data, 1)]
        while stack:
            node, depth = stack.pop()
            if depth > limit:
                raise YAMLSafetyError(f"YAML document exceeds maximum nesting depth ({limit})")
            if isinstance(node, dict):
                stack.extend((child, depth + 1) for child in node.values())
            elif isinstance(node, list):
                stack.extend((child, depth + 1) for child in node)

    # -- public loading API --------------------------------------------------

    def load_string(self, content: str, filename: str = "<document>") -> tuple[Any, SourceMap]:
        """Load YAML from a string.

        Returns the plain Python value (``None`` for an empty document) and
        a source map.  Raises :class:`YAMLStructureError` on parse failure
        and :class:`YAMLSafetyError` when size, node-count or nesting limits
        are exceeded.
        """
        self._check_document_size(content)
        try:
            data = self._yaml.load(content)
        except YAMLError as exc:
            raise YAMLStructureError(self._error_detail(exc)) from exc
        except RecursionError:
            # ruamel composes nodes recursively
            raise YAMLSafetyError(
                f"YAML document exceeds maximum nesting depth ({_MAX_DEPTH})"
            ) from None
        if data is None:
            return None, SourceMap()
        self._check_node_count(data)
        self._check_depth(data)
        source_map = SourceMap()
        self._extract_positions(data, filename, (), source_map)
        return self._to_plain_value(data), source_map

    @staticmethod
    def _error_detail(exc: YAMLError) -> YamlErrorDetail:
        """Convert a ruamel error into a structural payload with 1-based marks."""
        mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
        problem = getattr(exc, "problem", None)
        return YamlErrorDetail(
            message=problem or str(exc),
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
            context=getattr(exc, "context", None),
        )

    def _extract_positions(
        self,
        data: Any,
        filename: str,
        prefix: KeyPath,
        source_map: SourceMap,
    ) -> None:
        """Recursively extract source positions from ruamel.yaml nodes."""
        if isinstance(data, CommentedMap):
            for key in data:
                key_path = (*prefix, str(key))
                try:
                    key_positions = data.lc.key(key)
                    if key_positions:
                        line, col = key_positions
                        source_map.add(
                            key_path,
                            SourceSpan(file=filename, line=line + 1, column=col + 1),
                        )
                except (AttributeError, KeyError, TypeError):
                    # Fallback: use the map's own position
                    try:
                        source_map.add(
                            key_path,
                            SourceSpan(file=filename, line=data.lc.line + 1, column=data.lc.col + 1),
                        )
                    except (AttributeError, TypeError):
                        pass
                self._extract_positions(data[key], filename, key_path, source_map)
        elif isinstance(data, CommentedSeq):
            for i, item in enumerate(data):
                item_path = (*prefix, i)
                try:
                    item_pos = data.lc.item(i)
                    if item_pos:
                        line, col = item_pos
                        source_map.add(
                            item_path,
                            SourceSpan(file=filename, line=line + 1, column=col + 1),
                        )
                except (AttributeError, KeyError, TypeError):
                    pass
                self._extract_positions(item, filename, item_path, source_map)

    def _to_plain_value(self, data: Any) -> Any:
        """Convert ruamel.yaml CommentedMap/Seq to plain Python dict/list."""
        if isinstance(data, dict):
            return {str(k): self._to_plain_value(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self._to_plain_value(item) for item in data]
        return data
