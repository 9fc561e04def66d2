"""Lightweight content checks run after a successful YAML parse.

These are sanity checks on the document outline, not a schema: they only
look at the shape of ``paths`` and at tag/operationId bookkeeping.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from apipreview.models.errors import KeyPath, SemanticDiagnostic
from apipreview.parser.loader import SourceMap

DocumentCheck = Callable[[dict[str, Any], SourceMap], list[SemanticDiagnostic]]


def _is_extension(key: str) -> bool:
    return key.startswith("x-")


class DocumentChecker:
    """Runs the built-in checks plus any injected ``DocumentCheck`` callables."""

    def __init__(self, extra_checks: list[DocumentCheck] | None = None) -> None:
        self._extra_checks = list(extra_checks or [])

    def check(
        self, document: Any, source_map: SourceMap
    ) -> tuple[list[SemanticDiagnostic], list[SemanticDiagnostic]]:
        """Return ``(errors, warnings)`` for a parsed document."""
        if not isinstance(document, dict):
            return [
                SemanticDiagnostic(
                    code="ROOT_NOT_MAPPING",
                    message="Document root must be a YAML mapping",
                )
            ], []

        found: list[SemanticDiagnostic] = []
        found.extend(self._check_paths(document, source_map))
        found.extend(self._check_operation_ids(document, source_map))
        found.extend(self._check_declared_tags(document, source_map))
        for check in self._extra_checks:
            found.extend(check(document, source_map))

        errors = [d for d in found if d.level == "error"]
        warnings = [d for d in found if d.level == "warning"]
        return errors, warnings

    # -- individual checks ---------------------------------------------------

    @staticmethod
    def _diagnostic(
        code: str, message: str, path: KeyPath, source_map: SourceMap, level: str = "error"
    ) -> SemanticDiagnostic:
        return SemanticDiagnostic(
            code=code,
            message=message,
            level=level,
            path=path,
            span=source_map.nearest(path),
        )

    def _check_paths(self, document: dict[str, Any], source_map: SourceMap) -> list[SemanticDiagnostic]:
        """``paths`` must be a mapping of ``/...`` keys to operation mappings."""
        paths = document.get("paths")
        if paths is None:
            return []
        if not isinstance(paths, dict):
            return [
                self._diagnostic(
                    "PATHS_NOT_MAPPING", "'paths' must be a YAML mapping", ("paths",), source_map
                )
            ]

        errors: list[SemanticDiagnostic] = []
        for path_name, path_item in paths.items():
            if _is_extension(path_name):
                continue
            if not path_name.startswith("/"):
                errors.append(
                    self._diagnostic(
                        "INVALID_PATH_KEY",
                        f"Path '{path_name}' must begin with '/'",
                        ("paths", path_name),
                        source_map,
                    )
                )
                continue
            if not isinstance(path_item, dict):
                errors.append(
                    self._diagnostic(
                        "PATH_NOT_MAPPING",
                        f"Path '{path_name}' must be a YAML mapping",
                        ("paths", path_name),
                        source_map,
                    )
                )
                continue
            for op_name, operation in path_item.items():
                if op_name == "parameters" or _is_extension(op_name):
                    continue
                if not isinstance(operation, dict):
                    errors.append(
                        self._diagnostic(
                            "OPERATION_NOT_MAPPING",
                            f"Operation '{op_name}' of '{path_name}' must be a YAML mapping",
                            ("paths", path_name, op_name),
                            source_map,
                        )
                    )
        return errors

    def _check_operation_ids(
        self, document: dict[str, Any], source_map: SourceMap
    ) -> list[SemanticDiagnostic]:
        warnings: list[SemanticDiagnostic] = []
        seen: dict[str, str] = {}  # operationId -> first path
        for path_name, op_name, operation in _iter_operations(document):
            op_id = operation.get("operationId")
            if not isinstance(op_id, str):
                continue
            if op_id in seen:
                warnings.append(
                    self._diagnostic(
                        "DUPLICATE_OPERATION_ID",
                        f"operationId '{op_id}' is already used by '{seen[op_id]}'",
                        ("paths", path_name, op_name, "operationId"),
                        source_map,
                        level="warning",
                    )
                )
            else:
                seen[op_id] = path_name
        return warnings

    def _check_declared_tags(
        self, document: dict[str, Any], source_map: SourceMap
    ) -> list[SemanticDiagnostic]:
        """Warn when an operation uses a tag missing from a top-level ``tags`` list."""
        declared_raw = document.get("tags")
        if not isinstance(declared_raw, list):
            return []
        declared = {
            t["name"] for t in declared_raw if isinstance(t, dict) and isinstance(t.get("name"), str)
        }

        warnings: list[SemanticDiagnostic] = []
        for path_name, op_name, operation in _iter_operations(document):
            tags = operation.get("tags")
            if not isinstance(tags, list):
                continue
            for i, tag in enumerate(tags):
                if isinstance(tag, str) and tag not in declared:
                    warnings.append(
                        self._diagnostic(
                            "UNDECLARED_TAG",
                            f"Tag '{tag}' is not declared in the top-level tags list",
                            ("paths", path_name, op_name, "tags", i),
                            source_map,
                            level="warning",
                        )
                    )
        return warnings


def _iter_operations(document: dict[str, Any]):
    """Yield ``(path_name, op_name, operation)`` for well-shaped operations."""
    paths = document.get("paths")
    if not isinstance(paths, dict):
        return
    for path_name, path_item in paths.items():
        if _is_extension(path_name) or not isinstance(path_item, dict):
            continue
        for op_name, operation in path_item.items():
            if op_name == "parameters" or _is_extension(op_name):
                continue
            if isinstance(operation, dict):
                yield path_name, op_name, operation
