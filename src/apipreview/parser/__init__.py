"""YAML parsing with line fidelity for API descriptions."""

from apipreview.parser.checker import DocumentCheck, DocumentChecker
from apipreview.parser.loader import SourceMap, TrackedLoader, YAMLSafetyError, YAMLStructureError

__all__ = [
    "DocumentCheck",
    "DocumentChecker",
    "SourceMap",
    "TrackedLoader",
    "YAMLSafetyError",
    "YAMLStructureError",
]
