"""Pydantic domain models for the preview pipeline."""

from apipreview.models.annotation import Annotation, AnnotationKind
from apipreview.models.build import (
    BuildFailedError,
    BuildFailure,
    BuildOutcome,
    BuildResult,
    BuildSuccess,
)
from apipreview.models.errors import (
    Diagnostic,
    SemanticDiagnostic,
    SourceSpan,
    StructuralDiagnostic,
    YamlErrorDetail,
)
from apipreview.models.status import StatusCode

__all__ = [
    "Annotation",
    "AnnotationKind",
    "BuildFailedError",
    "BuildFailure",
    "BuildOutcome",
    "BuildResult",
    "BuildSuccess",
    "Diagnostic",
    "SemanticDiagnostic",
    "SourceSpan",
    "StatusCode",
    "StructuralDiagnostic",
    "YamlErrorDetail",
]
