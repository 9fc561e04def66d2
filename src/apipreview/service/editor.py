"""Editor surface protocol and an in-memory implementation."""

from __future__ import annotations

from typing import Protocol

from apipreview.models.annotation import Annotation, AnnotationKind
from apipreview.models.errors import SemanticDiagnostic, StructuralDiagnostic, YamlErrorDetail


class Editor(Protocol):
    def clear_annotation(self) -> None: ...

    def annotate_swagger_error(
        self,
        diagnostic: SemanticDiagnostic | StructuralDiagnostic,
        kind: AnnotationKind = AnnotationKind.ERROR,
    ) -> None: ...

    def annotate_yaml_errors(self, error: YamlErrorDetail) -> None: ...

    def goto_line(self, line: int) -> None: ...

    def focus(self) -> None: ...


class AnnotationBuffer:
    """Records annotations and cursor state the way an editor widget would."""

    def __init__(self) -> None:
        self._annotations: list[Annotation] = []
        self.cursor_line: int | None = None
        self.focused = False

    @property
    def annotations(self) -> list[Annotation]:
        return list(self._annotations)

    def clear_annotation(self) -> None:
        self._annotations = []

    def annotate_swagger_error(
        self,
        diagnostic: SemanticDiagnostic | StructuralDiagnostic,
        kind: AnnotationKind = AnnotationKind.ERROR,
    ) -> None:
        if isinstance(diagnostic, StructuralDiagnostic):
            detail = diagnostic.yaml_error
            row, column, text = _row(detail.line), _row(detail.column), detail.message
        else:
            span = diagnostic.span
            row = span.line - 1 if span else 0
            column = span.column - 1 if span else 0
            text = diagnostic.message
        self._annotations.append(Annotation(row=row, column=column, text=text, type=kind))

    def annotate_yaml_errors(self, error: YamlErrorDetail) -> None:
        """Replace all annotations with the single structural error."""
        self._annotations = [
            Annotation(
                row=_row(error.line),
                column=_row(error.column),
                text=error.message,
                type=AnnotationKind.ERROR,
            )
        ]

    def goto_line(self, line: int) -> None:
        self.cursor_line = line

    def focus(self) -> None:
        self.focused = True


def _row(one_based: int | None) -> int:
    return one_based - 1 if one_based else 0
