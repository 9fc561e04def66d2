"""Applies a classification to the editor's annotation set."""

from __future__ import annotations

from apipreview.models.annotation import AnnotationKind
from apipreview.pipeline.classifier import Classification
from apipreview.service.editor import Editor


class AnnotationRouter:
    def __init__(self, editor: Editor) -> None:
        self._editor = editor

    def route(self, classification: Classification) -> None:
        """Clear stale annotations, then apply the new set.

        A structural failure replaces everything through the editor's
        dedicated YAML routine instead of per-diagnostic annotations.
        """
        if classification.structural is not None:
            self._editor.annotate_yaml_errors(classification.structural)
            return

        self._editor.clear_annotation()
        for warning in classification.warnings:
            self._editor.annotate_swagger_error(warning, AnnotationKind.WARNING)
        for error in classification.errors:
            self._editor.annotate_swagger_error(error, AnnotationKind.ERROR)
