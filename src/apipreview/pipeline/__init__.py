"""Change -> build -> classify -> annotate pipeline."""

from apipreview.pipeline.annotations import AnnotationRouter
from apipreview.pipeline.classifier import Classification, ResultClassifier
from apipreview.pipeline.context import PipelineContext
from apipreview.pipeline.controller import PreviewController
from apipreview.pipeline.gates import ChangeGate, GateDecision, HealthGate
from apipreview.pipeline.invoker import BuildInvoker
from apipreview.pipeline.status import StatusPersister

__all__ = [
    "AnnotationRouter",
    "BuildInvoker",
    "ChangeGate",
    "Classification",
    "GateDecision",
    "HealthGate",
    "PipelineContext",
    "PreviewController",
    "ResultClassifier",
    "StatusPersister",
]
