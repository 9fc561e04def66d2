"""Dependency injection for FastAPI: the preview services singleton."""

from __future__ import annotations

from dataclasses import dataclass

from apipreview.pipeline.controller import PreviewController
from apipreview.preview.visibility import VisibilityFilter
from apipreview.service.builder import DocumentBuilder, RemotePayloadBuilder, YamlDocumentBuilder
from apipreview.service.editor import AnnotationBuffer
from apipreview.service.health import BackendHealthCheck
from apipreview.service.preferences import Preferences
from apipreview.service.storage import ObservableStore
from apipreview.service.tags import TagRegistry
from apipreview.settings import Settings


@dataclass
class PreviewServices:
    """Everything one preview session needs, wired together."""

    store: ObservableStore
    editor: AnnotationBuffer
    health: BackendHealthCheck
    tags: TagRegistry
    preferences: Preferences
    controller: PreviewController
    visibility: VisibilityFilter


def build_services(settings: Settings, builder: DocumentBuilder | None = None) -> PreviewServices:
    """Construct the collaborators and the controller from settings."""
    store = ObservableStore(settings.state_dir)
    editor = AnnotationBuffer()
    health = BackendHealthCheck(
        url=settings.backend_health_url,
        interval=settings.backend_health_interval,
        timeout=settings.backend_health_timeout,
    )
    tags = TagRegistry()
    preferences = Preferences(settings)
    if builder is None:
        if settings.build_backend_url:
            builder = RemotePayloadBuilder(
                settings.build_backend_url, timeout=settings.build_backend_timeout
            )
        else:
            builder = YamlDocumentBuilder(max_document_size=settings.max_document_size)
    controller = PreviewController(
        store=store,
        builder=builder,
        editor=editor,
        health=health,
        tags=tags,
        preferences=preferences,
    )
    return PreviewServices(
        store=store,
        editor=editor,
        health=health,
        tags=tags,
        preferences=preferences,
        controller=controller,
        visibility=VisibilityFilter(tags),
    )


_services: PreviewServices | None = None


def init_services(services: PreviewServices) -> None:
    """Set the global PreviewServices (called at app startup)."""
    global _services  # noqa: PLW0603
    _services = services


def get_services() -> PreviewServices:
    """FastAPI ``Depends`` provider for PreviewServices."""
    if _services is None:
        raise RuntimeError("PreviewServices not initialised — call init_services() first")
    return _services


def reset_services() -> None:
    """Clear the global PreviewServices (for tests)."""
    global _services  # noqa: PLW0603
    _services = None
