"""Shared test fixtures for the API preview pipeline."""

from __future__ import annotations

import asyncio

import pytest

from apipreview.models.build import BuildFailedError, BuildResult
from apipreview.parser.loader import TrackedLoader
from apipreview.pipeline.controller import PreviewController
from apipreview.service.editor import AnnotationBuffer
from apipreview.service.health import BackendHealthCheck
from apipreview.service.preferences import Preferences
from apipreview.service.storage import ObservableStore
from apipreview.service.tags import TagRegistry
from apipreview.settings import Settings


class ScriptedBuilder:
    """Builder double: replays queued results (``BuildResult`` or exception).

    When ``gated`` is true each build waits for its own ``release(i)``.
    """

    def __init__(self, *results: BuildResult | Exception, gated: bool = False) -> None:
        self._results = list(results)
        self._gated = gated
        self.calls: list[str] = []
        self._events: list[asyncio.Event] = []

    def queue(self, *results: BuildResult | Exception) -> None:
        self._results.extend(results)

    def release(self, index: int) -> None:
        self._events[index].set()

    async def build_docs(self, text: str) -> BuildResult:
        index = len(self.calls)
        self.calls.append(text)
        result = self._results[index] if index < len(self._results) else self._results[-1]
        if self._gated:
            event = asyncio.Event()
            self._events.append(event)
            await event.wait()
        if isinstance(result, Exception):
            raise result
        return result


class RecordingEditor(AnnotationBuffer):
    """AnnotationBuffer that also logs every call in order."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple] = []

    def clear_annotation(self) -> None:
        self.calls.append(("clear",))
        super().clear_annotation()

    def annotate_swagger_error(self, diagnostic, kind="error") -> None:
        self.calls.append(("swagger", diagnostic, str(kind)))
        super().annotate_swagger_error(diagnostic, kind)

    def annotate_yaml_errors(self, error) -> None:
        self.calls.append(("yaml", error))
        super().annotate_yaml_errors(error)


class StaticHealth(BackendHealthCheck):
    def __init__(self, healthy: bool = True) -> None:
        super().__init__()
        self.healthy = healthy

    def is_healthy(self) -> bool:
        return self.healthy


def failure(**payload) -> BuildFailedError:
    return BuildFailedError(BuildResult.from_payload(payload))


def success(**payload) -> BuildResult:
    return BuildResult.from_payload(payload)


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def store() -> ObservableStore:
    return ObservableStore()


@pytest.fixture
def editor() -> RecordingEditor:
    return RecordingEditor()


@pytest.fixture
def health() -> StaticHealth:
    return StaticHealth()


@pytest.fixture
def tags() -> TagRegistry:
    return TagRegistry()


@pytest.fixture
def preferences() -> Preferences:
    return Preferences(Settings(live_render=True))


@pytest.fixture
def make_controller(store, editor, health, tags, preferences):
    def _make(builder) -> PreviewController:
        return PreviewController(
            store=store,
            builder=builder,
            editor=editor,
            health=health,
            tags=tags,
            preferences=preferences,
        )

    return _make


SAMPLE_API_YAML = """\
swagger: '2.0'
info:
  title: Pet Store
  version: 1.0.0
tags:
  - name: pets
    description: Everything about pets
  - name: store
paths:
  /pets:
    parameters:
      - name: limit
        in: query
        type: integer
    get:
      operationId: listPets
      tags:
        - pets
      responses:
        '200':
          description: ok
    post:
      operationId: createPet
      tags:
        - pets
        - admin
      responses:
        '201':
          description: created
  /orders:
    get:
      operationId: listOrders
      tags:
        - store
      responses:
        '200':
          description: ok
    x-internal:
      note: hidden
  x-vendor:
    get:
      tags:
        - pets
definitions:
  Pet:
    type: object
"""
