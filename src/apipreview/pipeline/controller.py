"""Preview controller: wires store changes through gates, builder and classifier."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from apipreview.models.build import BuildOutcome, BuildSuccess
from apipreview.models.status import StatusCode
from apipreview.parser.loader import TrackedLoader, YAMLSafetyError, YAMLStructureError
from apipreview.pipeline.annotations import AnnotationRouter
from apipreview.pipeline.classifier import ResultClassifier
from apipreview.pipeline.context import PipelineContext
from apipreview.pipeline.gates import ChangeGate, GateDecision, HealthGate
from apipreview.pipeline.invoker import BuildInvoker
from apipreview.pipeline.status import StatusPersister
from apipreview.service.builder import DocumentBuilder
from apipreview.service.editor import Editor
from apipreview.service.health import BackendHealthCheck
from apipreview.service.preferences import Preferences
from apipreview.service.storage import ObservableStore
from apipreview.service.tags import TagRegistry

logger = logging.getLogger("apipreview.pipeline")

DOCUMENT_KEY = "yaml"


class PreviewController:
    """Owns the :class:`PipelineContext` and every write to it.

    Registers itself as the single ``yaml`` listener on the store.  Each
    change runs the gates synchronously; a passing change schedules a build
    on the running event loop, and its completion is classified, persisted
    and annotated in one synchronous step.
    """

    def __init__(
        self,
        store: ObservableStore,
        builder: DocumentBuilder,
        editor: Editor,
        health: BackendHealthCheck,
        tags: TagRegistry,
        preferences: Preferences,
    ) -> None:
        self.context = PipelineContext()
        self._store = store
        self._editor = editor
        self._tags = tags
        self._change_gate = ChangeGate(preferences)
        self._health_gate = HealthGate(health)
        self._invoker = BuildInvoker(builder)
        self._classifier = ResultClassifier()
        self._router = AnnotationRouter(editor)
        self._status = StatusPersister(store)
        store.add_change_listener(DOCUMENT_KEY, self.update)

    # -- change handling -----------------------------------------------------

    def update(self, latest: str | None, force: bool = False) -> asyncio.Task[BuildOutcome] | None:
        """React to a new document text.  Returns the build task, if one started."""
        text = latest or ""
        self.context.latest_text = text

        if self._change_gate.check(force=force, has_result=self.context.has_result) is GateDecision.DEFER:
            self.context.is_dirty = True
            self._set_status(StatusCode.PROGRESS_UNSAVED)
            logger.debug("live render off; build deferred")
            return None

        if self._health_gate.check() is GateDecision.DROP:
            logger.debug("backend unhealthy; build dropped")
            return None

        self.context.builds_started += 1
        return self._invoker.submit(text, self._on_build)

    async def load_latest(self) -> BuildOutcome | None:
        """Force a rebuild from the stored document and clear the dirty flag."""
        latest = await self._store.load(DOCUMENT_KEY)
        task = self.update(latest, force=True)
        self.context.is_dirty = False
        if task is None:
            return None
        return await task

    async def drain(self) -> None:
        """Wait until every build started so far has been handled."""
        while self._invoker.pending:
            await asyncio.gather(*self._invoker.pending, return_exceptions=True)

    def _on_build(self, outcome: BuildOutcome) -> None:
        result = outcome.result
        if isinstance(result.specs, dict):
            self._tags.register_tags_from_specs(result.specs)

        self.context.specs = result.specs
        self.context.errors = None if isinstance(outcome, BuildSuccess) else result.errors
        self.context.warnings = result.warnings
        self.context.builds_completed += 1

        classification = self._classifier.classify(outcome)
        self._set_status(classification.status)
        self._router.route(classification)
        logger.info(
            "build classified as %s (%d error(s), %d warning(s))",
            classification.status.value,
            len(result.errors or ()),
            len(result.warnings),
        )

    def _set_status(self, status: StatusCode) -> None:
        self.context.status = status
        self._status.persist(status)

    # -- editor navigation ---------------------------------------------------

    def focus_edit(self, path: Sequence[str | int]) -> int | None:
        """Move the editor cursor to the line where ``path`` begins.

        Returns the 1-based line, or ``None`` when the current text cannot
        be parsed or does not contain the path.
        """
        try:
            _, source_map = TrackedLoader().load_string(self.context.latest_text)
        except (YAMLStructureError, YAMLSafetyError) as exc:
            logger.debug("cannot locate %r: %s", list(path), exc)
            return None
        span = source_map.get(tuple(path))
        if span is None:
            return None
        self._editor.goto_line(span.line)
        self._editor.focus()
        return span.line
