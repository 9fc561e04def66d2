"""Issues builds and merges both result channels into one ``BuildOutcome``."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from apipreview.models.build import (
    BuildFailedError,
    BuildFailure,
    BuildOutcome,
    BuildResult,
    BuildSuccess,
)
from apipreview.service.builder import DocumentBuilder

logger = logging.getLogger("apipreview.pipeline")


class BuildInvoker:
    """Starts one build task per gate pass.

    Earlier in-flight builds are never cancelled; each completion is handed
    to the handler as it arrives, so the last build to finish wins.
    """

    def __init__(self, builder: DocumentBuilder) -> None:
        self._builder = builder
        self._pending: set[asyncio.Task[BuildOutcome]] = set()

    @property
    def pending(self) -> set[asyncio.Task[BuildOutcome]]:
        return set(self._pending)

    async def build(self, text: str) -> BuildOutcome:
        """Await one build and map it onto the success/failure union.

        Never raises: unexpected builder faults become a failure with no
        diagnostic sequence.
        """
        try:
            result = await self._builder.build_docs(text)
        except BuildFailedError as exc:
            return BuildFailure(exc.result)
        except Exception:
            logger.exception("document builder raised unexpectedly")
            return BuildFailure(BuildResult(errors=None))
        return BuildSuccess(result)

    def submit(self, text: str, on_outcome: Callable[[BuildOutcome], None]) -> asyncio.Task[BuildOutcome]:
        """Schedule a build on the running loop; ``on_outcome`` runs on completion."""

        async def _run() -> BuildOutcome:
            outcome = await self.build(text)
            on_outcome(outcome)
            return outcome

        task = asyncio.get_running_loop().create_task(_run())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task
