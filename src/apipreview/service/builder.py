"""Document builder: YAML text -> BuildResult, raising on failure."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import httpx

from apipreview.models.build import BuildFailedError, BuildResult
from apipreview.models.errors import StructuralDiagnostic, YamlErrorDetail
from apipreview.parser.checker import DocumentChecker
from apipreview.parser.loader import TrackedLoader, YAMLSafetyError, YAMLStructureError

logger = logging.getLogger("apipreview.builder")


class DocumentBuilder(Protocol):
    """Builds a document.  Returns on success, raises ``BuildFailedError`` on failure."""

    async def build_docs(self, text: str) -> BuildResult: ...


class YamlDocumentBuilder:
    """Default builder: position-tracking YAML parse followed by outline checks.

    Parsing is CPU-bound, so it runs in a worker thread with a fresh loader
    per build.
    """

    def __init__(
        self,
        checker: DocumentChecker | None = None,
        max_document_size: int = 5_000_000,
    ) -> None:
        self._checker = checker or DocumentChecker()
        self._max_document_size = max_document_size

    async def build_docs(self, text: str) -> BuildResult:
        result, ok = await asyncio.to_thread(self._build_sync, text or "")
        if not ok:
            raise BuildFailedError(result)
        return result

    def _build_sync(self, text: str) -> tuple[BuildResult, bool]:
        loader = TrackedLoader(max_document_size=self._max_document_size)
        try:
            document, source_map = loader.load_string(text)
        except YAMLStructureError as exc:
            return BuildResult(errors=(StructuralDiagnostic(yaml_error=exc.detail),)), False
        except YAMLSafetyError as exc:
            detail = YamlErrorDetail(message=str(exc))
            return BuildResult(errors=(StructuralDiagnostic(yaml_error=detail),)), False

        if document is None:
            document = {}
        errors, warnings = self._checker.check(document, source_map)
        logger.debug("build checked: %d error(s), %d warning(s)", len(errors), len(warnings))
        if errors:
            return BuildResult(errors=tuple(errors), warnings=tuple(warnings)), False
        return BuildResult(specs=document, errors=(), warnings=tuple(warnings)), True


class RemotePayloadBuilder:
    """Builds on a remote backend that answers with a plain JSON payload.

    The document text is POSTed as ``text/plain``; the response body is
    ``{"specs": ..., "errors": [...], "warnings": [...]}``.  A 2xx answer
    with no errors is a success; anything else raises ``BuildFailedError``
    carrying the normalized payload.  Transport faults propagate.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def build_docs(self, text: str) -> BuildResult:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(
                self._url,
                content=(text or "").encode("utf-8"),
                headers={"content-type": "text/plain; charset=utf-8"},
            )
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        result = BuildResult.from_payload(payload)
        logger.debug("remote build answered %d", response.status_code)
        clean = result.errors == () or "errors" not in payload
        if response.is_success and result.specs is not None and clean:
            return result
        raise BuildFailedError(result)
