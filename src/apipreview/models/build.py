"""Build results and the success/failure outcome union."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from apipreview.models.errors import Diagnostic, diagnostic_from_payload


class BuildResult(BaseModel):
    """Output of one build attempt: parsed model plus diagnostics.

    ``errors`` is ``None`` when the builder produced no usable diagnostic
    sequence (internal fault or malformed error shape).
    """

    model_config = ConfigDict(frozen=True)

    specs: dict[str, Any] | None = None
    errors: tuple[Diagnostic, ...] | None = None
    warnings: tuple[Diagnostic, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> BuildResult:
        """Normalize a raw payload from a foreign builder into typed diagnostics.

        This is the entry point for builders that report plain mappings
        (``{"specs": ..., "errors": [...], "warnings": [...]}``), such as a
        remote build backend; ``RemotePayloadBuilder`` routes through it.
        In-process builders may construct ``BuildResult`` directly.

        A non-sequence ``errors`` value becomes ``None``; non-mapping
        ``specs`` becomes ``None``.
        """
        specs = payload.get("specs")
        raw_errors = payload.get("errors")
        raw_warnings = payload.get("warnings")

        errors = None
        if isinstance(raw_errors, (list, tuple)):
            errors = tuple(diagnostic_from_payload(e) for e in raw_errors)

        warnings: tuple = ()
        if isinstance(raw_warnings, (list, tuple)):
            warnings = tuple(diagnostic_from_payload(w, level="warning") for w in raw_warnings)

        return cls(
            specs=dict(specs) if isinstance(specs, Mapping) else None,
            errors=errors,
            warnings=warnings,
        )


class BuildFailedError(Exception):
    """Raised by a builder to report failure; carries the same result shape."""

    def __init__(self, result: BuildResult) -> None:
        self.result = result
        count = len(result.errors) if result.errors is not None else 0
        super().__init__(f"Document build failed ({count} error(s))")


@dataclass(frozen=True)
class BuildSuccess:
    result: BuildResult


@dataclass(frozen=True)
class BuildFailure:
    result: BuildResult


BuildOutcome = BuildSuccess | BuildFailure
