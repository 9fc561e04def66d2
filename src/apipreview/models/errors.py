"""Structured diagnostics with YAML source position tracking."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

KeyPath = tuple[str | int, ...]


class SourceSpan(BaseModel):
    """Points to exact location in YAML source for error reporting (1-based)."""

    model_config = ConfigDict(frozen=True)

    file: str = "<document>"
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


class YamlErrorDetail(BaseModel):
    """Payload of a structural (YAML-level) parse failure.

    Foreign builders may attach arbitrary extra fields; they are kept as-is.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    message: str = ""
    line: int | None = None
    column: int | None = None
    context: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> YamlErrorDetail:
        if isinstance(payload, YamlErrorDetail):
            return payload
        if isinstance(payload, Mapping):
            return cls.model_validate(dict(payload))
        return cls(message=str(payload))


class StructuralDiagnostic(BaseModel):
    """The document failed to parse at all."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["structural"] = "structural"
    yaml_error: YamlErrorDetail


class SemanticDiagnostic(BaseModel):
    """The document parsed but a content check failed (or warned)."""

    model_config = ConfigDict(frozen=True, extra="allow")

    kind: Literal["semantic"] = "semantic"
    code: str = ""
    message: str = ""
    level: Literal["error", "warning"] = "error"
    path: KeyPath = ()
    span: SourceSpan | None = None

    @classmethod
    def from_payload(cls, payload: Any, level: Literal["error", "warning"] = "error"):
        if isinstance(payload, SemanticDiagnostic):
            return payload
        if isinstance(payload, Mapping):
            data = {k: v for k, v in payload.items() if k != "kind"}
            data.setdefault("level", level)
            if isinstance(data.get("path"), list):
                data["path"] = tuple(data["path"])
            return cls.model_validate(data)
        return cls(message=str(payload), level=level)


Diagnostic = Annotated[StructuralDiagnostic | SemanticDiagnostic, Field(discriminator="kind")]


def diagnostic_from_payload(
    payload: Any, level: Literal["error", "warning"] = "error"
) -> StructuralDiagnostic | SemanticDiagnostic:
    """Build the typed diagnostic variant for one raw builder payload entry."""
    if isinstance(payload, (StructuralDiagnostic, SemanticDiagnostic)):
        return payload
    if isinstance(payload, Mapping) and payload.get("yamlError"):
        return StructuralDiagnostic(yaml_error=YamlErrorDetail.from_payload(payload["yamlError"]))
    return SemanticDiagnostic.from_payload(payload, level=level)
