"""Maps a build outcome onto a status code and the annotations to apply."""

from __future__ import annotations

from dataclasses import dataclass, field

from apipreview.models.build import BuildOutcome, BuildSuccess
from apipreview.models.errors import Diagnostic, StructuralDiagnostic, YamlErrorDetail
from apipreview.models.status import StatusCode


@dataclass(frozen=True)
class Classification:
    """What the router and persister should do for one outcome.

    ``structural`` is set only for ``ERROR_YAML``; ``errors`` and
    ``warnings`` are the diagnostics to annotate individually.
    """

    status: StatusCode
    errors: tuple[Diagnostic, ...] = field(default_factory=tuple)
    warnings: tuple[Diagnostic, ...] = field(default_factory=tuple)
    structural: YamlErrorDetail | None = None


class ResultClassifier:
    def classify(self, outcome: BuildOutcome) -> Classification:
        result = outcome.result
        if isinstance(outcome, BuildSuccess):
            return Classification(status=StatusCode.SUCCESS_PROCESS, warnings=tuple(result.warnings))

        errors = result.errors
        if not errors:
            # Empty, or no usable sequence at all.
            return Classification(status=StatusCode.ERROR_GENERAL)

        first = errors[0]
        if isinstance(first, StructuralDiagnostic):
            return Classification(status=StatusCode.ERROR_YAML, structural=first.yaml_error)

        return Classification(status=StatusCode.ERROR_SWAGGER, errors=tuple(errors))
