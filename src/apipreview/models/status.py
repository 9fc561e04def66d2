"""Pipeline status codes persisted under the ``progress`` key."""

from __future__ import annotations

from enum import StrEnum


class StatusCode(StrEnum):
    PROGRESS_UNSAVED = "progress-unsaved"
    SUCCESS_PROCESS = "success-process"
    ERROR_YAML = "error-yaml"
    ERROR_SWAGGER = "error-swagger"
    ERROR_GENERAL = "error-general"
