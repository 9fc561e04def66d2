"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the preview core and its REST surface.

    Values are read from ``APIPREVIEW_``-prefixed environment variables and
    from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="APIPREVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"
    mode: Literal["edit", "preview"] = "edit"

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # Cloud Run injects PORT; takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (PORT takes precedence)."""
        return self.port if self.port is not None else self.api_server_port

    # Pipeline
    live_render: bool = True
    state_dir: Path | None = None  # one JSON file per key-value slot
    max_document_size: int = 5_000_000

    # Backend health
    backend_health_url: str | None = None
    backend_health_interval: float = 5.0
    backend_health_timeout: float = 2.0

    # Remote builds; the local YAML builder is used when unset
    build_backend_url: str | None = None
    build_backend_timeout: float = 10.0
