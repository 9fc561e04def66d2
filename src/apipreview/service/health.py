"""Backend health tracking, polled over HTTP with httpx."""

from __future__ import annotations

import asyncio
import contextlib
import logging

import httpx

logger = logging.getLogger("apipreview.health")


class BackendHealthCheck:
    """Keeps a cached health flag for the build backend.

    With no ``url`` the backend is local and always healthy.  Otherwise
    :meth:`start` launches a polling task that GETs ``url`` every
    ``interval`` seconds; any 2xx response counts as healthy.
    """

    def __init__(
        self,
        url: str | None = None,
        interval: float = 5.0,
        timeout: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._interval = interval
        self._timeout = timeout
        self._transport = transport
        self._healthy = True
        self._task: asyncio.Task[None] | None = None

    def is_healthy(self) -> bool:
        return self._healthy

    async def check_once(self) -> bool:
        """Probe the backend once and update the cached flag."""
        if self._url is None:
            self._healthy = True
            return True
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url)
            healthy = response.is_success
        except httpx.HTTPError as exc:
            logger.warning("backend health probe failed: %s", exc)
            healthy = False
        if healthy != self._healthy:
            logger.info("backend health changed: %s", "healthy" if healthy else "unhealthy")
        self._healthy = healthy
        return healthy

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        if self._url is None or self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._poll_loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _poll_loop(self) -> None:
        while True:
            await self.check_once()
            await asyncio.sleep(self._interval)
