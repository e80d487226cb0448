# -*- coding: utf-8 -*-
"""Liveness endpoint (aiohttp.web).

GET / answers 200 with status, uptime and timestamp; every other path is 404.
Both carry permissive CORS headers so browser-based uptime checks work.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from aiohttp import web

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class HealthServer:
    """Small HTTP server exposing process liveness."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 3000,
        *,
        clock: Callable[[], float] = time.monotonic,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._host = host
        self._port = port
        self._clock = clock
        self._started_at = clock()
        self._runner: Optional[web.AppRunner] = None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def uptime_seconds(self) -> float:
        return max(0.0, self._clock() - self._started_at)

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self._handle_root)
        app.router.add_route("*", "/{tail:.*}", self._handle_not_found)
        return app

    async def start(self) -> None:
        """Bind and start serving. Idempotent."""
        if self._runner is not None:
            return
        runner = web.AppRunner(self.build_app(), access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, self._host, self._port)
        await site.start()
        self._runner = runner
        self._logger.info("health_server_started", health_host=self._host, health_port=self._port)

    async def stop(self) -> None:
        runner = self._runner
        self._runner = None
        if runner is not None:
            await runner.cleanup()
            self._logger.info("health_server_stopped")

    async def _handle_root(self, request: web.Request) -> web.Response:
        return web.json_response(
            {
                "status": "OK",
                "uptimeSeconds": round(self.uptime_seconds, 3),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
            headers=_CORS_HEADERS,
        )

    async def _handle_not_found(self, request: web.Request) -> web.Response:
        return web.json_response({"error": "Not found"}, status=404, headers=_CORS_HEADERS)
