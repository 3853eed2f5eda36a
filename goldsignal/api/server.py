"""In-process uvicorn server for the liveness endpoint."""

import asyncio
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

from .app import create_app

logger = structlog.get_logger(__name__)


class HealthServer:
    """Runs the liveness app on the bot's event loop."""

    def __init__(self, host: str = "0.0.0.0", port: int = 3000, app: Optional[FastAPI] = None):
        """Initialize health server.

        Args:
            host: Interface to bind to
            port: Port to listen on
            app: Application to serve, the liveness app when omitted
        """
        self.host = host
        self.port = port
        self.app = app or create_app()
        self._server: Optional[uvicorn.Server] = None
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Start serving in a background task."""
        if self._task:
            logger.warning("health_server_already_running")
            return

        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve())
        logger.info("health_server_started", host=self.host, port=self.port)

    async def stop(self) -> None:
        """Ask uvicorn to exit and wait for it."""
        if not self._task:
            return

        self._server.should_exit = True
        try:
            await self._task
        except Exception as e:
            logger.error("health_server_stop_error", error=str(e))
        self._task = None
        self._server = None
        logger.info("health_server_stopped")
