"""FastAPI liveness application.

Exposes static endpoints for external process-health monitoring.
"""

from typing import Dict

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse


def create_app() -> FastAPI:
    """Create the liveness application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="GoldSignal",
        description="Liveness endpoint for the gold signal bot",
        version="1.0.0"
    )

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        """Report that the bot process is running."""
        return "Gold Signal Bot is running"

    @app.get("/health")
    async def health() -> Dict[str, bool]:
        """Health check."""
        return {"ok": True}

    return app
