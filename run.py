"""Entry point for the GeoJot API server.

Serves ``geojot_api.app.main:app`` with Uvicorn.  Host and port are read
from ``GEOJOT_HOST`` and ``GEOJOT_PORT`` (defaults ``0.0.0.0`` and
``8000``); the rest of the configuration comes from the environment
variables documented in ``geojot_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging
import os
from uvicorn import Config, Server

from geojot_api.app.core.config import settings
from geojot_api.app.main import app

logger = logging.getLogger(__name__)


async def main() -> None:
    host = os.getenv("GEOJOT_HOST", "0.0.0.0")
    port = int(os.getenv("GEOJOT_PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logger.info("Serving %s on %s:%s", settings.project_name, host, port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
