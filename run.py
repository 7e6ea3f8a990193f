"""Entry point for the Volunteer Hub API.

This script launches the FastAPI application under Uvicorn.  It is
intended to be executed from the project root, for example under Docker
or a process manager where you only specify a single Python file to run.

Configuration such as MONGODB_URI (or DB_USER/DB_PASS), PORT and
LOG_LEVEL is read from the environment; see
``volunteer_hub_api/app/core/config.py`` for the full list.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from volunteer_hub_api.app.core.config import settings
from volunteer_hub_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted.

    Host and port come from the ``HOST`` and ``PORT`` environment
    variables.  Defaults are ``0.0.0.0`` and ``5000``.
    """
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Volunteer server is running on port %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
