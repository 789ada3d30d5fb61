#!/usr/bin/env python3
# main.py
"""
Entry point: serves the ridebook API with uvicorn.
"""

from __future__ import annotations

import asyncio
import sys

import uvicorn

from ridebook.common.constants import TypeMsg
from ridebook.common.logger import log_error, log_info, setup_logging
from ridebook.config import settings


async def main() -> None:
    """Starts the HTTP server."""
    setup_logging()
    await log_info(
        f"Starting ridebook API on {settings.server.APP_HOST}:{settings.server.APP_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "ridebook.api.app:app",
        host=settings.server.APP_HOST,
        port=settings.server.APP_PORT,
        reload=False,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nStopped")
    except Exception as e:
        asyncio.run(log_error(f"Fatal error: {e}", exc_info=True))
        sys.exit(1)
