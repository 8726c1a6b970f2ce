#!/usr/bin/env python3
"""
Start the MediCare Admin API under uvicorn.

DEBUG runs a single auto-reloading process; otherwise WORKERS processes are
started and the reloader is off.
"""
import sys
import uvicorn
from medicare_api.core.config import settings
from medicare_api.core.logging import logger


def uvicorn_options() -> dict:
    options = {
        "app": "medicare_api.main:app",
        "host": settings.HOST,
        "port": settings.PORT,
        "log_level": settings.LOG_LEVEL.lower(),
        "lifespan": "on",
    }
    if settings.DEBUG:
        options.update(reload=True, use_colors=True)
    else:
        # uvicorn ignores workers when reload is on
        options.update(workers=settings.WORKERS, proxy_headers=True)
    return options


def main():
    options = uvicorn_options()
    logger.info(
        f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT}) "
        f"on {options['host']}:{options['port']}"
    )
    try:
        uvicorn.run(**options)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception as e:
        logger.error(f"Server failed to start: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
