"""
Persistent server entrypoint: `python -m app` (run from backend/).

Configuration problems are reported before uvicorn starts and exit with
status 1. Database failures during startup surface through the lifespan;
uvicorn then exits non-zero as well.
"""

import logging
import sys

import uvicorn

from app.config import settings
from app.exceptions import ConfigurationError
from app.main import setup_logging

logger = logging.getLogger("app")


def main() -> int:
    setup_logging(settings.log_level)
    try:
        settings.validate_required()
    except ConfigurationError as e:
        logger.critical("Invalid configuration: %s | Context: %s", e.message, e.context)
        return 1

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
