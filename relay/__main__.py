from __future__ import annotations

import logging
import sys

import uvicorn
from pydantic import ValidationError

from relay.core.config import get_settings
from relay.core.logging import configure_logging

logger = logging.getLogger("relay")


def main() -> int:
    configure_logging()
    try:
        settings = get_settings()
    except ValidationError as exc:
        if any(error.get("loc") == ("OPENAI_API_KEY",) for error in exc.errors()):
            logger.error("FATAL: OPENAI_API_KEY environment variable is not set.")
        else:
            logger.error("FATAL: invalid configuration.\n%s", exc)
        return 1

    configure_logging(settings.log_level)
    uvicorn.run("relay.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
