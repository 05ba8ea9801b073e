from __future__ import annotations

import logging
from threading import Lock

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configure_lock = Lock()
_is_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the ``relay`` logger tree.

    Safe to call from both the CLI entry point and the app lifespan; only the
    first call installs the handler, later calls only adjust the level.
    """
    global _is_configured
    root = logging.getLogger("relay")
    root.setLevel(level.upper())
    if _is_configured:
        return

    with _configure_lock:
        if _is_configured:
            return
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
        _is_configured = True
