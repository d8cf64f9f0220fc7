"""Logging setup for texloader."""

import logging
import threading

logger = logging.getLogger("texloader")

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_setup_lock = threading.Lock()


def setup_logging(level: str = "INFO", force: bool = False) -> None:
    """
    Configure logging without clobbering host-app handlers by default.

    With no root handlers (or `force`), installs a stream handler on the root
    logger. Otherwise only the `texloader` logger level is changed.
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        logger.warning("Invalid log level '%s', defaulting to INFO", level)
        numeric_level = logging.INFO

    with _setup_lock:
        root = logging.getLogger()
        if force or not root.handlers:
            logging.basicConfig(
                level=numeric_level,
                format=_FORMAT,
                handlers=[logging.StreamHandler()],
                force=force,
            )
            return

        # Embedded mode: leave unrelated libraries alone.
        logger.setLevel(numeric_level)
