"""Configure logging for the service and the player core."""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Send ``videoserver`` and ``player`` records to stderr at ``level``."""
    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    lvl = logging.getLevelName(str(level).upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(lvl)
    handler.setFormatter(fmt)

    for name in ("videoserver", "player"):
        log = logging.getLogger(name)
        log.setLevel(lvl)
        log.handlers.clear()
        log.addHandler(handler)
        log.propagate = False

    logging.getLogger("videoserver").info("Logging started at %s", logging.getLevelName(lvl))
