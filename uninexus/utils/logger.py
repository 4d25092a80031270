"""
Logging setup for the UniNexus read path.

Everything logs under the ``uninexus`` logger to stdout. LOG_LEVEL sets the
package level; CACHE_LOG_LEVEL overrides it for ``uninexus.cache`` only, since
per-key hit/miss lines at DEBUG drown out everything else.
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CACHE_LOG_LEVEL = os.getenv("CACHE_LOG_LEVEL", "").upper()

logger = logging.getLogger("uninexus")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

logger.propagate = False

if CACHE_LOG_LEVEL:
    logging.getLogger("uninexus.cache").setLevel(CACHE_LOG_LEVEL)

# Driver heartbeat/topology messages
logging.getLogger("pymongo").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Child of the package logger, e.g. ``get_logger("cache.store")``."""
    if name:
        return logging.getLogger(f"uninexus.{name}")
    return logger
