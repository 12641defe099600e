"""
Logging setup for the connector service.

Library modules only create module loggers; the service (main.py) calls
setup_logging() once to attach a console handler.
"""

import logging
import sys
import threading
from typing import Optional

from .config import LOG_LEVEL

_config_lock = threading.Lock()
_CONFIGURED = False

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    global _CONFIGURED
    with _config_lock:
        if _CONFIGURED:
            return

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        root = logging.getLogger()
        root.addHandler(handler)
        root.setLevel((level or LOG_LEVEL).upper())

        # urllib3 logs full URLs, which carry the access token
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        _CONFIGURED = True
