"""
Logging setup shared by the sync services, routers and scripts.

One root configuration, applied on the first get_logger() call:
  console   -> LOG_LEVEL from settings
  file      -> <repo>/logs/vms_sync.log, rotated at 5 MB, 10 backups kept
Vendor tags ("[dahua]", "[naiz]", ...) go in the message, not the logger name.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from vms_sync.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
os.makedirs(LOG_DIR, exist_ok=True)

_configured = False


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(fmt)

    # 10 x 5 MB of sync history
    file_handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, "vms_sync.log"),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(LOG_LEVEL)
    file_handler.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Module logger: `logger = get_logger(__name__)`."""
    _configure_root_logger()
    return logging.getLogger(name)
