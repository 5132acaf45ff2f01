from __future__ import annotations

import logging

from travelkitchen.shared.config.settings import settings

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_NOISY = ("httpx", "httpcore", "pymongo", "urllib3")


def setup_logging() -> None:
    """Configure the root logger once from LOG_LEVEL."""
    lvl = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=lvl, format=_FORMAT)
    else:
        root.setLevel(lvl)
    # Reduce verbosity of noisy loggers
    for noisy in _NOISY:
        logging.getLogger(noisy).setLevel(logging.WARNING)
