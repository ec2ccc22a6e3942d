"""Logger factory shared across data, calculation, and dashboard layers."""

from __future__ import annotations

import logging

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Return a module logger with a single stream handler on the package root."""
    root = logging.getLogger('src')
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(level)
    return logging.getLogger(name)
