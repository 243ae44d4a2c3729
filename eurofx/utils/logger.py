"""Logging setup shared by eurofx modules.

Every module holds a module-level ``LOGGER = get_logger(__name__)``. Feed
fetches, cache writes and TTL decisions log at INFO, cache hits at DEBUG and
degraded paths (no ``Last-Modified`` header, conflicting duplicate rates, a
lost cache insert race) at WARNING.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def get_logger(name: str = "eurofx") -> logging.Logger:
    """Return the ``name`` logger, installing a root handler on the first call.

    ``basicConfig`` is a no-op when the host application already configured
    logging, so embedding eurofx keeps the caller's handlers.
    """
    global _configured
    if not _configured:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        _configured = True
    return logging.getLogger(name)
