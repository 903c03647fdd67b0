from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Set the level of the `healthdata` logger tree.

    Notes:
    - Uvicorn already configures handlers; this only sets levels for our package.
    - `HDR_LOG_LEVEL=DEBUG` also surfaces every permission denial with its reason.
    """

    normalized = level.upper()
    logging.getLogger("healthdata").setLevel(normalized)
    logging.getLogger("healthdata").propagate = True
