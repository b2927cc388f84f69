"""
eddy/logging_config.py
----------------------
Centralized logging configuration for the keyword indexing pipeline.

Every module obtains its logger through `get_logger(__name__)`; all of them
are children of the single `eddy` logger configured here.

Log levels:
    DEBUG   — chunk counts, dropped phrases, per-keyword queue sizes
    INFO    — run milestones (documents found, document indexed, index saved)
    WARNING — recoverable issues (empty documents)
    ERROR   — failures that abort the run and propagate to the caller

The level is read from the LOG_LEVEL environment variable, or can be changed
at runtime:
    import logging
    logging.getLogger("eddy").setLevel(logging.DEBUG)
"""

import logging
import os
import sys
from typing import Optional, Union


# ── Configuration ──────────────────────────────────────────────────────────────

_LOG_FORMAT  = "%(asctime)s [%(levelname)-8s] %(name)s — %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ROOT_NAME   = "eddy"


def _env_level() -> str:
    """$LOG_LEVEL if it names a known level, else INFO."""
    name = os.getenv("LOG_LEVEL", "INFO").upper()
    return name if isinstance(logging.getLevelName(name), int) else "INFO"


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configures the 'eddy' logger with a stdout StreamHandler.

    Safe to call multiple times — handlers are not duplicated, but an explicit
    `level` is always applied.

    Args:
        level: Logging level (int or name). Defaults to $LOG_LEVEL, then INFO.
    """
    root = logging.getLogger(_ROOT_NAME)

    if level is not None:
        root.setLevel(level.upper() if isinstance(level, str) else level)

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
    if level is None:
        root.setLevel(_env_level())
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Returns a child logger under the 'eddy' namespace.

    Modules outside the package (validator, service) are nested under it so a
    single handler and level cover the whole application.

    Args:
        name: Typically __name__ of the calling module.
    """
    configure_logging()
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)
