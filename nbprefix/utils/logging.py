# nbprefix/utils/logging.py

from __future__ import annotations
import logging
import os
import sys

ROOT_LOGGER = "nbprefix"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_configured = False


def _configure_root() -> logging.Logger:
    global _configured
    root = logging.getLogger(ROOT_LOGGER)
    if _configured:
        return root

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)

    level_name = os.getenv("NBPREFIX_LOG_LEVEL", "WARNING").upper()
    root.setLevel(getattr(logging, level_name, logging.WARNING))
    root.propagate = False

    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the ``nbprefix`` hierarchy.

    The root handler is installed on first use; level comes from
    NBPREFIX_LOG_LEVEL unless the CLI overrides it with set_verbosity().
    """
    _configure_root()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def set_verbosity(verbose: int) -> None:
    """-v -> INFO, -vv -> DEBUG. 0 leaves the environment setting alone."""
    root = _configure_root()
    if verbose >= 2:
        root.setLevel(logging.DEBUG)
    elif verbose == 1:
        root.setLevel(logging.INFO)
