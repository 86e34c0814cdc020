"""Logging setup for the vaultlink CLI"""

import logging
import os
import sys


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route the vaultlink logger to the current stderr.

    WARNING by default; DEBUG when verbose is set or VAULTLINK_VERBOSE is in the environment.
    Safe to call once per CLI invocation: the handler is reused and re-pointed at sys.stderr.
    """
    if os.environ.get("VAULTLINK_VERBOSE"):
        verbose = True
    level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger("vaultlink")
    logger.setLevel(level)
    handler = next((h for h in logger.handlers if getattr(h, "_vaultlink", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        handler._vaultlink = True
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)
    handler.setLevel(level)
