"""Logging utilities.

Standard `logging` with one handler on stderr, so reports written to stdout
stay clean when piped.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        verbose: Log at DEBUG instead of INFO
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Repeated calls (tests, embedding) must not stack handlers
    for handler in list(root.handlers):
        if getattr(handler, "_datadiff", False):
            root.removeHandler(handler)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    ch._datadiff = True
    root.addHandler(ch)
