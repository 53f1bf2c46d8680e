"""Writes rendered documents to disk and opens them in a browser."""

from __future__ import annotations

import logging
import webbrowser
from pathlib import Path

from .exceptions import FileAccessError

logger = logging.getLogger(__name__)


def write_document(content: str, path: str) -> Path:
    """
    Write a rendered document to a file.

    Returns:
        The absolute path written

    Raises:
        FileAccessError: If the file cannot be written
    """
    target = Path(path)
    try:
        target.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e

    logger.info("Wrote document to %s", target)
    return target.resolve()


def open_document(path: Path) -> bool:
    """
    Best-effort attempt to show a document in the system browser.

    Failure is logged and reported through the return value, never raised.
    """
    uri = Path(path).resolve().as_uri()
    try:
        opened = webbrowser.open(uri)
    except (webbrowser.Error, OSError) as e:
        logger.warning("Could not open %s in a browser: %s", uri, e)
        return False

    if not opened:
        logger.warning("No browser available to open %s", uri)
    return opened
