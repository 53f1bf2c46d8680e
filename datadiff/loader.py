"""Reads JSON and YAML documents into plain Python trees."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .exceptions import DocumentParseError, FileAccessError
from .utils import is_yaml_file

logger = logging.getLogger(__name__)


def load_document(path: str) -> Any:
    """
    Load a document from a JSON or YAML file.

    Files ending in `.json` are parsed strictly as JSON; anything else goes
    through YAML (which also accepts most JSON).

    Args:
        path: Path to the document

    Returns:
        The parsed tree value

    Raises:
        FileAccessError: If the file cannot be read
        DocumentParseError: If the content is malformed
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise DocumentParseError(path, f"not valid UTF-8 ({e.reason})") from e

    if path.lower().endswith(".json"):
        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise DocumentParseError(path, f"{e.msg} at line {e.lineno}, column {e.colno}") from e
    else:
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DocumentParseError(path, str(e)) from e

    logger.debug("Loaded %s document %s", "YAML" if is_yaml_file(path) else "JSON", path)
    return document
