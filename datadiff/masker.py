"""Removes excluded JSONPath locations from documents before comparison."""

from __future__ import annotations

import logging
from copy import deepcopy
from functools import lru_cache
from typing import Any, Iterable

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.jsonpath import Fields, Index
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def compile_jsonpath(expression: str):
    """Compile and cache a JSONPath expression."""
    try:
        return jsonpath_parse(expression)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise ValueError(f"Invalid JSONPath expression '{expression}': {e}") from e


def _indices(segment: Index) -> tuple[int, ...]:
    # Newer jsonpath-ng releases allow several indices per segment
    indices = getattr(segment, "indices", None)
    if indices is None:
        indices = (segment.index,)
    return tuple(indices)


def _sort_key(match) -> int:
    if isinstance(match.path, Index):
        return max(_indices(match.path))
    return -1


class Masker:
    """
    Applies exclusion expressions to both documents.

    Every node matched by any expression is dropped from its parent object
    or array, e.g. `$..updatedAt` or `$.items[*].etag`.
    """

    def __init__(self, expressions: Iterable[str] = ()):
        self.expressions = tuple(expressions)
        self.removed_count = 0

    def mask(self, left: Any, right: Any) -> tuple[Any, Any]:
        """
        Apply masking to both documents.

        Args:
            left: The left document
            right: The right document

        Returns:
            Tuple of (masked_left, masked_right); the inputs are not modified
        """
        self.removed_count = 0
        if not self.expressions:
            return left, right

        masked_left = self._mask(deepcopy(left))
        masked_right = self._mask(deepcopy(right))
        logger.debug("Excluded %d nodes using %d expressions",
                     self.removed_count, len(self.expressions))
        return masked_left, masked_right

    def _mask(self, data: Any) -> Any:
        for expression in self.expressions:
            matches = compile_jsonpath(expression).find(data)
            # Remove array items back to front so pending indices stay valid
            for match in sorted(matches, key=_sort_key, reverse=True):
                self._remove(match, expression)
        return data

    def _remove(self, match, expression: str):
        """Delete a single match from its parent container."""
        if match.context is None:
            logger.warning("Exclusion '%s' matches the document root, skipping", expression)
            return

        parent = match.context.value
        segment = match.path

        if isinstance(segment, Fields) and isinstance(parent, dict):
            for name in segment.fields:
                if name in parent:
                    del parent[name]
                    self.removed_count += 1
        elif isinstance(segment, Index) and isinstance(parent, list):
            for index in sorted(_indices(segment), reverse=True):
                if -len(parent) <= index < len(parent):
                    del parent[index]
                    self.removed_count += 1
