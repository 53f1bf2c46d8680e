"""Structural deep compare producing raw, unclassified difference facts."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from .models import (
    DiffKind,
    Side,
    RawDiffSet,
    KeyPresence,
    TypeMismatch,
    ScalarMismatch,
    ArrayDelta,
)
from .utils import (
    build_path,
    display_path,
    get_type_name,
    multiset_difference,
    values_equal,
)

logger = logging.getLogger(__name__)


class Differ:
    """
    Walks two parsed documents and reports where they diverge.

    Handles:
    - Keys present on one side only
    - JSON type mismatches (null vs scalar counts as a value mismatch)
    - Scalar value mismatches
    - Unequal arrays, reported whole with their multiset differences

    The differ knows nothing about array order policy; that is decided when
    the facts are classified.
    """

    def __init__(self):
        self.fields_checked = 0
        self._kinds: frozenset[DiffKind] = frozenset(DiffKind)
        self._result: Optional[RawDiffSet] = None

    def compare(
        self,
        left: Any,
        right: Any,
        requested_kinds: Iterable[DiffKind] = tuple(DiffKind)
    ) -> RawDiffSet:
        """
        Compare two tree values.

        Args:
            left: The left document
            right: The right document
            requested_kinds: Kinds the caller will report; facts that could
                never become one of them are not collected

        Returns:
            RawDiffSet in path-discovery order
        """
        self.fields_checked = 0
        self._kinds = frozenset(requested_kinds)
        self._result = RawDiffSet()

        self._diff(left, right, "")

        logger.debug("Checked %d fields, found %d raw differences",
                     self.fields_checked, len(self._result))
        return self._result

    def _diff(self, left: Any, right: Any, path: str):
        self.fields_checked += 1
        left_type = get_type_name(left)
        right_type = get_type_name(right)

        if left_type != right_type:
            composite = ("array", "object")
            if "null" in (left_type, right_type) and not (
                left_type in composite or right_type in composite
            ):
                self._add_scalar_mismatch(path, left, right)
            elif DiffKind.TYPE in self._kinds:
                self._result.add(TypeMismatch(
                    path=display_path(path),
                    left_type=left_type,
                    right_type=right_type
                ))
            return

        if isinstance(left, dict):
            self._diff_objects(left, right, path)
        elif isinstance(left, list):
            self._diff_arrays(left, right, path)
        elif not values_equal(left, right):
            self._add_scalar_mismatch(path, left, right)

    def _diff_objects(self, left: dict, right: dict, path: str):
        """Compare two objects, left keys first, then right-only keys."""
        for key, left_value in left.items():
            child_path = build_path(path, str(key))
            if key in right:
                self._diff(left_value, right[key], child_path)
            else:
                self._add_key_presence(child_path, Side.LEFT)

        for key in right:
            if key not in left:
                self._add_key_presence(build_path(path, str(key)), Side.RIGHT)

    def _diff_arrays(self, left: list, right: list, path: str):
        """Record unequal arrays whole; elements are never descended into."""
        # Order-sensitive classification turns array deltas into value records
        if DiffKind.ARRAY not in self._kinds and DiffKind.VALUE not in self._kinds:
            return
        if values_equal(left, right):
            return

        left_only, right_only = multiset_difference(left, right)
        self._result.add(ArrayDelta(
            path=display_path(path),
            left_only=tuple(left_only),
            right_only=tuple(right_only),
            left=left,
            right=right
        ))

    def _add_key_presence(self, path: str, side: Side):
        if DiffKind.KEY in self._kinds:
            self._result.add(KeyPresence(path=path, side=side))

    def _add_scalar_mismatch(self, path: str, left: Any, right: Any):
        if DiffKind.VALUE in self._kinds:
            self._result.add(ScalarMismatch(
                path=display_path(path),
                left=left,
                right=right
            ))
