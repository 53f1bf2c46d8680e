"""Turns raw comparison facts into typed difference records."""

from __future__ import annotations

import logging
from typing import Iterable

from .models import (
    DiffKind,
    DiffRecord,
    Side,
    RawDiffSet,
    KeyPresence,
    TypeMismatch,
    ScalarMismatch,
    ArrayDelta,
    KeyDiff,
    TypeDiff,
    ValueDiff,
    ArrayDiff,
)
from .utils import build_path, render_value, serialize_value, values_equal

logger = logging.getLogger(__name__)


def classify(
    raw: RawDiffSet,
    order_sensitive: bool,
    requested_kinds: Iterable[DiffKind]
) -> tuple[DiffRecord, ...]:
    """
    Classify raw facts into difference records.

    Arrays follow the order policy: without it, every element missing from
    one side becomes an ArrayDiff; with it, arrays of equal length yield one
    ValueDiff per differing index and arrays of unequal length one ValueDiff
    holding both arrays whole. Records of kinds not requested are dropped.

    Args:
        raw: Facts from the comparison engine, in discovery order
        order_sensitive: Whether array positions matter
        requested_kinds: Kinds to keep

    Returns:
        Records in discovery order
    """
    kinds = frozenset(requested_kinds)
    records: list[DiffRecord] = []

    for fact in raw.facts:
        if isinstance(fact, KeyPresence):
            records.append(KeyDiff(path=fact.path, side=fact.side))
        elif isinstance(fact, TypeMismatch):
            records.append(TypeDiff(
                path=fact.path,
                left_type=fact.left_type,
                right_type=fact.right_type
            ))
        elif isinstance(fact, ScalarMismatch):
            records.append(ValueDiff(
                path=fact.path,
                left_value=render_value(fact.left),
                right_value=render_value(fact.right)
            ))
        elif isinstance(fact, ArrayDelta):
            if order_sensitive:
                records.extend(_classify_ordered_array(fact))
            else:
                records.extend(_classify_unordered_array(fact))
        else:
            raise TypeError(f"Unknown raw difference: {type(fact).__name__}")

    kept = tuple(r for r in records if r.kind in kinds)
    if len(kept) != len(records):
        logger.debug("Dropped %d records of unrequested kinds", len(records) - len(kept))
    return kept


def _classify_unordered_array(delta: ArrayDelta) -> list[ArrayDiff]:
    """One record per element only one side holds."""
    records = [
        ArrayDiff(path=delta.path, value=render_value(item), side=Side.LEFT)
        for item in delta.left_only
    ]
    records.extend(
        ArrayDiff(path=delta.path, value=render_value(item), side=Side.RIGHT)
        for item in delta.right_only
    )
    return records


def _classify_ordered_array(delta: ArrayDelta) -> list[ValueDiff]:
    """Index-by-index value records, or the whole arrays if lengths differ."""
    if len(delta.left) != len(delta.right):
        return [ValueDiff(
            path=delta.path,
            left_value=serialize_value(delta.left),
            right_value=serialize_value(delta.right)
        )]

    # Root arrays carry the "$" display path; indices attach to it directly
    records = []
    for i, (left_item, right_item) in enumerate(zip(delta.left, delta.right)):
        if not values_equal(left_item, right_item):
            records.append(ValueDiff(
                path=build_path(delta.path, i),
                left_value=render_value(left_item),
                right_value=render_value(right_item)
            ))
    return records
