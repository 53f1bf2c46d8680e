"""Utility functions for datadiff."""

from __future__ import annotations

import json
import math
from typing import Any

import yaml


ROOT_PATH = "$"


def is_numeric(value: Any) -> bool:
    """Check if a value is numeric (int or float)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def get_type_name(value: Any) -> str:
    """Get the JSON type name for a value."""
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif is_numeric(value):
        return "number"
    elif isinstance(value, list):
        return "array"
    elif isinstance(value, dict):
        return "object"
    # Strings, plus the dates and timestamps PyYAML produces
    return "string"


def build_path(parent_path: str, key: str | int) -> str:
    """Build a display path from parent path and key or index."""
    if isinstance(key, int) and not isinstance(key, bool):
        return f"{parent_path}[{key}]"
    if not parent_path:
        return str(key)
    return f"{parent_path}.{key}"


def display_path(path: str) -> str:
    """Paths are empty at the document root."""
    return path or ROOT_PATH


def values_equal(left: Any, right: Any) -> bool:
    """Deep structural equality; booleans never equal numbers."""
    if is_numeric(left) and is_numeric(right):
        # Two NaNs count as equal
        if (isinstance(left, float) and isinstance(right, float)
                and math.isnan(left) and math.isnan(right)):
            return True
        return left == right

    if type(left) != type(right):
        return False

    if isinstance(left, dict):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[k], right[k]) for k in left)

    if isinstance(left, list):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))

    return left == right


def multiset_difference(left: list, right: list) -> tuple[list, list]:
    """
    Compute the elements of each list with no deep-equal partner in the other.

    Each element of `right` matches at most one element of `left`, so
    duplicates count.

    Returns:
        Tuple of (left_only, right_only), each in original order
    """
    right_matched = [False] * len(right)
    left_only = []

    for left_item in left:
        for j, right_item in enumerate(right):
            if not right_matched[j] and values_equal(left_item, right_item):
                right_matched[j] = True
                break
        else:
            left_only.append(left_item)

    right_only = [item for j, item in enumerate(right) if not right_matched[j]]
    return left_only, right_only


def serialize_value(value: Any) -> str:
    """Serialize any tree value to compact JSON."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def render_value(value: Any) -> str:
    """
    Render a tree value for a difference record.

    Null, booleans, numbers, arrays and objects render in their compact JSON
    form; strings and the other scalars PyYAML produces (dates, binary, sets)
    render through `str`.
    """
    if value is None or isinstance(value, (bool, int, float, list, dict)):
        return serialize_value(value)
    return str(value)


def is_yaml_file(path: str) -> bool:
    """Check if a path names a YAML file."""
    return path.lower().endswith((".yaml", ".yml"))


def prettify(text: str, yaml_style: bool = False) -> str:
    """
    Pretty-print a rendered array or object for display.

    Scalars and anything that isn't JSON come back unchanged.
    """
    if not text.startswith(("[", "{")):
        return text
    try:
        value = json.loads(text)
    except ValueError:
        return text

    if yaml_style:
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False,
                              allow_unicode=True).rstrip("\n")
    return json.dumps(value, indent=2, ensure_ascii=False)
