"""Saves sessions to disk and loads them back for replay."""

from __future__ import annotations

import json
import logging
from typing import Any

from .exceptions import FileAccessError, SchemaError
from .models import (
    DiffKind,
    DiffRecord,
    Session,
    Side,
    SourceLabels,
    KeyDiff,
    TypeDiff,
    ValueDiff,
    ArrayDiff,
)

logger = logging.getLogger(__name__)

SESSION_FORMAT = "datadiff-session"
SESSION_VERSION = 1

# Kind -> (record class, string fields besides path)
RECORD_FIELDS = {
    DiffKind.KEY: (KeyDiff, ()),
    DiffKind.TYPE: (TypeDiff, ("left_type", "right_type")),
    DiffKind.VALUE: (ValueDiff, ("left_value", "right_value")),
    DiffKind.ARRAY: (ArrayDiff, ("value",)),
}


def save(session: Session, path: str):
    """
    Write a session to a JSON file.

    Raises:
        FileAccessError: If the file cannot be written
    """
    data = {"format": SESSION_FORMAT, "version": SESSION_VERSION}
    data.update(session.to_dict())

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e

    logger.info("Saved session with %d records to %s", len(session.records), path)


def load(path: str) -> Session:
    """
    Read a session back from a JSON file.

    The file must be self-consistent: every record's kind has to be one of
    the kinds the file says were requested. Corrupt files are rejected,
    never repaired.

    Raises:
        FileAccessError: If the file cannot be read
        SchemaError: If the content is not a valid session
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e
    except ValueError as e:
        raise SchemaError(path, f"not valid JSON ({e})") from e

    session = session_from_dict(data, path)
    logger.debug("Loaded session with %d records from %s", len(session.records), path)
    return session


def session_from_dict(data: Any, path: str = "<memory>") -> Session:
    """Validate a decoded session document and build a Session from it."""
    if not isinstance(data, dict):
        raise SchemaError(path, "top level must be an object")
    if data.get("format") != SESSION_FORMAT:
        raise SchemaError(path, f"format marker must be '{SESSION_FORMAT}'")

    version = data.get("version")
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        raise SchemaError(path, "missing or invalid version")
    if version > SESSION_VERSION:
        raise SchemaError(
            path, f"version {version} is newer than supported version {SESSION_VERSION}"
        )

    raw_kinds = data.get("requested_kinds")
    if not isinstance(raw_kinds, list) or not raw_kinds:
        raise SchemaError(path, "requested_kinds must be a non-empty list")
    requested_kinds = frozenset(_parse_kind(k, path) for k in raw_kinds)

    order_sensitive = data.get("order_sensitive")
    if not isinstance(order_sensitive, bool):
        raise SchemaError(path, "order_sensitive must be true or false")

    sources = data.get("sources")
    if not isinstance(sources, dict) or not all(
        isinstance(sources.get(side.value), str) for side in Side
    ):
        raise SchemaError(path, "sources must name a left and a right document")

    excluded_paths = data.get("excluded_paths", [])
    if not isinstance(excluded_paths, list) or not all(
        isinstance(p, str) for p in excluded_paths
    ):
        raise SchemaError(path, "excluded_paths must be a list of strings")

    raw_records = data.get("records")
    if not isinstance(raw_records, list):
        raise SchemaError(path, "records must be a list")

    records = []
    for index, raw in enumerate(raw_records):
        record = _parse_record(raw, index, path)
        if record.kind not in requested_kinds:
            raise SchemaError(
                path,
                f"record {index} has kind '{record.kind.value}', "
                f"which the file does not list in requested_kinds"
            )
        records.append(record)

    return Session(
        requested_kinds=requested_kinds,
        order_sensitive=order_sensitive,
        records=tuple(records),
        sources=SourceLabels(left=sources["left"], right=sources["right"]),
        excluded_paths=tuple(excluded_paths),
    )


def _parse_kind(value: Any, path: str) -> DiffKind:
    try:
        return DiffKind(value)
    except ValueError:
        raise SchemaError(path, f"unknown difference kind {value!r}") from None


def _parse_side(value: Any, index: int, path: str) -> Side:
    try:
        return Side(value)
    except ValueError:
        raise SchemaError(path, f"record {index} has unknown side {value!r}") from None


def _parse_record(raw: Any, index: int, path: str) -> DiffRecord:
    """Build one typed record, checking every field it needs."""
    if not isinstance(raw, dict):
        raise SchemaError(path, f"record {index} must be an object")

    kind = _parse_kind(raw.get("kind"), path)
    record_class, string_fields = RECORD_FIELDS[kind]

    fields = {}
    for name in ("path",) + string_fields:
        value = raw.get(name)
        if not isinstance(value, str):
            raise SchemaError(path, f"record {index} is missing string field '{name}'")
        fields[name] = value

    if kind in (DiffKind.KEY, DiffKind.ARRAY):
        fields["side"] = _parse_side(raw.get("side"), index, path)

    return record_class(**fields)
