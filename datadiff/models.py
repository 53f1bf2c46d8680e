"""Data models for datadiff."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class DiffKind(Enum):
    KEY = "key"
    TYPE = "type"
    VALUE = "value"
    ARRAY = "array"

    @property
    def title(self) -> str:
        return f"{self.value.capitalize()} Differences"


# Rendering and grouping order
KIND_ORDER = (DiffKind.KEY, DiffKind.TYPE, DiffKind.VALUE, DiffKind.ARRAY)


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class SourceLabels:
    """Display names of the two compared documents."""
    left: str
    right: str

    def to_dict(self) -> dict:
        return {"left": self.left, "right": self.right}


@dataclass(frozen=True)
class KeyDiff:
    """A field that exists on one side only."""
    kind: ClassVar[DiffKind] = DiffKind.KEY
    path: str
    side: Side

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "path": self.path,
            "side": self.side.value,
        }


@dataclass(frozen=True)
class TypeDiff:
    """A field whose JSON type differs between the two sides."""
    kind: ClassVar[DiffKind] = DiffKind.TYPE
    path: str
    left_type: str
    right_type: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "path": self.path,
            "left_type": self.left_type,
            "right_type": self.right_type,
        }


@dataclass(frozen=True)
class ValueDiff:
    """A field whose rendered value differs between the two sides."""
    kind: ClassVar[DiffKind] = DiffKind.VALUE
    path: str
    left_value: str
    right_value: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "path": self.path,
            "left_value": self.left_value,
            "right_value": self.right_value,
        }


@dataclass(frozen=True)
class ArrayDiff:
    """An array element present only in `side`."""
    kind: ClassVar[DiffKind] = DiffKind.ARRAY
    path: str
    value: str
    side: Side

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "path": self.path,
            "value": self.value,
            "side": self.side.value,
        }


DiffRecord = Union[KeyDiff, TypeDiff, ValueDiff, ArrayDiff]


@dataclass(frozen=True)
class Session:
    """
    Immutable result of a completed comparison run.

    Built either from a fresh comparison or from a saved session file; the
    two are indistinguishable once constructed.
    """
    requested_kinds: frozenset[DiffKind]
    order_sensitive: bool
    records: tuple[DiffRecord, ...]
    sources: SourceLabels
    excluded_paths: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.requested_kinds:
            raise ValueError("A session needs at least one requested kind")
        for record in self.records:
            if record.kind not in self.requested_kinds:
                raise ValueError(
                    f"Record at {record.path} has kind {record.kind.value}, "
                    f"which was not requested"
                )

    def records_of(self, kind: DiffKind) -> list[DiffRecord]:
        return [r for r in self.records if r.kind == kind]

    def to_dict(self) -> dict:
        return {
            "requested_kinds": [k.value for k in KIND_ORDER if k in self.requested_kinds],
            "order_sensitive": self.order_sensitive,
            "sources": self.sources.to_dict(),
            "excluded_paths": list(self.excluded_paths),
            "records": [r.to_dict() for r in self.records],
        }


# Raw facts emitted by the comparison engine


@dataclass(frozen=True)
class KeyPresence:
    path: str
    side: Side


@dataclass(frozen=True)
class TypeMismatch:
    path: str
    left_type: str
    right_type: str


@dataclass(frozen=True)
class ScalarMismatch:
    path: str
    left: Any
    right: Any


@dataclass(frozen=True)
class ArrayDelta:
    """Two unequal arrays found at the same path."""
    path: str
    left_only: tuple
    right_only: tuple
    left: list
    right: list


RawFact = Union[KeyPresence, TypeMismatch, ScalarMismatch, ArrayDelta]


@dataclass
class RawDiffSet:
    """Unclassified comparison output, kept in path-discovery order."""
    facts: list[RawFact] = field(default_factory=list)

    def add(self, fact: RawFact):
        self.facts.append(fact)

    @property
    def key_only_left(self) -> list[str]:
        return [f.path for f in self.facts
                if isinstance(f, KeyPresence) and f.side == Side.LEFT]

    @property
    def key_only_right(self) -> list[str]:
        return [f.path for f in self.facts
                if isinstance(f, KeyPresence) and f.side == Side.RIGHT]

    @property
    def type_mismatches(self) -> list[TypeMismatch]:
        return [f for f in self.facts if isinstance(f, TypeMismatch)]

    @property
    def scalar_mismatches(self) -> list[ScalarMismatch]:
        return [f for f in self.facts if isinstance(f, ScalarMismatch)]

    @property
    def arrays(self) -> list[ArrayDelta]:
        return [f for f in self.facts if isinstance(f, ArrayDelta)]

    def __len__(self) -> int:
        return len(self.facts)
