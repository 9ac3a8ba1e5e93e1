"""Dotted field-path lookups over decoded JSON trees."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence


class ValueKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


SCALAR_KINDS = frozenset({ValueKind.STRING, ValueKind.NUMBER, ValueKind.BOOLEAN})


class Outcome(str, Enum):
    FOUND = "found"
    MISSING = "missing"
    NOT_SCALAR = "not_scalar"


def kind_of(value: Any) -> ValueKind:
    """Classify a decoded JSON value."""

    # bool before number: bool is an int subclass.
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if value is None:
        return ValueKind.NULL
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, Sequence):
        return ValueKind.SEQUENCE
    raise TypeError(f"Unsupported JSON value type: {type(value).__name__}")


@dataclass(frozen=True)
class Lookup:
    """Result of resolving a field path."""

    path: str
    outcome: Outcome
    value: Any = None
    kind: Optional[ValueKind] = None

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.FOUND


def _step(node: Any, segment: str) -> tuple:
    kind = kind_of(node)
    if kind is ValueKind.MAPPING:
        if segment in node:
            return True, node[segment]
        return False, None
    if kind is ValueKind.SEQUENCE and segment.isdigit():
        index = int(segment)
        if index < len(node):
            return True, node[index]
    return False, None


def resolve(tree: Any, path: str) -> Lookup:
    """Walk ``path`` left to right through ``tree``.

    Segments are separated by dots; a numeric segment indexes into an array.
    Only string, number and boolean leaves count as found.
    """

    segments = path.split(".")
    node = tree
    for segment in segments:
        if not segment:
            return Lookup(path, Outcome.MISSING)
        present, node = _step(node, segment)
        if not present:
            return Lookup(path, Outcome.MISSING)
    kind = kind_of(node)
    if kind not in SCALAR_KINDS:
        return Lookup(path, Outcome.NOT_SCALAR, node, kind)
    return Lookup(path, Outcome.FOUND, node, kind)


def format_scalar(value: Any) -> str:
    """Render a scalar the way it would appear unquoted in JSON."""

    kind = kind_of(value)
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER and isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
