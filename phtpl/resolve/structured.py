"""
Structured value adapters.

The path resolver does not inspect data types itself. It asks this
module for an adapter that exposes the capabilities a path segment
needs: positional access (sequences) or named access (mappings and
records). Adapters are read-only views; they never modify the data.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import fields, is_dataclass
from typing import Any, Callable, List, Optional, Protocol, Tuple


class ValueKind(enum.Enum):
    """Shape of a structured value."""
    SEQUENCE = "sequence"
    MAPPING = "map"
    RECORD = "record"


class StructuredValue(Protocol):
    """Capability interface used by the path resolver."""

    kind: ValueKind

    def index(self, idx: int) -> Optional[Any]:
        """Element at `idx` (negative counts from the end), None when out of range."""
        ...

    def field(self, name: str) -> Optional[Any]:
        """Entry or field `name`, None when absent."""
        ...


class SequenceValue:
    kind = ValueKind.SEQUENCE

    def __init__(self, data: Sequence):
        self._data = data

    def index(self, idx: int) -> Optional[Any]:
        n = len(self._data)
        if idx < 0:
            idx += n
        if idx < 0 or idx >= n:
            return None
        return self._data[idx]

    def field(self, name: str) -> Optional[Any]:
        return None


class MappingValue:
    kind = ValueKind.MAPPING

    def __init__(self, data: Mapping):
        self._data = data

    def index(self, idx: int) -> Optional[Any]:
        return None

    def field(self, name: str) -> Optional[Any]:
        return self._data.get(name)


class RecordValue:
    """Dataclass instances, named tuples and plain objects with attributes."""
    kind = ValueKind.RECORD

    def __init__(self, data: Any):
        self._data = data
        if is_dataclass(data):
            self._names = frozenset(f.name for f in fields(data))
        elif _is_namedtuple(data):
            self._names = frozenset(data._fields)
        else:
            self._names = frozenset(vars(data))

    def index(self, idx: int) -> Optional[Any]:
        return None

    def field(self, name: str) -> Optional[Any]:
        if name not in self._names:
            return None
        return getattr(self._data, name, None)


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(value, "_fields")


def _is_record(value: Any) -> bool:
    if isinstance(value, (type, Mapping, str, bytes, bytearray)):
        return False
    if is_dataclass(value) or _is_namedtuple(value):
        return True
    if isinstance(value, Sequence):
        return False
    return hasattr(value, "__dict__") and not callable(value) and not isinstance(value, enum.Enum)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


# Checked in order; named tuples count as records
_ADAPTERS: List[Tuple[Callable[[Any], bool], Callable[[Any], StructuredValue]]] = [
    (_is_record, RecordValue),
    (lambda v: isinstance(v, Mapping), MappingValue),
    (_is_sequence, SequenceValue),
]


def register_adapter(
    accepts: Callable[[Any], bool],
    factory: Callable[[Any], StructuredValue],
) -> None:
    """Register an adapter for a custom data shape. Custom adapters take precedence."""
    _ADAPTERS.insert(0, (accepts, factory))


def adapt(value: Any) -> Optional[StructuredValue]:
    """Adapter for `value`, None for scalars."""
    for accepts, factory in _ADAPTERS:
        if accepts(value):
            return factory(value)
    return None


def kind_name(value: Any) -> str:
    adapted = adapt(value)
    if adapted is None:
        return type(value).__name__
    return f"{adapted.kind.value} ({type(value).__name__})"


__all__ = [
    "ValueKind",
    "StructuredValue",
    "SequenceValue",
    "MappingValue",
    "RecordValue",
    "register_adapter",
    "adapt",
    "kind_name",
]
