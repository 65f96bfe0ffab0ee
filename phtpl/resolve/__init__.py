"""
Path based data resolution for filling templates.
"""

from __future__ import annotations

from .resolver import (
    DEFAULT_FILL_MARKER,
    DEFAULT_PATH_SEP,
    PathResolver,
    fill_bount,
    split_spec,
)
from .structured import (
    MappingValue,
    RecordValue,
    SequenceValue,
    StructuredValue,
    ValueKind,
    adapt,
    register_adapter,
)

__all__ = [
    "DEFAULT_FILL_MARKER",
    "DEFAULT_PATH_SEP",
    "PathResolver",
    "fill_bount",
    "split_spec",
    "MappingValue",
    "RecordValue",
    "SequenceValue",
    "StructuredValue",
    "ValueKind",
    "adapt",
    "register_adapter",
]
