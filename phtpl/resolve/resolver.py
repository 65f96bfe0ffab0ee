"""
Path resolver.

Resolves dotted paths like `Addrs.-1.Street` against nested data and
fills `$`-prefixed placeholders of a BounT with the results.

Placeholder spec format (after the marker):

    [format " "] path

e.g. `$Name` or `$%05d Addrs.-1.No`. Without format the value is bound
with default formatting, otherwise printf-style.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, List, Optional, Tuple, Union

from ..content import Print, Printf
from ..errors import TypeMismatchError
from .structured import ValueKind, adapt, kind_name

if TYPE_CHECKING:
    from ..bount import BounT

logger = logging.getLogger(__name__)

DEFAULT_PATH_SEP = "."
DEFAULT_FILL_MARKER = "$"

_INT_SEGMENT = re.compile(r"^[+-]?\d+$")

Segment = Union[int, str]


class PathResolver:
    """
    Walks nested data by path segments.

    Integer segments index sequences, other segments look up mapping
    keys or record fields. A path leading nowhere resolves to None; a
    segment that does not fit the value it reached raises
    TypeMismatchError.
    """

    def __init__(self, separator: str = DEFAULT_PATH_SEP):
        self.separator = separator

    def parse_path(self, path: str) -> List[Segment]:
        """Split a path into segments, integer-looking segments become ints."""
        return [
            int(seg) if _INT_SEGMENT.match(seg) else seg
            for seg in path.split(self.separator)
        ]

    def resolve(self, path: str, data: Any) -> Optional[Any]:
        """
        Value at `path` inside `data`, None if there is none.

        Raises:
            TypeMismatchError: integer segment on a non-sequence or name
                segment on something that is neither mapping nor record
        """
        for i, seg in enumerate(self.parse_path(path)):
            if data is None:
                return None
            adapted = adapt(data)
            if isinstance(seg, int):
                if adapted is None or adapted.kind is not ValueKind.SEQUENCE:
                    raise TypeMismatchError(i, path, "sequence", kind_name(data))
                data = adapted.index(seg)
            else:
                if adapted is None or adapted.kind is ValueKind.SEQUENCE:
                    raise TypeMismatchError(i, path, "map or record", kind_name(data))
                data = adapted.field(seg)
        return data


def split_spec(spec: str) -> Tuple[str, str]:
    """Split `[format " "] path` into (format, path); format is empty if absent."""
    sep = spec.find(" ")
    if sep > 0:
        return spec[:sep], spec[sep + 1:]
    return "", spec


def fill_bount(
    bount: BounT,
    data: Any,
    overwrite: bool = True,
    marker: str = DEFAULT_FILL_MARKER,
    resolver: Optional[PathResolver] = None,
) -> int:
    """
    Bind every placeholder starting with `marker` from `data`.

    Args:
        bount: Bound template to fill
        data: Root of the data to resolve paths against
        overwrite: When False, placeholders with an already bound slot are skipped
        marker: Prefix that marks path placeholders
        resolver: Resolver to use (default separator '.')

    Returns:
        Number of missed placeholders (path resolved to no value).
        Misses do not fail the fill; callers decide whether they are acceptable.

    Raises:
        TypeMismatchError: path shape does not fit the data
    """
    resolver = resolver or PathResolver()
    missed = 0
    for name, slots in bount.template.iter_placeholders():
        if not name.startswith(marker):
            continue
        if not overwrite and any(bount.is_bound(s) for s in slots):
            continue
        fmt, path = split_spec(name[len(marker):])
        value = resolver.resolve(path, data)
        if value is None:
            missed += 1
            logger.debug("No value for placeholder '%s' in template '%s'", name, bount.template.name)
        elif fmt:
            bount.bind(slots, Printf(fmt, value))
        else:
            bount.bind(slots, Print(value))
    return missed


__all__ = [
    "DEFAULT_PATH_SEP",
    "DEFAULT_FILL_MARKER",
    "Segment",
    "PathResolver",
    "split_spec",
    "fill_bount",
]
