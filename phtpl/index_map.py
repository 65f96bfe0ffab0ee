"""
Declarative index maps.

An index map is a dataclass whose fields hold the slot lists of a
template's placeholders, so a renderer can bind by slot list without
name lookups on every fill:

    @dataclass
    class PageMap:
        template: Optional[Template] = None
        title: List[int] = field(default_factory=list, metadata={"phtpl": "title"})
        footer: List[int] = field(default_factory=list, metadata={"phtpl": "footer opt"})
        body: List[int] = field(default_factory=list)   # mapped via map_names

Tag format (metadata key "phtpl"):
    "name"      mandatory placeholder `name`
    "name opt"  optional placeholder, empty list when missing
    "-"         field is ignored
"""

from __future__ import annotations

import types
import typing
from dataclasses import Field, fields, is_dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from .errors import IndexMapError, UnmappedPlaceholdersError
from .template import Template

METADATA_KEY = "phtpl"

_OPT = "opt"
_IGNORE = "-"

NameMapper = Callable[[str], str]


def identity_name(name: str) -> str:
    """Name mapper that uses the field name as placeholder name."""
    return name


def parse_tag(tag: str) -> Tuple[Optional[str], bool]:
    """
    Parse an index map tag.

    Returns:
        (placeholder, optional); placeholder is None for ignored fields

    Raises:
        IndexMapError: empty placeholder name or unknown option
    """
    if tag == _IGNORE:
        return None, False
    name, sep, option = tag.partition(" ")
    if not name:
        raise IndexMapError(f"index map tag '{tag}' has no placeholder name")
    if name == _IGNORE:
        return None, False
    if not sep:
        return name, False
    if option != _OPT:
        raise IndexMapError(f"illegal index map tag option '{option}' in '{tag}'")
    return name, True


def _is_template_type(hint: Any) -> bool:
    if hint is Template:
        return True
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is getattr(types, "UnionType", None):
        return Template in typing.get_args(hint)
    return False


def _is_slot_list_type(hint: Any) -> bool:
    return hint is list or typing.get_origin(hint) is list


def _field_placeholder(
    f: Field,
    hint: Any,
    map_names: Optional[NameMapper],
) -> Tuple[Optional[str], bool]:
    tag = f.metadata.get(METADATA_KEY)
    if tag is not None:
        return parse_tag(tag)
    if map_names is not None and _is_slot_list_type(hint):
        return map_names(f.name), False
    return None, False


def init_index_map(
    imap: Any,
    template: Template,
    map_names: Optional[NameMapper] = None,
) -> Optional[UnmappedPlaceholdersError]:
    """
    Fill the index map `imap` from `template`.

    Template typed fields receive the template, mapped fields the slot
    list of their placeholder (a copy). Fields without tag are mapped
    only when `map_names` is given and the field is annotated as a list.

    Returns:
        UnmappedPlaceholdersError listing the template placeholders no
        field refers to, or None when every placeholder is mapped. The
        error is returned, not raised; see must_index_map().

    Raises:
        IndexMapError: malformed tag or missing mandatory placeholder
        TypeError: `imap` is not a dataclass instance
    """
    if not is_dataclass(imap) or isinstance(imap, type):
        raise TypeError(f"index map must be a dataclass instance, got {type(imap).__name__}")

    hints: Dict[str, Any] = typing.get_type_hints(type(imap))
    mapped: Set[str] = set()
    for f in fields(imap):
        hint = hints.get(f.name)
        if f.metadata.get(METADATA_KEY) is None and _is_template_type(hint):
            setattr(imap, f.name, template)
            continue
        ph, optional = _field_placeholder(f, hint, map_names)
        if ph is None:
            continue
        slots = template.placeholder_slots(ph)
        if slots is not None:
            mapped.add(ph)
            setattr(imap, f.name, list(slots))
        elif optional:
            setattr(imap, f.name, [])
        else:
            raise IndexMapError(
                f"index map field '{f.name}': template '{template.name}' "
                f"has no placeholder '{ph}'"
            )

    missing: List[str] = [p for p in template.placeholders() if p not in mapped]
    if missing:
        return UnmappedPlaceholdersError(template.name, missing)
    return None


def map_all(unmapped: Optional[UnmappedPlaceholdersError]) -> None:
    """Raise `unmapped` if there is one."""
    if unmapped is not None:
        raise unmapped


def must_index_map(
    imap: Any,
    template: Template,
    map_names: Optional[NameMapper] = None,
) -> None:
    """init_index_map() that raises UnmappedPlaceholdersError instead of returning it."""
    map_all(init_index_map(imap, template, map_names))


__all__ = [
    "METADATA_KEY",
    "NameMapper",
    "identity_name",
    "parse_tag",
    "init_index_map",
    "map_all",
    "must_index_map",
]
