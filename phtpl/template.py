"""
Template: static fragments interspersed with named placeholders.

A template with N fragments has N + 1 slots: slot 0 is emitted before
fragment 0, slot i between fragments i-1 and i, slot N after the last
fragment. Any slot may carry a placeholder name. The same name may
appear in several slots.

Templates are built once (by hand or by the parser) and then shared
read-only by any number of BounT objects.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .content import Content, WrapFn
from .errors import NameExistsError, UnknownPlaceholderError

if TYPE_CHECKING:
    from .bount import BounT


class Template:
    """
    Ordered static fragments plus a placeholder table.

    Builder methods return the template itself so construction can be
    chained:

        Template("greeting").add_str("Hello, ").add_placeholder("name").add_str("!")
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._fragments: List[bytes] = []
        # slot -> placeholder name; shorter than slot count when trailing slots are anonymous
        self._placeholder_at: List[Optional[str]] = []
        self._name_to_slots: Dict[str, List[int]] = {}
        self._wraps: Dict[int, WrapFn] = {}

    # -------------------- Building --------------------

    def add_static(self, fragment: Union[bytes, bytearray]) -> Template:
        """
        Append static content.

        Merges into the last fragment unless a placeholder terminates the
        template; in that case a new fragment starts (even an empty one,
        which keeps two placeholders apart).
        """
        fragment = bytes(fragment)
        if self.placeholder_at(len(self._fragments)) is not None:
            self._fragments.append(fragment)
        elif fragment:
            if not self._fragments:
                self._fragments.append(fragment)
            else:
                self._fragments[-1] = self._fragments[-1] + fragment
        return self

    def add_str(self, text: str, encoding: str = "utf-8") -> Template:
        """Append static text."""
        return self.add_static(text.encode(encoding))

    def add_placeholder(self, name: str, wrap: Optional[WrapFn] = None) -> Template:
        """
        Append a placeholder.

        If the template already ends with a placeholder an empty fragment
        is inserted first. `wrap` is applied to any content later bound
        to this slot.

        Raises:
            ValueError: `name` is empty
        """
        if not name:
            raise ValueError("placeholder name must not be empty")
        slot = len(self._fragments)
        if self.placeholder_at(slot) is not None:
            self.add_static(b"")
            slot += 1
        while len(self._placeholder_at) < slot:
            self._placeholder_at.append(None)
        self._placeholder_at.append(name)
        self._name_to_slots.setdefault(name, []).append(slot)
        if wrap is not None:
            self._wraps[slot] = wrap
        return self

    def set_wrap(self, name: str, wrap: Optional[WrapFn]) -> Template:
        """Declare (or clear with None) the wrap function of every slot of `name`."""
        slots = self.placeholder_slots(name)
        if slots is None:
            raise UnknownPlaceholderError(name, self.name)
        for slot in slots:
            if wrap is None:
                self._wraps.pop(slot, None)
            else:
                self._wraps[slot] = wrap
        return self

    # -------------------- Inspection --------------------

    @property
    def fragment_count(self) -> int:
        return len(self._fragments)

    @property
    def slot_count(self) -> int:
        """Number of emission positions (fragments + 1)."""
        return len(self._fragments) + 1

    @property
    def fragments(self) -> Tuple[bytes, ...]:
        return tuple(self._fragments)

    def fragment_at(self, idx: int) -> Optional[bytes]:
        """Fragment `idx` or None when out of range."""
        if idx < 0 or idx >= len(self._fragments):
            return None
        return self._fragments[idx]

    def placeholder_at(self, slot: int) -> Optional[str]:
        """Placeholder emitted before fragment `slot`, None for anonymous slots."""
        if slot < 0 or slot >= len(self._placeholder_at):
            return None
        return self._placeholder_at[slot]

    def wrap_at(self, slot: int) -> Optional[WrapFn]:
        return self._wraps.get(slot)

    @property
    def placeholder_count(self) -> int:
        return len(self._name_to_slots)

    def placeholders(self) -> List[str]:
        """Placeholder names in order of first definition."""
        return list(self._name_to_slots)

    def placeholder_slots(self, name: str) -> Optional[List[int]]:
        """
        Slots of placeholder `name`, None if it does not exist.

        An entry that has become empty is dropped on lookup.
        """
        slots = self._name_to_slots.get(name)
        if slots is None:
            return None
        if not slots:
            del self._name_to_slots[name]
            return None
        return slots

    def iter_placeholders(self) -> Iterator[Tuple[str, List[int]]]:
        for name, slots in list(self._name_to_slots.items()):
            yield name, list(slots)

    def __contains__(self, name: object) -> bool:
        return name in self._name_to_slots

    def __repr__(self) -> str:
        return (
            f"Template({self.name!r}, fragments={len(self._fragments)}, "
            f"placeholders={self.placeholders()!r})"
        )

    # -------------------- Renaming --------------------

    def rename_placeholder(self, current: str, new_name: str, merge: bool = False) -> None:
        """
        Rename placeholder `current` to `new_name`.

        Raises:
            UnknownPlaceholderError: `current` does not exist
            NameExistsError: `new_name` exists and `merge` is False
        """
        _rename(self.name, self._name_to_slots, self._placeholder_at, current, new_name, merge)

    def transform_names(self, fn: Callable[[str], str], merge: bool = False) -> None:
        """
        Rename every placeholder to `fn(name)`.

        All new names are computed from the current names first, so a
        new name may equal another current name that is renamed as well.
        Two current names mapping to the same new name are merged, or
        raise NameExistsError when `merge` is False. Nothing changes on
        error.
        """
        renames = {name: fn(name) for name, slots in self._name_to_slots.items() if slots}
        name_to_slots: Dict[str, List[int]] = {}
        for old, new in renames.items():
            if new in name_to_slots:
                if not merge:
                    raise NameExistsError(old, new)
                name_to_slots[new] = sorted(name_to_slots[new] + self._name_to_slots[old])
            else:
                name_to_slots[new] = list(self._name_to_slots[old])
        self._name_to_slots = name_to_slots
        self._placeholder_at = [
            None if name is None else renames.get(name, name)
            for name in self._placeholder_at
        ]

    # -------------------- Static templates --------------------

    @property
    def is_static(self) -> bool:
        return not self._name_to_slots

    def static_bytes(self) -> Optional[bytes]:
        """
        The whole content of a template without placeholders, None otherwise.

        A static template holds at most one fragment; anything else means
        the template was built inconsistently.
        """
        if self._name_to_slots:
            return None
        if not self._fragments:
            return b""
        if len(self._fragments) == 1:
            return self._fragments[0]
        raise RuntimeError(
            f"template '{self.name}' without placeholders has {len(self._fragments)} fragments"
        )

    def static_with(self, content: Content) -> Optional[bytes]:
        """Bind every placeholder to `content`, fixate and return the static result."""
        fixed = self.new_init_bount(content).fixate()
        if fixed is None:
            return self.static_bytes()
        return fixed.static_bytes()

    # -------------------- Binding --------------------

    def new_bount(self) -> BounT:
        """Fresh binding store for this template."""
        from .bount import BounT
        return BounT(self)

    def new_init_bount(self, content: Content) -> BounT:
        """Binding store with every named slot bound to `content`."""
        bt = self.new_bount()
        for slot in range(self.slot_count):
            if self.placeholder_at(slot) is not None:
                bt.bind([slot], content)
        return bt


def _rename(
    template: str,
    name_to_slots: Dict[str, List[int]],
    placeholder_at: List[Optional[str]],
    current: str,
    new_name: str,
    merge: bool,
) -> None:
    slots = name_to_slots.get(current)
    if slots is None:
        raise UnknownPlaceholderError(current, template)
    if current == new_name:
        return
    existing = name_to_slots.get(new_name)
    if existing is not None:
        if not merge:
            raise NameExistsError(current, new_name)
        slots = sorted(slots + existing)
    del name_to_slots[current]
    name_to_slots[new_name] = slots
    for i, name in enumerate(placeholder_at):
        if name == current:
            placeholder_at[i] = new_name


__all__ = ["Template"]
