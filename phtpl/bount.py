"""
BounT ("bound template"): one set of content bindings for a Template.

A BounT is created for one fill, bound slot by slot or by placeholder
name, and then either emitted or fixated into a new Template. A BounT is
Content itself, so bound templates nest into other bound templates.

Nesting is plain recursion. A BounT reachable from its own bindings
recurses until the interpreter's recursion limit is hit; cycles are not
detected.
"""

from __future__ import annotations

import io
import logging
import re
from typing import Any, Callable, Iterable, List, Optional, Union

from .content import Content, EmitResult, Generator, Print, Printf, Sink, WrapFn, failed, write_bytes
from .errors import AnonymousBindError, UnboundPlaceholderError, UnknownPlaceholderError
from .template import Template

logger = logging.getLogger(__name__)

# Joins nested template names and placeholder names during fixation
DEFAULT_NESTING_SEP = ":"


class BounT:
    """Binding store pairing one shared Template with one array of optional Content."""

    def __init__(self, template: Template):
        self._template = template
        self._bindings: List[Optional[Content]] = [None] * template.slot_count

    @property
    def template(self) -> Template:
        return self._template

    def binding_at(self, slot: int) -> Optional[Content]:
        return self._bindings[slot]

    def is_bound(self, slot: int) -> bool:
        return self._bindings[slot] is not None

    # -------------------- Binding --------------------

    def bind(self, slots: Iterable[int], content: Content, strict: bool = False) -> int:
        """
        Bind `content` to every slot in `slots`.

        The slot's wrap function, if declared, is applied first.

        Returns:
            Number of anonymous slots (slots without placeholder name) that
            were bound. With `strict` such binds raise AnonymousBindError
            instead, after all slots have been bound.
        """
        anonymous = 0
        for slot in slots:
            if self._template.placeholder_at(slot) is None:
                anonymous += 1
            wrap = self._template.wrap_at(slot)
            self._bindings[slot] = wrap(content) if wrap is not None else content
        if strict and anonymous:
            raise AnonymousBindError(anonymous, self._template.name)
        return anonymous

    def bind_name(self, name: str, content: Content) -> None:
        """Bind all slots of placeholder `name`; raises UnknownPlaceholderError if it has none."""
        slots = self._template.placeholder_slots(name)
        if slots is None:
            raise UnknownPlaceholderError(name, self._template.name)
        self.bind(slots, content)

    def bind_if_present(self, name: str, content: Content) -> bool:
        """Bind placeholder `name` if the template has it. Returns whether it did."""
        slots = self._template.placeholder_slots(name)
        if slots is None:
            return False
        self.bind(slots, content)
        return True

    def bind_match(self, pattern: Union[str, re.Pattern[str]], content: Content) -> List[str]:
        """Bind every placeholder whose name matches `pattern` (re.search). Returns the bound names."""
        rx = re.compile(pattern) if isinstance(pattern, str) else pattern
        bound = [name for name in self._template.placeholders() if rx.search(name)]
        for name in bound:
            self.bind_name(name, content)
        return bound

    def bind_value(self, name: str, value: Any) -> None:
        """Bind `value` rendered with default formatting."""
        self.bind_name(name, Print(value))

    def bind_format(self, name: str, fmt: str, *values: Any) -> None:
        """Bind printf-style formatted values."""
        self.bind_name(name, Printf(fmt, *values))

    def bind_callback(self, name: str, fn: Callable[[Sink], Union[int, EmitResult]]) -> None:
        """Bind a caller supplied emission function."""
        self.bind_name(name, Generator(fn))

    def wrap_all(self, wrapper: WrapFn) -> None:
        """Replace every bound slot's content by `wrapper(content)`; unbound slots stay unbound."""
        for i, content in enumerate(self._bindings):
            if content is not None:
                self._bindings[i] = wrapper(content)

    def fill(self, data: Any, overwrite: bool = True, marker: str = "$") -> int:
        """
        Bind every `marker`-prefixed placeholder from `data` by path.

        Returns the number of placeholders whose path led to no value.
        See phtpl.resolve.fill_bount.
        """
        from .resolve import fill_bount
        return fill_bount(self, data, overwrite=overwrite, marker=marker)

    # -------------------- Emission --------------------

    def emit(self, sink: Sink) -> EmitResult:
        """
        Write slots and fragments in order.

        Stops at the first failure. Bytes already written stay in the
        sink and are reported in the result's count.
        """
        fragments = self._template.fragments
        res = EmitResult(0)
        for slot in range(len(fragments) + 1):
            content = self._bindings[slot]
            if content is not None:
                res = res.then(content.emit(sink))
                if not res.ok:
                    return res
            else:
                name = self._template.placeholder_at(slot)
                if name is not None:
                    return failed(res.count, UnboundPlaceholderError(name, self._template.name))
            if slot < len(fragments):
                res = res.then(write_bytes(sink, fragments[slot]))
                if not res.ok:
                    return res
        return res

    def render(self) -> bytes:
        """Emit into a buffer and return it; raises the emit error on failure."""
        buf = io.BytesIO()
        self.emit(buf).unwrap()
        return buf.getvalue()

    # -------------------- Fixation --------------------

    def fixate(self, separator: str = DEFAULT_NESTING_SEP) -> Optional[Template]:
        """
        Fold the bindings into a new Template.

        Unbound placeholders are carried over. Nested BounT bindings are
        fixated into the same new template, their placeholders prefixed
        with `<nested template name><separator>`. Any other content is
        emitted once, now, and inlined as static text.

        Returns None when the template has no placeholders.

        Raises:
            EmitError: inlined content failed to emit
        """
        if self._template.placeholder_count == 0:
            return None
        target = Template(self._template.name)
        self._fixate_into(target, "", separator)
        logger.debug(
            "Fixated template '%s': %d -> %d placeholders",
            self._template.name, self._template.placeholder_count, target.placeholder_count,
        )
        return target

    def _fixate_into(self, target: Template, prefix: str, separator: str) -> None:
        fragments = self._template.fragments
        for slot in range(len(fragments) + 1):
            content = self._bindings[slot]
            if content is None:
                name = self._template.placeholder_at(slot)
                if name is not None:
                    target.add_placeholder(prefix + name, self._template.wrap_at(slot))
            elif isinstance(content, BounT):
                content._fixate_into(target, prefix + content.template.name + separator, separator)
            else:
                buf = io.BytesIO()
                content.emit(buf).unwrap()
                target.add_static(buf.getvalue())
            if slot < len(fragments):
                target.add_static(fragments[slot])

    def __repr__(self) -> str:
        bound = sum(1 for c in self._bindings if c is not None)
        return f"BounT({self._template.name!r}, bound={bound}/{len(self._bindings)})"


__all__ = ["BounT", "DEFAULT_NESTING_SEP"]
