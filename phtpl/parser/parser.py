"""
Line oriented template parser.

Reads a complete source line by line and classifies each line, in this
order, as sub-template start, sub-template end, block placeholder or
plain text. Plain lines are scanned for inline placeholders.

The line terminator of a line is not written right away. It is kept
pending and written when the next construct is added, so that break
suppression flags of the following line can drop it.
"""

from __future__ import annotations

import io
import logging
from typing import Dict, Iterable, Iterator, List, Optional, TextIO, Union

from ..errors import (
    DuplicateTemplatesError,
    InvalidTemplateNameError,
    TemplateNameMismatchError,
    UnexpectedEndError,
    UnterminatedNestingError,
    UnterminatedPlaceholderError,
)
from ..template import Template
from .syntax import ParserSyntax, comment_syntax, keeps_break

logger = logging.getLogger(__name__)

Source = Union[str, bytes, TextIO, Iterable[str]]


def iter_lines(source: Source, encoding: str = "utf-8") -> Iterator[str]:
    """
    Lines of `source` without terminators.

    A trailing '\\r' is removed; a final newline does not produce an
    empty last line.
    """
    if isinstance(source, bytes):
        source = source.decode(encoding)
    if isinstance(source, str):
        source = io.StringIO(source)
    for line in source:
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        yield line


class TemplateParser:
    """
    Parses template sources into templates keyed by nesting path.

    The root template has key "" and carries `root_name`. A sub-template
    opened inside the root as `a` and inside that as `b` has key `a/b`
    (with the default path separator) and name `<root_name>/a/b`, or
    just `a/b` when `root_name` is empty.
    """

    def __init__(self, syntax: Optional[ParserSyntax] = None, encoding: str = "utf-8"):
        self.syntax = syntax or comment_syntax()
        self.encoding = encoding

    def template_name(self, root_name: str, key: str) -> str:
        if not key:
            return root_name
        if not root_name:
            return key
        return root_name + self.syntax.path_sep + key

    def parse(
        self,
        source: Source,
        root_name: str = "",
        into: Optional[Dict[str, Template]] = None,
    ) -> Dict[str, Template]:
        """
        Parse `source` and register the templates found.

        Args:
            source: Template text, bytes (decoded with the parser encoding),
                    a text stream or any iterable of lines
            root_name: Name of the root template
            into: Mapping to add the templates to; a new dict if None.
                  Existing entries are continued when a sub-template with
                  the same key is opened.

        Returns:
            The mapping from key to template

        Raises:
            ParseError: malformed source; duplicates are reported once,
                        after the whole source was read
        """
        syn = self.syntax
        into = {} if into is None else into
        dup: Dict[str, Template] = {}
        path: List[str] = []
        key = ""
        endl = ""
        cur: Optional[Template] = None

        def need(t: Optional[Template], lineno: int) -> Template:
            name = self.template_name(root_name, key)
            if t is None:
                logger.debug("Open template '%s' at line %d", name, lineno)
                return Template(name)
            if t.name != name:
                raise TemplateNameMismatchError(t.name, name, lineno)
            return t

        def store(t: Optional[Template]) -> None:
            if t is None:
                return
            old = into.get(key)
            if old is not None and old is not t:
                logger.warning("Duplicate template '%s'", key)
                dup[key] = t
            else:
                into[key] = t

        lineno = 0
        for lineno, line in enumerate(iter_lines(source, self.encoding), start=1):
            m = syn.start_template.search(line)
            if m:
                if keeps_break(m, syn.start_lbrk_group):
                    cur = need(cur, lineno)
                    cur.add_str(endl)
                store(cur)
                sub = m.group(syn.start_name_group)
                if syn.path_sep in sub:
                    raise InvalidTemplateNameError(sub, syn.path_sep, lineno)
                path.append(sub)
                key = syn.path_sep.join(path)
                cur = into.get(key)
                endl = ""
                continue

            m = syn.end_template.search(line)
            if m:
                sub = m.group(syn.end_name_group)
                if not path or path[-1] != sub:
                    raise UnexpectedEndError(sub, path[-1] if path else None, lineno)
                store(cur)
                path.pop()
                key = syn.path_sep.join(path)
                cur = into.get(key)
                endl = syn.line_end if keeps_break(m, syn.end_tbrk_group) else ""
                continue

            m = syn.block_placeholder.search(line)
            if m:
                cur = need(cur, lineno)
                if keeps_break(m, syn.block_lbrk_group):
                    cur.add_str(endl)
                cur.add_placeholder(m.group(syn.block_name_group))
                endl = syn.line_end if keeps_break(m, syn.block_tbrk_group) else ""
                continue

            cur = need(cur, lineno)
            cur.add_str(endl)
            if syn.prepare_line is not None:
                line = syn.prepare_line(line)
            self._add_line(cur, line, lineno)
            endl = syn.line_end

        if path:
            raise UnterminatedNestingError(path)
        store(cur)
        if dup:
            raise DuplicateTemplatesError(dup)
        logger.debug("Parsed %d lines into %d template(s)", lineno, len(into))
        return into

    def _add_line(self, t: Template, line: str, lineno: int) -> None:
        start, end = self.syntax.inline_start, self.syntax.inline_end
        tok = line.find(start)
        while tok >= 0:
            if tok > 0:
                t.add_str(line[:tok])
            line = line[tok + len(start):]
            tok = line.find(end)
            if tok < 0:
                raise UnterminatedPlaceholderError(line, lineno)
            # an empty marker pair emits nothing
            if tok > 0:
                t.add_placeholder(line[:tok])
            line = line[tok + len(end):]
            tok = line.find(start)
        if line:
            t.add_str(line)


def parse_templates(
    source: Source,
    syntax: Optional[ParserSyntax] = None,
    root_name: str = "",
) -> Dict[str, Template]:
    """Parse `source` with `syntax` (HTML comment convention by default)."""
    return TemplateParser(syntax).parse(source, root_name)


__all__ = ["Source", "iter_lines", "TemplateParser", "parse_templates"]
