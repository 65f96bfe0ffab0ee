"""
Template source parsing.
"""

from __future__ import annotations

from .parser import TemplateParser, iter_lines, parse_templates
from .syntax import (
    DEFAULT_INLINE_MARKER,
    DEFAULT_LINE_END,
    DEFAULT_NAME_PATTERN,
    DEFAULT_PATH_SEP,
    ParserSyntax,
    comment_syntax,
    keeps_break,
    trim_ws,
)

__all__ = [
    "TemplateParser",
    "iter_lines",
    "parse_templates",
    "DEFAULT_INLINE_MARKER",
    "DEFAULT_LINE_END",
    "DEFAULT_NAME_PATTERN",
    "DEFAULT_PATH_SEP",
    "ParserSyntax",
    "comment_syntax",
    "keeps_break",
    "trim_ws",
]
