"""
Parser syntax configuration.

A ParserSyntax bundles everything the line parser recognizes: the inline
placeholder markers, the block placeholder line pattern, the sub-template
start/end line patterns, the line terminator and the path separator for
nested template names. Nothing is built in; comment_syntax() provides the
common HTML-comment convention.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

# Capture group selector: group name or number
Group = Union[int, str]

DEFAULT_INLINE_MARKER = "`"
DEFAULT_LINE_END = "\n"
DEFAULT_PATH_SEP = "/"
DEFAULT_NAME_PATTERN = r"[a-zA-Z0-9_-]+"


@dataclass
class ParserSyntax:
    """
    Syntax recognized by TemplateParser.

    Break groups: when the `lbrk`/`tbrk` group of a match is empty (or did
    not participate) the line break before/after the construct is kept;
    any text in the group suppresses it. A group selector of None means
    the break is always kept.
    """
    inline_start: str
    inline_end: str
    block_placeholder: re.Pattern[str]
    start_template: re.Pattern[str]
    end_template: re.Pattern[str]
    block_name_group: Group = "name"
    block_lbrk_group: Optional[Group] = "lbrk"
    block_tbrk_group: Optional[Group] = "tbrk"
    start_name_group: Group = "name"
    start_lbrk_group: Optional[Group] = "lbrk"
    end_name_group: Group = "name"
    end_tbrk_group: Optional[Group] = "tbrk"
    line_end: str = DEFAULT_LINE_END
    path_sep: str = DEFAULT_PATH_SEP
    prepare_line: Optional[Callable[[str], str]] = None

    def __post_init__(self) -> None:
        if not self.inline_start or not self.inline_end:
            raise ValueError("inline placeholder markers must not be empty")
        if not self.path_sep:
            raise ValueError("path separator must not be empty")


def keeps_break(match: re.Match[str], group: Optional[Group]) -> bool:
    """True if the break controlled by `group` is kept (group empty or absent)."""
    if group is None:
        return True
    return not match.group(group)


def trim_ws(line: str) -> str:
    """Line preprocessor: strip spaces and tabs on both ends."""
    return line.strip(" \t")


def comment_syntax(
    inline_start: str = DEFAULT_INLINE_MARKER,
    inline_end: str = DEFAULT_INLINE_MARKER,
    open_comment: str = "<!--",
    close_comment: str = "-->",
    *,
    name_pattern: str = DEFAULT_NAME_PATTERN,
    line_end: str = DEFAULT_LINE_END,
    path_sep: str = DEFAULT_PATH_SEP,
    prepare_line: Optional[Callable[[str], str]] = None,
) -> ParserSyntax:
    r"""
    Comment based syntax, by default with HTML comments:

        <!-- >>> name <<< -->     block placeholder
        <!-- >>> name >>> -->     sub-template start
        <!-- <<< name <<< -->     sub-template end

    A backslash right after the opening marker (`<!--\`) suppresses the
    line break before the construct, a backslash right before the
    closing marker (`\-->`) the one after it. Sub-template starts only
    control the leading break, ends only the trailing one.
    """
    o = re.escape(open_comment)
    c = re.escape(close_comment)
    ws = r"[ \t]*"
    name = f"(?P<name>{name_pattern})"
    return ParserSyntax(
        inline_start=inline_start,
        inline_end=inline_end,
        block_placeholder=re.compile(
            rf"^{ws}{o}(?P<lbrk>\\?) >>> {name} <<< (?P<tbrk>\\?){c}{ws}$"
        ),
        start_template=re.compile(
            rf"^{ws}{o}(?P<lbrk>\\?) >>> {name} >>> {c}{ws}$"
        ),
        end_template=re.compile(
            rf"^{ws}{o} <<< {name} <<< (?P<tbrk>\\?){c}{ws}$"
        ),
        line_end=line_end,
        path_sep=path_sep,
        prepare_line=prepare_line,
    )


__all__ = [
    "Group",
    "DEFAULT_INLINE_MARKER",
    "DEFAULT_LINE_END",
    "DEFAULT_PATH_SEP",
    "DEFAULT_NAME_PATTERN",
    "ParserSyntax",
    "keeps_break",
    "trim_ws",
    "comment_syntax",
]
