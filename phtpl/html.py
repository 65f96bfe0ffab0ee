"""
HTML helpers: escaping content, span elements and the HTML comment
parser convention.
"""

from __future__ import annotations

from .content import Content, Escaper, Wrapper
from .parser.syntax import ParserSyntax, comment_syntax

_HTML_ESCAPES = str.maketrans({
    "\0": "\ufffd",
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    '"': "&quot;",
    "'": "&apos;",
})


def html_escape(text: str) -> str:
    """Escape markup characters; NUL becomes U+FFFD."""
    return text.translate(_HTML_ESCAPES)


def esc_wrap(content: Content) -> Escaper:
    """HTML escaping around `content`. Usable as a placeholder wrap function."""
    return Escaper(content, html_escape)


def span(content: Content, span_id: str = "", span_class: str = "") -> Wrapper:
    """Wrap `content` in a <span> element; empty id/class attributes are omitted."""
    attrs = ""
    if span_id:
        attrs += f' id="{html_escape(span_id)}"'
    if span_class:
        attrs += f' class="{html_escape(span_class)}"'
    return Wrapper(f"<span{attrs}>", content, "</span>")


def html_parser_syntax() -> ParserSyntax:
    """Backtick inline placeholders and `<!-- >>> name <<< -->` style comment lines."""
    return comment_syntax("`", "`", "<!--", "-->")


__all__ = ["html_escape", "esc_wrap", "span", "html_parser_syntax"]
