"""
phtpl: templates made of static text and named placeholders, nothing more.

    from phtpl import parse_templates, Print

    tmpls = parse_templates("Hello `name`!\n")
    bt = tmpls[""].new_bount()
    bt.bind_name("name", Print("World"))
    bt.render()     # b"Hello World!"
"""

from __future__ import annotations

from .bount import DEFAULT_NESTING_SEP, BounT
from .content import (
    EMPTY,
    Content,
    Data,
    EmitResult,
    Escaper,
    Generator,
    Print,
    Printf,
    Sink,
    WrapFn,
    Wrapper,
    embrace,
    write_bytes,
)
from .errors import (
    AnonymousBindError,
    ConfigError,
    ContentError,
    DuplicateTemplatesError,
    EmitError,
    IndexMapError,
    InvalidTemplateNameError,
    NameExistsError,
    ParseError,
    PhtplUserError,
    ResolveError,
    SinkWriteError,
    TemplateError,
    TemplateNameMismatchError,
    TypeMismatchError,
    UnboundPlaceholderError,
    UnexpectedEndError,
    UnknownPlaceholderError,
    UnmappedPlaceholdersError,
    UnterminatedNestingError,
    UnterminatedPlaceholderError,
)
from .html import esc_wrap, html_escape, html_parser_syntax, span
from .index_map import identity_name, init_index_map, map_all, must_index_map
from .parser import ParserSyntax, TemplateParser, comment_syntax, parse_templates, trim_ws
from .resolve import PathResolver, fill_bount, register_adapter
from .template import Template

__all__ = [
    # model
    "Template",
    "BounT",
    "DEFAULT_NESTING_SEP",
    # content
    "Sink",
    "EmitResult",
    "write_bytes",
    "Content",
    "WrapFn",
    "EMPTY",
    "Data",
    "Print",
    "Printf",
    "Generator",
    "Wrapper",
    "embrace",
    "Escaper",
    # html
    "html_escape",
    "esc_wrap",
    "span",
    "html_parser_syntax",
    # parsing
    "ParserSyntax",
    "TemplateParser",
    "comment_syntax",
    "parse_templates",
    "trim_ws",
    # data
    "PathResolver",
    "fill_bount",
    "register_adapter",
    "identity_name",
    "init_index_map",
    "map_all",
    "must_index_map",
    # errors
    "PhtplUserError",
    "TemplateError",
    "UnknownPlaceholderError",
    "NameExistsError",
    "AnonymousBindError",
    "EmitError",
    "UnboundPlaceholderError",
    "SinkWriteError",
    "ContentError",
    "ParseError",
    "UnterminatedPlaceholderError",
    "UnexpectedEndError",
    "UnterminatedNestingError",
    "InvalidTemplateNameError",
    "TemplateNameMismatchError",
    "DuplicateTemplatesError",
    "ResolveError",
    "TypeMismatchError",
    "IndexMapError",
    "UnmappedPlaceholdersError",
    "ConfigError",
]
