"""
Exceptions raised by phtpl.

All expected errors that should be displayed to the user
as clean messages (without stack traces) inherit from PhtplUserError.

Programming errors and bugs should NOT inherit from PhtplUserError;
they propagate with full tracebacks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


class PhtplUserError(Exception):
    """
    Base class for all user-facing errors in phtpl.

    These errors indicate problems the caller can fix:
    unknown placeholder names, malformed template sources,
    data that does not fit a placeholder path, etc.
    """
    pass


# -------------------- Template building and binding --------------------

class TemplateError(PhtplUserError):
    """Base class for template building and binding errors."""
    pass


@dataclass
class UnknownPlaceholderError(TemplateError):
    """Placeholder name is not defined in the template."""
    name: str
    template: str = ""

    def __str__(self) -> str:
        where = f" in template '{self.template}'" if self.template else ""
        return f"template has no placeholder '{self.name}'{where}"


@dataclass
class NameExistsError(TemplateError):
    """Rename target already exists and merging was not requested."""
    current: str
    new_name: str

    def __str__(self) -> str:
        return f"cannot rename '{self.current}', new name '{self.new_name}' already exists"


@dataclass
class AnonymousBindError(TemplateError):
    """Content was bound to slots that carry no placeholder name."""
    count: int
    template: str = ""

    def __str__(self) -> str:
        return f"{self.count} anonymous bind(s) in template '{self.template}'"


# -------------------- Emission --------------------

class EmitError(PhtplUserError):
    """
    Emission failure.

    Every emit error carries `count`: the number of bytes that reached
    the sink before the failure.
    """
    count: int = 0


@dataclass
class UnboundPlaceholderError(EmitError):
    """A named placeholder had no content when the template was emitted."""
    name: str
    template: str
    count: int = 0

    def __str__(self) -> str:
        return f"unbound placeholder '{self.name}' in template '{self.template}'"


@dataclass
class SinkWriteError(EmitError):
    """The underlying sink refused a write."""
    cause: BaseException
    count: int = 0

    def __str__(self) -> str:
        return f"sink write failed after {self.count} bytes: {self.cause}"


@dataclass
class ContentError(EmitError):
    """Content could not render itself (formatting, callback failure)."""
    message: str
    count: int = 0

    def __str__(self) -> str:
        return self.message


# -------------------- Parsing --------------------

class ParseError(PhtplUserError):
    """Base class for template source errors. `line` is 1-based (0 = end of input)."""

    def __init__(self, message: str, line: int = 0):
        where = f" at line {line}" if line > 0 else ""
        super().__init__(f"{message}{where}")
        self.line = line


class UnterminatedPlaceholderError(ParseError):
    """Inline placeholder opened but not closed before end of line."""

    def __init__(self, rest: str, line: int = 0):
        super().__init__(f"unexpected end of line in placeholder '{rest}'", line)
        self.rest = rest


class UnexpectedEndError(ParseError):
    """Sub-template end does not match the innermost open sub-template."""

    def __init__(self, name: str, expected: Optional[str], line: int = 0):
        if expected is None:
            msg = f"unexpected sub-template end '{name}', no sub-template is open"
        else:
            msg = f"unexpected sub-template end '{name}', expected '{expected}'"
        super().__init__(msg, line)
        self.name = name
        self.expected = expected


class UnterminatedNestingError(ParseError):
    """End of input reached while sub-templates are still open."""

    def __init__(self, open_path: List[str]):
        super().__init__(f"end of input in nested template '{'/'.join(open_path)}'")
        self.open_path = list(open_path)


class InvalidTemplateNameError(ParseError):
    """Sub-template name contains the path separator."""

    def __init__(self, name: str, separator: str, line: int = 0):
        super().__init__(f"sub-template name '{name}' contains path separator '{separator}'", line)
        self.name = name
        self.separator = separator


class TemplateNameMismatchError(ParseError):
    """A stored template is resumed under a different hierarchical name."""

    def __init__(self, stored: str, expected: str, line: int = 0):
        super().__init__(f"template name mismatch '{stored}' != '{expected}'", line)
        self.stored = stored
        self.expected = expected


class DuplicateTemplatesError(ParseError):
    """Several template bodies resolved to the same path. Collected over a whole parse."""

    def __init__(self, duplicates: Dict[str, object]):
        super().__init__(f"duplicate templates: {', '.join(sorted(duplicates))}")
        self.duplicates = dict(duplicates)


# -------------------- Path resolution --------------------

class ResolveError(PhtplUserError):
    """Base class for path resolution errors."""
    pass


@dataclass
class TypeMismatchError(ResolveError):
    """Path segment cannot be applied to the value it reached."""
    segment: int
    path: str
    expected: str
    got: str

    def __str__(self) -> str:
        return (
            f"segment {self.segment} in path '{self.path}' requires {self.expected}, "
            f"got {self.got}"
        )


# -------------------- Index maps --------------------

class IndexMapError(PhtplUserError):
    """Malformed index map declaration or missing mandatory placeholder."""
    pass


@dataclass
class UnmappedPlaceholdersError(IndexMapError):
    """Template placeholders that no index map field refers to."""
    template: str
    placeholders: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"unmapped placeholders in template '{self.template}': "
            f"{', '.join(self.placeholders)}"
        )


# -------------------- Configuration --------------------

class ConfigError(PhtplUserError):
    """Invalid syntax configuration file."""
    pass


__all__ = [
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
