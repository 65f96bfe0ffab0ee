"""
YAML parser syntax configuration.

A syntax file describes a comment based convention and optionally
overrides its patterns:

    schema_version: 1
    inline: {start: "{{", end: "}}"}
    comment: {open: "/*", close: "*/", name_pattern: "[a-z_]+"}
    patterns:                # optional, replace the comment patterns
      block: '^#ph (?P<name>\\w+)$'
    groups:                  # group selectors for replaced patterns
      block_lbrk: null
      block_tbrk: null
    line_end: "\\n"
    path_sep: "/"
    trim_whitespace: false

Missing keys take the defaults of the HTML comment convention.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .parser.syntax import (
    DEFAULT_INLINE_MARKER,
    DEFAULT_LINE_END,
    DEFAULT_NAME_PATTERN,
    DEFAULT_PATH_SEP,
    ParserSyntax,
    comment_syntax,
    trim_ws,
)

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

SCHEMA_VERSION = 1

# -------------------- Defaults --------------------

_DEFAULT_CFG: Dict[str, Any] = {
    "schema_version": SCHEMA_VERSION,
    "inline": {"start": DEFAULT_INLINE_MARKER, "end": DEFAULT_INLINE_MARKER},
    "comment": {"open": "<!--", "close": "-->", "name_pattern": DEFAULT_NAME_PATTERN},
    "patterns": {},
    "groups": {},
    "line_end": DEFAULT_LINE_END,
    "path_sep": DEFAULT_PATH_SEP,
    "trim_whitespace": False,
}

_PATTERN_FIELDS = {
    "block": "block_placeholder",
    "start": "start_template",
    "end": "end_template",
}

_GROUP_FIELDS = (
    "block_name",
    "block_lbrk",
    "block_tbrk",
    "start_name",
    "start_lbrk",
    "end_name",
    "end_tbrk",
)


def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """User keys over defaults; mapping sections are merged one level deep."""
    cfg: Dict[str, Any] = {}
    for key, default in _DEFAULT_CFG.items():
        user = raw.get(key)
        if isinstance(default, dict):
            if user is None:
                user = {}
            if not isinstance(user, dict):
                raise ConfigError(f"'{key}' must be a mapping")
            cfg[key] = {**default, **user}
        else:
            cfg[key] = default if user is None else user
    return cfg


def _compile(section: str, key: str, pattern: Any) -> re.Pattern[str]:
    if not isinstance(pattern, str):
        raise ConfigError(f"{section}.{key}: pattern must be a string")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"{section}.{key}: invalid regular expression: {e}") from e


def syntax_from_dict(raw: Optional[Dict[str, Any]]) -> ParserSyntax:
    """
    Build a ParserSyntax from a configuration mapping.

    Raises:
        ConfigError: unknown keys, unsupported schema version, bad patterns
    """
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigError("syntax configuration must be a mapping")
    unknown = sorted(set(raw) - set(_DEFAULT_CFG))
    if unknown:
        raise ConfigError(f"unknown syntax configuration keys: {', '.join(unknown)}")

    cfg = _merge_defaults(raw)
    if cfg["schema_version"] != SCHEMA_VERSION:
        raise ConfigError(
            f"unsupported schema_version {cfg['schema_version']!r}, expected {SCHEMA_VERSION}"
        )

    inline, comment = cfg["inline"], cfg["comment"]
    try:
        syntax = comment_syntax(
            str(inline["start"]),
            str(inline["end"]),
            str(comment["open"]),
            str(comment["close"]),
            name_pattern=str(comment["name_pattern"]),
            line_end=str(cfg["line_end"]),
            path_sep=str(cfg["path_sep"]),
            prepare_line=trim_ws if cfg["trim_whitespace"] else None,
        )
    except (ValueError, re.error) as e:
        raise ConfigError(f"invalid syntax configuration: {e}") from e

    for key, pattern in cfg["patterns"].items():
        attr = _PATTERN_FIELDS.get(key)
        if attr is None:
            raise ConfigError(f"patterns.{key}: expected one of {', '.join(_PATTERN_FIELDS)}")
        setattr(syntax, attr, _compile("patterns", key, pattern))

    for key, group in cfg["groups"].items():
        if key not in _GROUP_FIELDS:
            raise ConfigError(f"groups.{key}: expected one of {', '.join(_GROUP_FIELDS)}")
        if group is not None and not isinstance(group, (int, str)):
            raise ConfigError(f"groups.{key}: must be a group name, number or null")
        setattr(syntax, f"{key}_group", group)

    return syntax


def load_syntax(path: Path) -> ParserSyntax:
    """
    Load a syntax configuration file.

    Raises:
        ConfigError: file missing, not YAML or invalid content
    """
    if not path.is_file():
        raise ConfigError(f"syntax file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ConfigError(f"{path}: {e}") from e
    logger.debug("Loaded syntax configuration %s", path)
    try:
        return syntax_from_dict(raw)
    except ConfigError as e:
        raise ConfigError(f"{path}: {e}") from e


__all__ = ["SCHEMA_VERSION", "syntax_from_dict", "load_syntax"]
