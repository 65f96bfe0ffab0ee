from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .content import EMPTY
from .errors import PhtplUserError
from .html import esc_wrap
from .parser import ParserSyntax, TemplateParser, comment_syntax
from .template import Template
from .version import tool_version

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _setup_logging() -> None:
    root = logging.getLogger("phtpl")
    if root.handlers:
        return
    root.setLevel(logging.DEBUG if os.environ.get("PHTPL_DEBUG") else logging.WARNING)
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="phtpl",
        description="Placeholder templates: list and render template files",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("file", help="template source file")
        sp.add_argument(
            "--syntax",
            metavar="FILE",
            help="YAML syntax configuration (default: HTML comment convention)",
        )
        sp.add_argument(
            "--root-name",
            default="",
            help="name of the root template",
        )

    sp_list = sub.add_parser("list", help="JSON list of templates and their placeholders")
    add_common(sp_list)

    sp_render = sub.add_parser("render", help="Fill one template from a data file and print it")
    add_common(sp_render)
    sp_render.add_argument(
        "--template",
        default="",
        metavar="KEY",
        help="template key, e.g. 'row' or 'table/row' (default: root template)",
    )
    sp_render.add_argument(
        "--data",
        metavar="FILE",
        help="YAML or JSON data for '$path' placeholders",
    )
    sp_render.add_argument(
        "--allow-missing",
        action="store_true",
        help="render unresolved placeholders as empty text instead of failing",
    )
    sp_render.add_argument(
        "--escape-html",
        action="store_true",
        help="HTML-escape every value written into a placeholder",
    )
    return p


def _syntax(ns: argparse.Namespace) -> ParserSyntax:
    if ns.syntax:
        from .config import load_syntax
        return load_syntax(Path(ns.syntax))
    return comment_syntax()


def _parse_file(ns: argparse.Namespace) -> Dict[str, Template]:
    path = Path(ns.file)
    if not path.is_file():
        raise PhtplUserError(f"template file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        return TemplateParser(_syntax(ns)).parse(fh, ns.root_name)


def _load_data(path_str: Optional[str]) -> Any:
    if not path_str:
        return {}
    path = Path(path_str)
    if not path.is_file():
        raise PhtplUserError(f"data file not found: {path}")
    try:
        return _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise PhtplUserError(f"{path}: {e}") from e


def list_templates(templates: Dict[str, Template]) -> List[Dict[str, Any]]:
    return [
        {"key": key, "name": t.name, "placeholders": t.placeholders()}
        for key, t in sorted(templates.items())
    ]


def render_template(
    templates: Dict[str, Template],
    key: str,
    data: Any,
    allow_missing: bool = False,
    escape_html: bool = False,
) -> bytes:
    """
    Fill template `key` from `data` and return the output.

    With `escape_html` every placeholder of the template gets the HTML
    escaping wrap before it is filled.

    Raises:
        PhtplUserError: unknown key, unresolved paths (unless allow_missing),
                        unbound placeholders, path/data mismatch
    """
    tmpl = templates.get(key)
    if tmpl is None:
        raise PhtplUserError(f"no template with key '{key}'")
    if escape_html:
        for name in tmpl.placeholders():
            tmpl.set_wrap(name, esc_wrap)
    bt = tmpl.new_bount()
    missed = bt.fill(data)
    logger.debug("Filled template '%s', %d missed placeholder(s)", key, missed)
    if missed and not allow_missing:
        raise PhtplUserError(f"{missed} placeholder(s) in template '{key}' have no value in the data")
    if allow_missing:
        for slot in range(tmpl.slot_count):
            if tmpl.placeholder_at(slot) is not None and not bt.is_bound(slot):
                bt.bind([slot], EMPTY)
    return bt.render()


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging()

    try:
        if ns.cmd == "list":
            data = {"templates": list_templates(_parse_file(ns))}
            sys.stdout.write(json.dumps(data, ensure_ascii=False))
            return 0

        if ns.cmd == "render":
            out = render_template(
                _parse_file(ns),
                ns.template,
                _load_data(ns.data),
                allow_missing=ns.allow_missing,
                escape_html=ns.escape_html,
            )
            sys.stdout.buffer.write(out)
            sys.stdout.buffer.flush()
            return 0

    except PhtplUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
