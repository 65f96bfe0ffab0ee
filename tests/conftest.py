from __future__ import annotations

import io
import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path
from typing import Optional

import pytest

from phtpl.template import Template

REPO_ROOT = Path(__file__).resolve().parent.parent


def write(p: Path, text: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
    return p


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "phtpl.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    return json.loads(s)


class LimitedSink:
    """
    Sink accepting at most `limit` bytes. A write crossing the limit is
    short, the next one raises OSError.
    """

    def __init__(self, limit: int):
        self.limit = limit
        self.buf = io.BytesIO()

    def write(self, data: bytes) -> Optional[int]:
        room = self.limit - len(self.buf.getvalue())
        if room <= 0:
            raise OSError("sink full")
        chunk = data[:room]
        self.buf.write(chunk)
        return len(chunk)

    def getvalue(self) -> bytes:
        return self.buf.getvalue()


@pytest.fixture
def greeting() -> Template:
    """'Hello, <name>! Bye <name>.' with `name` in two slots."""
    return (
        Template("greeting")
        .add_str("Hello, ")
        .add_placeholder("name")
        .add_str("! Bye ")
        .add_placeholder("name")
        .add_str(".")
    )
