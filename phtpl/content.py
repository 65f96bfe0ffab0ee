"""
Content: anything that can emit bytes to a sink.

Emission never raises for expected failures. Every `emit` returns an
EmitResult carrying the number of bytes that reached the sink and, on
failure, the EmitError that stopped it. `EmitResult.unwrap()` switches
back to exception style where that reads better.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Tuple, Union, runtime_checkable

from .errors import ContentError, EmitError, SinkWriteError


@runtime_checkable
class Sink(Protocol):
    """Byte destination. `write` returns the number of bytes written or None for all of them."""

    def write(self, data: bytes) -> Optional[int]:
        ...


@dataclass(frozen=True)
class EmitResult:
    """Outcome of an emission: bytes written plus an optional failure."""
    count: int = 0
    error: Optional[EmitError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> int:
        """Return the byte count or raise the failure."""
        if self.error is not None:
            raise self.error
        return self.count

    def then(self, other: EmitResult) -> EmitResult:
        """Result of emitting `other` after this (successful) result."""
        total = self.count + other.count
        if other.error is None:
            return EmitResult(total)
        other.error.count = total
        return EmitResult(total, other.error)


def failed(count: int, error: EmitError) -> EmitResult:
    error.count = count
    return EmitResult(count, error)


def write_bytes(sink: Sink, data: bytes) -> EmitResult:
    """
    Write one buffer to the sink.

    OSError and ValueError (closed files, encoding failures in escaping
    sinks) are turned into SinkWriteError. Short writes are retried
    until the sink stops making progress.
    """
    count = 0
    view = memoryview(data)
    while count < len(data):
        try:
            n = sink.write(bytes(view[count:]))
        except (OSError, ValueError) as e:
            return failed(count, SinkWriteError(cause=e))
        if n is None:
            return EmitResult(len(data))
        if n <= 0:
            return failed(count, SinkWriteError(cause=OSError(f"short write: {count} of {len(data)} bytes")))
        count += n
    return EmitResult(count)


def _to_bytes(data: Union[bytes, bytearray, str], encoding: str = "utf-8") -> bytes:
    if isinstance(data, str):
        return data.encode(encoding)
    return bytes(data)


@runtime_checkable
class Content(Protocol):
    """Emission capability. BounT, Data, Print, ... all qualify."""

    def emit(self, sink: Sink) -> EmitResult:
        ...


# Wrap functions turn content into other content (escaping, bracketing).
WrapFn = Callable[[Content], Content]


class _Empty:
    """Emits nothing."""

    def emit(self, sink: Sink) -> EmitResult:
        return EmitResult(0)

    def __repr__(self) -> str:
        return "EMPTY"


EMPTY = _Empty()


class Data:
    """Fixed buffer emitted verbatim."""

    __slots__ = ("data",)

    def __init__(self, data: Union[bytes, bytearray, str], encoding: str = "utf-8"):
        self.data = _to_bytes(data, encoding)

    def emit(self, sink: Sink) -> EmitResult:
        return write_bytes(sink, self.data)

    def __repr__(self) -> str:
        return f"Data({self.data!r})"


class Print:
    """One value rendered with default formatting (`str()`); bytes pass through."""

    __slots__ = ("value", "encoding")

    def __init__(self, value: Any, encoding: str = "utf-8"):
        self.value = value
        self.encoding = encoding

    def emit(self, sink: Sink) -> EmitResult:
        if isinstance(self.value, (bytes, bytearray)):
            return write_bytes(sink, bytes(self.value))
        return write_bytes(sink, str(self.value).encode(self.encoding))

    def __repr__(self) -> str:
        return f"Print({self.value!r})"


class Printf:
    """Printf-style formatted values: `fmt % values`."""

    __slots__ = ("fmt", "values", "encoding")

    def __init__(self, fmt: str, *values: Any, encoding: str = "utf-8"):
        self.fmt = fmt
        self.values: Tuple[Any, ...] = values
        self.encoding = encoding

    def emit(self, sink: Sink) -> EmitResult:
        try:
            text = self.fmt % self.values
        except (TypeError, ValueError, KeyError) as e:
            return failed(0, ContentError(message=f"cannot format {self.values!r} with '{self.fmt}': {e}"))
        return write_bytes(sink, text.encode(self.encoding))

    def __repr__(self) -> str:
        return f"Printf({self.fmt!r}, {', '.join(repr(v) for v in self.values)})"


class Generator:
    """
    Caller supplied emission function.

    The function receives the sink and returns either the number of
    bytes it wrote or an EmitResult. Sink errors it lets through
    (OSError, ValueError) become a SinkWriteError result; the bytes the
    function wrote before failing are unknown, so the count is 0.
    """

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[Sink], Union[int, EmitResult]]):
        self.fn = fn

    def emit(self, sink: Sink) -> EmitResult:
        try:
            res = self.fn(sink)
        except (OSError, ValueError) as e:
            return failed(0, SinkWriteError(cause=e))
        if isinstance(res, EmitResult):
            return res
        return EmitResult(int(res))


class Wrapper:
    """Emits prefix, inner content, postfix."""

    __slots__ = ("prefix", "content", "postfix")

    def __init__(
        self,
        prefix: Union[bytes, str],
        content: Content,
        postfix: Union[bytes, str],
    ):
        self.prefix = _to_bytes(prefix)
        self.content = content
        self.postfix = _to_bytes(postfix)

    def emit(self, sink: Sink) -> EmitResult:
        res = EmitResult(0)
        if self.prefix:
            res = write_bytes(sink, self.prefix)
            if not res.ok:
                return res
        res = res.then(self.content.emit(sink))
        if not res.ok or not self.postfix:
            return res
        return res.then(write_bytes(sink, self.postfix))

    def wrap(self, content: Content) -> Wrapper:
        """Same brackets around other content; usable as a wrap function."""
        return Wrapper(self.prefix, content, self.postfix)


def embrace(prefix: str, content: Content, postfix: str) -> Wrapper:
    return Wrapper(prefix, content, postfix)


class _EscapingSink:
    """
    Sink adapter that decodes incrementally, escapes the text and forwards
    it. Inner content sees its whole buffer accepted; `forwarded` counts
    the escaped bytes that actually reached the target.
    """

    def __init__(self, target: Sink, escape: Callable[[str], str], encoding: str):
        self._target = target
        self._escape = escape
        self._encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)()
        self.forwarded = 0
        self.failure: Optional[EmitError] = None

    def write(self, data: bytes) -> int:
        text = self._decoder.decode(data)
        if text:
            res = write_bytes(self._target, self._escape(text).encode(self._encoding))
            self.forwarded += res.count
            if res.error is not None:
                self.failure = res.error
                raise OSError(str(res.error))
        return len(data)

    def finish(self) -> None:
        # raises UnicodeDecodeError on a dangling partial sequence
        self._decoder.decode(b"", final=True)


class Escaper:
    """Routes inner content through an escaping function before it reaches the sink."""

    __slots__ = ("content", "escape", "encoding")

    def __init__(self, content: Content, escape: Callable[[str], str], encoding: str = "utf-8"):
        self.content = content
        self.escape = escape
        self.encoding = encoding

    def emit(self, sink: Sink) -> EmitResult:
        esc = _EscapingSink(sink, self.escape, self.encoding)
        res = self.content.emit(esc)
        if esc.failure is not None:
            return failed(esc.forwarded, esc.failure)
        if res.error is not None:
            return failed(esc.forwarded, res.error)
        try:
            esc.finish()
        except ValueError as e:
            return failed(esc.forwarded, SinkWriteError(cause=e))
        return EmitResult(esc.forwarded)

    def wrap(self, content: Content) -> Escaper:
        return Escaper(content, self.escape, self.encoding)


__all__ = [
    "Sink",
    "EmitResult",
    "failed",
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
]
