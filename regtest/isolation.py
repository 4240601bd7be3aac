from __future__ import annotations

import io
from collections.abc import Callable, Iterator
from contextlib import contextmanager, redirect_stdout
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Protocol, Self, TextIO, cast, override

from .logging import log_event

if TYPE_CHECKING:
    from .config import Settings

SEPARATOR = "-" * 80
ISOLATION_COMPONENT = "isolation"


class Output(Protocol):
    """Annotation for a test parameter that should receive the sink's writer."""

    def write(self, text: str, /) -> int: ...

    def flush(self) -> None: ...


class Sink:
    """Where a test body's console writes go while it runs."""

    stream: TextIO
    enabled: bool = True

    def __init__(self, stream: TextIO):
        self.stream = stream

    def write(self, text: str) -> None:
        _ = self.stream.write(text)

    def write_line(self, text: str = "") -> None:
        self.write(text + "\n")

    def separator(self) -> None:
        self.write_line(SEPARATOR)

    def flush(self) -> None:
        self.stream.flush()

    def close(self) -> None:
        if not self.stream.closed:
            self.stream.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


class FileSink(Sink):
    """Log file shared by every test of a run, truncated when opened."""

    path: Path

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self.path.open("w", encoding="utf-8"))
        _ = log_event(
            component=ISOLATION_COMPONENT,
            event="sink.open",
            path=str(self.path),
        )

    @override
    def __repr__(self) -> str:
        return f"FileSink(path={str(self.path)!r})"


class DiscardStream(io.TextIOBase):
    """Text stream that accepts and drops everything; holds no file handle."""

    @override
    def writable(self) -> bool:
        return True

    @override
    def write(self, text: str, /) -> int:
        return len(text)


class NullSink(Sink):
    enabled = False

    def __init__(self):
        super().__init__(cast(TextIO, DiscardStream()))

    @override
    def __repr__(self) -> str:
        return "NullSink()"


def open_sink(settings: Settings) -> Sink:
    if settings.no_log:
        return NullSink()
    return FileSink(settings.log_file)


@contextmanager
def redirected(sink: Sink) -> Iterator[TextIO]:
    # redirect_stdout restores the saved stream on exit, even if the body
    # reassigned sys.stdout itself
    try:
        with redirect_stdout(sink.stream):
            yield sink.stream
    finally:
        sink.flush()


def with_redirection[R](sink: Sink, body: Callable[[], R]) -> R:
    with redirected(sink):
        return body()
