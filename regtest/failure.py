from __future__ import annotations

import inspect
from pathlib import PurePath
from typing import NoReturn, override

from pydantic import BaseModel, ConfigDict


class Failure(BaseModel):
    """Diagnostic carried out of a failing test body.

    A body may either raise `TestFailure` (what `check` does) or return a
    `Failure` directly; the runner treats both the same way.
    """

    model_config = ConfigDict(frozen=True)

    diagnostic: str


class TestFailure(Exception):
    """The only exception the runner recovers from.

    Anything else raised by a test body propagates and ends the run.
    """

    __test__ = False

    def __init__(self, failure: Failure | str):
        if isinstance(failure, str):
            failure = Failure(diagnostic=failure)
        super().__init__(failure.diagnostic)
        self.failure = failure

    @property
    def diagnostic(self) -> str:
        return self.failure.diagnostic

    @override
    def __repr__(self) -> str:
        return f"TestFailure({self.diagnostic!r})"


def location(filename: str, line: int) -> str:
    # both separators, so Windows paths condense on any host
    tail = PurePath(filename.replace("\\", "/")).name
    return f"{tail}:{line}"


def caller_location(depth: int = 1) -> str:
    frame = inspect.currentframe()
    try:
        target = frame
        for _ in range(depth + 1):
            if target is None:
                break
            target = target.f_back
        if target is None:
            return "<unknown>:0"
        return location(target.f_code.co_filename, target.f_lineno)
    finally:
        del frame


def check(condition: object) -> None:
    """Raise `TestFailure` at the caller's `file:line` when `condition` is falsy."""
    if not condition:
        raise TestFailure(caller_location(depth=1))


def fail(diagnostic: str) -> NoReturn:
    raise TestFailure(diagnostic)
