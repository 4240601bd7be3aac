from __future__ import annotations

import sys
from typing import TextIO

from pydantic import BaseModel, Field
from rich.console import Console

from .catalog import Catalog, TestCase, get_catalog
from .environment import resolve_kwargs
from .failure import Failure, TestFailure
from .isolation import NullSink, Sink, with_redirection
from .logging import log_event

RUNNER_COMPONENT = "runner"


class TestOutcome(BaseModel):
    __test__ = False

    index: int
    group: str
    name: str
    passed: bool
    diagnostic: str | None = None


class Tally(BaseModel):
    passed: int = 0
    total: int = 0
    outcomes: list[TestOutcome] = Field(default_factory=list)

    def record(self, outcome: TestOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.passed:
            self.passed += 1

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.passed)

    @property
    def all_passed(self) -> bool:
        return self.passed == self.total


def make_console(file: TextIO | None = None) -> Console:
    """Console bound to the stream that is stdout *now*.

    Test bodies run with sys.stdout pointed at a sink; binding the file up
    front keeps status lines on the real console.
    """
    return Console(
        file=file if file is not None else sys.stdout,
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=True,
    )


def emit_runner_log(
    event: str,
    *,
    message: str = "",
    level: str = "info",
    **fields: object,
) -> None:
    _ = log_event(
        component=RUNNER_COMPONENT,
        event=event,
        message=message,
        level=level,
        **fields,
    )


class Runner:
    catalog: Catalog
    sink: Sink
    console: Console

    def __init__(
        self,
        catalog: Catalog | None = None,
        sink: Sink | None = None,
        console: Console | None = None,
    ):
        self.catalog = catalog if catalog is not None else get_catalog()
        self.sink = sink if sink is not None else NullSink()
        self.console = console if console is not None else make_console()

    def run(self) -> Tally:
        tally = Tally(total=self.catalog.count())
        # tests registered by a running body are neither counted nor run
        plan = [(group, self.catalog.tests(group)) for group in self.catalog.groups()]
        emit_runner_log("run.start", total=tally.total, groups=len(plan))

        self.console.print("RUNNING TESTS...")
        index = 0
        for group, cases in plan:
            self.console.print(f"Group: '{group}'")
            self.sink.write_line(f"Group: '{group}'")
            emit_runner_log("group.start", group=group)
            for case in cases:
                index += 1
                tally.record(self.run_test(index, case))

        emit_runner_log(
            "run.complete",
            level="info" if tally.all_passed else "error",
            passed=tally.passed,
            total=tally.total,
        )
        return tally

    def run_test(self, index: int, case: TestCase) -> TestOutcome:
        self.console.print(f"    [{index}] : '{case.name}' ", end="")
        self.sink.separator()
        self.sink.write_line(f"Test '{case.name}' log:")
        self.sink.write_line()

        try:
            failure = self.invoke(case)
        except BaseException as error:
            self.console.print()
            emit_runner_log(
                "test.crashed",
                level="error",
                group=case.group,
                test=case.name,
                index=index,
                error=repr(error),
            )
            raise

        if failure is None:
            self.sink.write("\npassed.\n")
            self.sink.separator()
            self.console.print("passed.")
            emit_runner_log("test.passed", group=case.group, test=case.name, index=index)
            return TestOutcome(index=index, group=case.group, name=case.name, passed=True)

        self.sink.write(f"\nfailed at '{failure.diagnostic}'.\n")
        self.sink.separator()
        self.console.print(f"failed at '{failure.diagnostic}'.")
        emit_runner_log(
            "test.failed",
            level="error",
            group=case.group,
            test=case.name,
            index=index,
            diagnostic=failure.diagnostic,
        )
        return TestOutcome(
            index=index,
            group=case.group,
            name=case.name,
            passed=False,
            diagnostic=failure.diagnostic,
        )

    def invoke(self, case: TestCase) -> Failure | None:
        kwargs = resolve_kwargs(case.body, self.sink.stream)
        try:
            result = with_redirection(self.sink, lambda: case.body(**kwargs))
        except TestFailure as error:
            return error.failure
        if isinstance(result, Failure):
            return result
        return None


def run(
    catalog: Catalog | None = None,
    sink: Sink | None = None,
    console: Console | None = None,
) -> Tally:
    return Runner(catalog, sink, console).run()
