"""Banner and summary blocks printed around a run."""

from __future__ import annotations

from rich.console import Console

from .catalog import Catalog
from .isolation import SEPARATOR, Sink
from .runner import Tally


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def print_separator(console: Console) -> None:
    console.print(SEPARATOR)


def print_info(console: Console, catalog: Catalog) -> None:
    print_separator(console)
    console.print(
        "INFO:   If all tests pass (or no tests fail), the program will return success."
    )
    console.print("        Otherwise, it will return failure.")
    console.print(
        f"INFO:   Found {plural(catalog.count(), 'test')} "
        f"in {plural(len(catalog.groups()), 'group')}."
    )
    print_separator(console)


def summary_lines(tally: Tally) -> list[str]:
    return [
        SEPARATOR,
        "SUMMARY:",
        f"    Passed {tally.passed} out of {tally.total} tests.",
        SEPARATOR,
    ]


def print_summary(console: Console, sink: Sink, tally: Tally) -> None:
    for line in summary_lines(tally):
        console.print(line)
    for line in summary_lines(tally):
        sink.write_line(line)
    sink.flush()
