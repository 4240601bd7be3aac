from __future__ import annotations

import io

from regtest import catalog, report
from regtest.isolation import Sink
from regtest.runner import Tally, make_console


def console_text(stream: io.StringIO) -> str:
    return stream.getvalue()


def test_info_banner_uses_singular_forms() -> None:
    registry = catalog.Catalog()
    _ = registry.register("g", "only", lambda: None)
    stream = io.StringIO()

    report.print_info(make_console(stream), registry)

    text = console_text(stream)
    assert "INFO:   Found 1 test in 1 group.\n" in text
    assert text.startswith("-" * 80 + "\n")
    assert text.endswith("-" * 80 + "\n")


def test_info_banner_uses_plural_forms() -> None:
    registry = catalog.Catalog()
    _ = registry.register("a", "one", lambda: None)
    _ = registry.register("a", "two", lambda: None)
    _ = registry.register("b", "three", lambda: None)
    stream = io.StringIO()

    report.print_info(make_console(stream), registry)

    assert "Found 3 tests in 2 groups." in console_text(stream)


def test_info_banner_for_empty_catalog() -> None:
    stream = io.StringIO()

    report.print_info(make_console(stream), catalog.Catalog())

    assert "Found 0 tests in 0 groups." in console_text(stream)


def test_summary_is_mirrored_into_the_sink() -> None:
    stream = io.StringIO()
    sink = Sink(io.StringIO())

    report.print_summary(make_console(stream), sink, Tally(passed=1, total=2))

    expected = "\n".join(
        ["-" * 80, "SUMMARY:", "    Passed 1 out of 2 tests.", "-" * 80]
    ) + "\n"
    assert console_text(stream) == expected
    assert sink.stream.getvalue() == expected  # type: ignore[attr-defined]
