from .catalog import (
    DEFAULT_GROUP,
    Catalog,
    TestCase,
    clear_catalog,
    get_catalog,
)
from .config import Settings, load_settings
from .environment import Group, group, test
from .failure import Failure, TestFailure, check, fail
from .isolation import FileSink, NullSink, Output, Sink, open_sink, with_redirection
from .runner import Runner, Tally, TestOutcome, run
from .runtime import autorun, load_test_modules, run_main
from .status import ExitStatus, exit_status

__all__ = [
    "DEFAULT_GROUP",
    "Catalog",
    "TestCase",
    "clear_catalog",
    "get_catalog",
    "Settings",
    "load_settings",
    "Group",
    "group",
    "test",
    "Failure",
    "TestFailure",
    "check",
    "fail",
    "FileSink",
    "NullSink",
    "Output",
    "Sink",
    "open_sink",
    "with_redirection",
    "Runner",
    "Tally",
    "TestOutcome",
    "run",
    "autorun",
    "load_test_modules",
    "run_main",
    "ExitStatus",
    "exit_status",
]
