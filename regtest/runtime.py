from __future__ import annotations

import importlib.util
import re
import sys
from collections.abc import Iterable
from contextvars import ContextVar
from pathlib import Path
from types import ModuleType

from rich.console import Console

from .catalog import Catalog, get_catalog
from .config import Settings, load_settings
from .isolation import open_sink
from .logging import log_event, log_fields
from .report import print_info, print_summary
from .runner import Runner, make_console
from .status import ExitStatus, exit_status

RUNTIME_COMPONENT = "runtime"

_AUTORUN_SUPPRESSED: ContextVar[bool] = ContextVar(
    "regtest_autorun_suppressed",
    default=False,
)


def emit_runtime_log(
    event: str,
    *,
    message: str = "",
    level: str = "info",
    **fields: object,
) -> None:
    _ = log_event(
        component=RUNTIME_COMPONENT,
        event=event,
        message=message,
        level=level,
        **fields,
    )


def module_name_for(module_path: Path, position: int) -> str:
    stem = re.sub(r"\W", "_", module_path.stem)
    return f"_regtest_module_{position}_{stem}"


def load_test_module(module_file: str | Path, position: int = 0) -> ModuleType:
    """Import one test module by path; its declarations register as it runs."""
    module_path = Path(module_file).resolve()
    if not module_path.is_file():
        raise FileNotFoundError(f"Test module not found: {module_path}")

    module_dir = str(module_path.parent)
    if module_dir not in sys.path:
        sys.path.insert(0, module_dir)

    module_name = module_name_for(module_path, position)
    spec = importlib.util.spec_from_file_location(module_name, str(module_path))
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Failed to load test module from {module_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        _ = sys.modules.pop(module_name, None)
        raise
    emit_runtime_log("module.load.complete", module_file=str(module_path))
    return module


def load_test_modules(module_files: Iterable[str | Path]) -> list[ModuleType]:
    # modules ending in autorun() must not take over the process while the
    # command line is still importing the rest
    token = _AUTORUN_SUPPRESSED.set(True)
    try:
        return [
            load_test_module(module_file, position)
            for position, module_file in enumerate(module_files)
        ]
    finally:
        _AUTORUN_SUPPRESSED.reset(token)


def run_main(
    settings: Settings | None = None,
    *,
    catalog: Catalog | None = None,
    console: Console | None = None,
) -> ExitStatus:
    """Banner, run, summary; returns the status the process should exit with."""
    settings = settings if settings is not None else load_settings()
    catalog = catalog if catalog is not None else get_catalog()
    console = console if console is not None else make_console()

    log_file = None if settings.no_log else settings.log_file
    with log_fields(log_file=log_file), open_sink(settings) as sink:
        print_info(console, catalog)
        if not catalog.groups():
            emit_runtime_log("run.empty")
            return ExitStatus.SUCCESS

        tally = Runner(catalog, sink, console).run()
        print_summary(console, sink, tally)

    status = exit_status(tally)
    emit_runtime_log(
        "run.exit",
        level="info" if status is ExitStatus.SUCCESS else "error",
        status=int(status),
    )
    return status


def autorun(settings: Settings | None = None) -> None:
    """Run every registered test and exit, if the entry point is enabled.

    Call it at the bottom of a test module. With `entry_point` disabled the
    call does nothing, so the module can be imported by the main project.
    """
    if _AUTORUN_SUPPRESSED.get():
        return
    settings = settings if settings is not None else load_settings()
    if not settings.entry_point:
        emit_runtime_log("autorun.disabled")
        return
    sys.exit(int(run_main(settings)))
