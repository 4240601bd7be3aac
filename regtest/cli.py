from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import load_settings
from .runtime import emit_runtime_log, load_test_modules, run_main


class CliArgs(argparse.Namespace):
    modules: list[str]
    log_file: str | None = None
    no_log: bool | None = None
    project_dir: str = "."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regtest",
        description="Run the tests registered by the given modules.",
    )
    _ = parser.add_argument(
        "modules",
        nargs="*",
        help="Python files that declare tests (imported in the order given)",
    )
    _ = parser.add_argument(
        "--log-file",
        default=None,
        help="File that receives captured test output (default: tests.txt)",
    )
    _ = parser.add_argument(
        "--no-log",
        action="store_const",
        const=True,
        default=None,
        help="Discard captured test output instead of writing a log file",
    )
    _ = parser.add_argument(
        "--project-dir",
        default=".",
        help="Directory whose pyproject.toml holds [tool.regtest] (default: .)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv, namespace=CliArgs())

    settings = load_settings(
        args.project_dir,
        log_file=args.log_file,
        no_log=args.no_log,
    )
    emit_runtime_log(
        "cli.start",
        modules=list(args.modules),
        log_file=settings.log_file,
        no_log=settings.no_log,
    )
    _ = load_test_modules(args.modules)
    return int(run_main(settings))


def entry() -> None:
    sys.exit(main())
