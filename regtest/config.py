from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import cast

from pydantic import BaseModel, ConfigDict

DEFAULT_LOG_FILE = "tests.txt"

ENV_LOG_FILE = "REGTEST_LOG_FILE"
ENV_NO_LOG = "REGTEST_NO_LOG"
ENV_ENTRY_POINT = "REGTEST_ENTRY_POINT"


class Settings(BaseModel):
    """Run configuration.

    log_file: where captured test output goes.
    no_log: discard captured output instead; no file is created.
    entry_point: whether `autorun()` takes over the process.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    log_file: str = DEFAULT_LOG_FILE
    no_log: bool = False
    entry_point: bool = True


def mapping_from_object(value: object) -> dict[str, object]:
    if not isinstance(value, dict):
        return {}
    mapping = cast(dict[object, object], value)
    return {
        str(key): inner_value
        for key, inner_value in mapping.items()
    }


def read_pyproject_settings(project_dir: str | Path = ".") -> dict[str, object]:
    pyproject_path = Path(project_dir) / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    pyproject_raw = cast(
        object,
        tomllib.loads(pyproject_path.read_text(encoding="utf-8")),
    )
    pyproject_data = mapping_from_object(pyproject_raw)
    tool_table = mapping_from_object(pyproject_data.get("tool"))
    regtest_table = mapping_from_object(tool_table.get("regtest"))
    return {
        key.replace("-", "_"): value
        for key, value in regtest_table.items()
    }


def read_env_settings() -> dict[str, object]:
    values: dict[str, object] = {}
    log_file = (os.environ.get(ENV_LOG_FILE) or "").strip()
    if log_file:
        values["log_file"] = log_file
    no_log = (os.environ.get(ENV_NO_LOG) or "").strip()
    if no_log:
        values["no_log"] = no_log
    entry_point = (os.environ.get(ENV_ENTRY_POINT) or "").strip()
    if entry_point:
        values["entry_point"] = entry_point
    return values


def load_settings(project_dir: str | Path = ".", **overrides: object) -> Settings:
    """Defaults < [tool.regtest] in pyproject.toml < environment < overrides.

    Overrides that are None are ignored so CLI flags can be passed through as-is.
    """
    merged: dict[str, object] = {}
    merged.update(read_pyproject_settings(project_dir))
    merged.update(read_env_settings())
    for key, value in overrides.items():
        if value is None:
            continue
        merged[key] = value
    return Settings.model_validate(merged)
