from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .runner import Tally


class ExitStatus(IntEnum):
    SUCCESS = 0
    FAILURE = 1


def exit_status(tally: Tally) -> ExitStatus:
    if tally.passed == tally.total:
        return ExitStatus.SUCCESS
    return ExitStatus.FAILURE
