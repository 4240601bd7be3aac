from __future__ import annotations

import pytest
from regtest import catalog


@pytest.fixture(autouse=True)
def clear_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "REGTEST_LOG_FILE",
        "REGTEST_NO_LOG",
        "REGTEST_ENTRY_POINT",
        "REGTEST_EVENT_LOG",
        "REGTEST_EVENT_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    catalog.clear_catalog()
    yield
    catalog.clear_catalog()
