from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from .logging import log_event

type TestBody = Callable[..., object]

DEFAULT_GROUP = "ungrouped"
CATALOG_COMPONENT = "catalog"


class TestCase(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
    __test__ = False

    name: str
    group: str
    body: TestBody


class Catalog:
    """Group -> (test name -> TestCase).

    Iteration order is whatever the underlying dicts give; callers must not
    depend on it. The total is computed on first read and frozen from then on.
    """

    _groups: dict[str, dict[str, TestCase]]
    _count: int | None

    def __init__(self):
        self._groups = {}
        self._count = None

    def register(
        self,
        group: str,
        name: str,
        body: TestBody,
    ) -> TestCase:
        case = TestCase(name=name, group=group, body=body)
        tests = self._groups.setdefault(group, {})
        replaced = name in tests
        tests[name] = case
        if self._count is not None:
            _ = log_event(
                component=CATALOG_COMPONENT,
                event="catalog.register.late",
                level="warning",
                message="registered after the test count was read",
                group=group,
                test=name,
            )
        elif replaced:
            _ = log_event(
                component=CATALOG_COMPONENT,
                event="catalog.register.replaced",
                group=group,
                test=name,
            )
        return case

    def groups(self) -> list[str]:
        return list(self._groups)

    def tests(self, group: str) -> list[TestCase]:
        return list(self._groups.get(group, {}).values())

    def get(self, group: str, name: str) -> TestCase | None:
        return self._groups.get(group, {}).get(name)

    def all_tests(self) -> list[tuple[str, str, TestBody]]:
        return [
            (group, case.name, case.body)
            for group, tests in self._groups.items()
            for case in tests.values()
        ]

    def count(self) -> int:
        if self._count is None:
            self._count = sum(len(tests) for tests in self._groups.values())
        return self._count

    def clear(self) -> None:
        self._groups.clear()
        self._count = None

    def __len__(self) -> int:
        return self.count()


_catalog: Catalog | None = None


def get_catalog() -> Catalog:
    # constructed on first use so importing order between test modules never matters
    global _catalog
    if _catalog is None:
        _catalog = Catalog()
    return _catalog


def clear_catalog() -> None:
    get_catalog().clear()
