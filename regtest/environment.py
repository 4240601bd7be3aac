from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import cast, get_type_hints, overload

from .catalog import DEFAULT_GROUP, TestBody, TestCase, get_catalog
from .isolation import Output

type TestDecorator = Callable[[TestBody], TestBody]


def validate_name(name: str) -> str:
    if not isinstance(name, str) or not name.isidentifier():
        raise ValueError(
            f"Test names must be identifiers (letters, digits, underscores, "
            f"not starting with a digit): {name!r}"
        )
    return name


def validate_group(group: str) -> str:
    if not isinstance(group, str) or not group.strip():
        raise ValueError("Group names must be non-empty strings")
    return group


def is_output_annotation(annotation: object) -> bool:
    if annotation is Output:
        return True
    if isinstance(annotation, str):
        normalized = annotation.replace(" ", "")
        return normalized in {"Output", "regtest.Output", "isolation.Output"}
    return False


def safe_type_hints(function: TestBody) -> dict[str, object]:
    try:
        hints = get_type_hints(function)
    except Exception:
        raw = dict(getattr(function, "__annotations__", {}) or {})
        _ = raw.pop("return", None)
        return raw
    hints.pop("return", None)
    return hints


def output_parameters(function: TestBody) -> list[str]:
    """Names of the parameters that receive the active sink's writer."""
    return [
        argument_name
        for argument_name, argument_hint in safe_type_hints(function).items()
        if is_output_annotation(argument_hint)
    ]


def require_plain_body(function: TestBody, *, handler_name: str) -> None:
    if not callable(function):
        raise TypeError(f"regtest test '{handler_name}' must be callable")
    if inspect.iscoroutinefunction(function):
        raise TypeError(f"regtest test '{handler_name}' must not be defined with async def")

    injectable = set(output_parameters(function))
    signature = inspect.signature(function)
    for argument_name, parameter in signature.parameters.items():
        if parameter.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            continue
        if argument_name in injectable:
            continue
        if parameter.default is inspect.Parameter.empty:
            raise TypeError(
                f"regtest test '{handler_name}' takes no arguments "
                f"other than an Output writer; got '{argument_name}'"
            )


def resolve_kwargs(function: TestBody, writer: object) -> dict[str, object]:
    return {argument_name: writer for argument_name in output_parameters(function)}


def register_test(group: str, name: str, function: TestBody) -> TestCase:
    validate_group(group)
    validate_name(name)
    require_plain_body(function, handler_name=f"{group}/{name}")
    return get_catalog().register(group, name, function)


class Group:
    """A label that tests can be registered under."""

    _label: str

    def __init__(self, label: str):
        self._label = validate_group(label)

    @property
    def label(self) -> str:
        return self._label

    @overload
    def test(self, function_or_name: TestBody, *, name: str | None = None) -> TestBody: ...

    @overload
    def test(
        self,
        function_or_name: str | None = None,
        *,
        name: str | None = None,
    ) -> TestDecorator: ...

    def test(
        self,
        function_or_name: TestBody | str | None = None,
        *,
        name: str | None = None,
    ) -> TestBody | TestDecorator:
        return test(function_or_name, name=name, group=self._label)


@overload
def test(
    function_or_name: TestBody,
    *,
    name: str | None = None,
    group: str = DEFAULT_GROUP,
) -> TestBody: ...


@overload
def test(
    function_or_name: str | None = None,
    *,
    name: str | None = None,
    group: str = DEFAULT_GROUP,
) -> TestDecorator: ...


def test(
    function_or_name: TestBody | str | None = None,
    *,
    name: str | None = None,
    group: str = DEFAULT_GROUP,
) -> TestBody | TestDecorator:
    """Register a test when the declaring module is imported.

    Usable bare (`@test`), with an explicit name (`@test("name")` or
    `@test(name="name")`) and with a group (`@test(group="parsing")`). The
    function is returned unchanged.
    """
    if callable(function_or_name):
        function = cast(TestBody, function_or_name)
        _ = register_test(group, function.__name__ if name is None else name, function)
        return function

    if function_or_name is not None and name is not None and function_or_name != name:
        raise ValueError(
            f"Conflicting test names: {function_or_name!r} and name={name!r}"
        )
    explicit_name = name if name is not None else function_or_name

    def decorator(function: TestBody) -> TestBody:
        leaf_name = function.__name__ if explicit_name is None else explicit_name
        _ = register_test(group, leaf_name, function)
        return function

    return decorator


def group(label: str) -> Group:
    return Group(label)
