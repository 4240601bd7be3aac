from __future__ import annotations

import pytest
from regtest import catalog, environment
from regtest.isolation import Output


def registered() -> list[tuple[str, str]]:
    return [(group, name) for group, name, _body in catalog.get_catalog().all_tests()]


def test_bare_decorator_registers_under_default_group() -> None:
    @environment.test
    def parses_empty_input() -> None:
        return None

    assert registered() == [("ungrouped", "parses_empty_input")]
    case = catalog.get_catalog().get("ungrouped", "parses_empty_input")
    assert case is not None
    assert case.body is parses_empty_input


def test_decorator_returns_function_unchanged() -> None:
    def body() -> int:
        return 7

    decorated = environment.test(group="math")(body)

    assert decorated is body
    assert decorated() == 7


def test_explicit_name_and_group() -> None:
    @environment.test("renamed", group="parsing")
    def original_name() -> None:
        return None

    assert registered() == [("parsing", "renamed")]


def test_name_keyword_with_group() -> None:
    @environment.test(name="explicit", group="g")
    def original_name() -> None:
        return None

    @environment.test(name="bare_form")
    def other() -> None:
        return None

    assert registered() == [("g", "explicit"), ("ungrouped", "bare_form")]


def test_name_keyword_on_group_object() -> None:
    parsing = environment.group("parsing")

    @parsing.test(name="renamed")
    def original_name() -> None:
        return None

    def direct() -> None:
        return None

    _ = parsing.test(direct, name="direct_call")

    assert registered() == [("parsing", "renamed"), ("parsing", "direct_call")]


def test_conflicting_positional_and_keyword_names_are_rejected() -> None:
    with pytest.raises(ValueError, match="Conflicting test names"):
        environment.test("one", name="two")

    assert registered() == []


def test_group_object_registers_into_its_label() -> None:
    tokenizing = environment.group("tokenizing")

    @tokenizing.test
    def splits_words() -> None:
        return None

    @tokenizing.test("joins")
    def joins_words() -> None:
        return None

    assert tokenizing.label == "tokenizing"
    assert registered() == [("tokenizing", "splits_words"), ("tokenizing", "joins")]


def test_user_chosen_ungrouped_label_joins_default_group() -> None:
    @environment.test
    def first() -> None:
        return None

    @environment.test(group="ungrouped")
    def second() -> None:
        return None

    assert catalog.get_catalog().groups() == ["ungrouped"]
    assert catalog.get_catalog().count() == 2


def test_redeclaring_a_test_replaces_it() -> None:
    @environment.test("t1", group="g")
    def old_body() -> None:
        return None

    @environment.test("t1", group="g")
    def new_body() -> None:
        return None

    assert catalog.get_catalog().count() == 1
    case = catalog.get_catalog().get("g", "t1")
    assert case is not None
    assert case.body is new_body


@pytest.mark.parametrize("name", ["1starts_with_digit", "has space", "", "dash-ed"])
def test_invalid_names_are_rejected(name: str) -> None:
    def body() -> None:
        return None

    with pytest.raises(ValueError, match="identifiers"):
        environment.test(name)(body)


def test_empty_group_is_rejected() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        environment.group("  ")


def test_async_body_is_rejected() -> None:
    async def coroutine_body() -> None:
        return None

    with pytest.raises(TypeError, match="async def"):
        environment.test(coroutine_body)


def test_body_with_required_argument_is_rejected() -> None:
    def needs_input(value: int) -> None:
        del value

    with pytest.raises(TypeError, match="no arguments"):
        environment.test(needs_input)

    assert registered() == []


def test_body_may_take_output_writer_and_defaults() -> None:
    def writes(log: Output, retries: int = 3) -> None:
        del log, retries

    _ = environment.test(writes)

    assert environment.output_parameters(writes) == ["log"]
    assert environment.resolve_kwargs(writes, "writer") == {"log": "writer"}
    assert registered() == [("ungrouped", "writes")]
