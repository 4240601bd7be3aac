"""Tokenize/stringify round trip, declared the way a host project would.

Run with `regtest examples/tokenizing.py` or `python examples/tokenizing.py`.
"""

from __future__ import annotations

import regtest


def tokenize(text: str) -> list[str]:
    return text.split()


def stringify(tokens: list[str]) -> str:
    return " ".join(tokens)


tokenizing = regtest.group("tokenizing")


@tokenizing.test
def repeatable_tokenization_and_serialization() -> None:
    input_string = "  int main ( )  { return 0 ; }"

    tokens1 = tokenize(input_string)
    tokens2 = tokenize(stringify(tokens1))

    regtest.check(len(tokens1) == len(tokens2))
    for left, right in zip(tokens1, tokens2, strict=True):
        regtest.check(left == right)


@tokenizing.test
def empty_input_has_no_tokens(log: regtest.Output) -> None:
    tokens = tokenize("")
    log.write(f"tokens: {tokens!r}\n")
    regtest.check(tokens == [])


@regtest.test
def chatty_test_output_goes_to_the_log() -> None:
    print("this line ends up in tests.txt, not on the console")


regtest.autorun()
