from __future__ import annotations

import pytest

from tests.support.harness import KEYWORDS, parse_errors

KEYWORD_CASES = sorted(KEYWORDS.items())


@pytest.mark.parametrize(
    "keyword, token_type",
    [pytest.param(word, tt, id=word) for word, tt in KEYWORD_CASES],
)
def test_keyword_is_not_a_binding_name(keyword: str, token_type) -> None:
    assert parse_errors(f"let {keyword} = 1;") == [
        f"expected next token to be IDENT, got {token_type} instead"
    ]


@pytest.mark.parametrize(
    "keyword",
    [pytest.param(word, id=word) for word, _ in KEYWORD_CASES],
)
def test_keyword_is_not_a_parameter_name(keyword: str) -> None:
    assert len(parse_errors(f"fn({keyword}) {{ 1 }}")) == 1


@pytest.mark.parametrize(
    "name",
    [pytest.param(f"{word}_x", id=f"{word}-prefixed") for word, _ in KEYWORD_CASES],
)
def test_keyword_prefixed_identifier_binds(name: str) -> None:
    assert parse_errors(f"let {name} = 1; {name}") == []
