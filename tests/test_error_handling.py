from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional

import pytest

from ambients_ref.parser_rd import TERM_START, parse, parse_source
from ambients_ref.token_types import AmbientsSyntaxError
from tests.support.harness import LexError, ParseError, TT, expect_parse_error

CLOSE_RSQB = frozenset({TT.DOT, TT.PIPE, TT.RSQB})
CLOSE_RPAR = frozenset({TT.DOT, TT.PIPE, TT.RPAR})
AFTER_TOP = frozenset({TT.DOT, TT.PIPE, TT.EOF})


@dataclass(frozen=True)
class ErrCase:
    name: str
    source: str
    token: TT
    expected: FrozenSet[TT]
    msg: str
    pos: Optional[int] = None


PARSE_ERROR_CASES: List[ErrCase] = [
    ErrCase("empty-input", "", TT.EOF, TERM_START, "Unexpected end of input", 0),
    ErrCase("whitespace-only", "  \n ", TT.EOF, TERM_START, "Unexpected end of input", 4),
    ErrCase("bare-name", "a", TT.EOF, frozenset({TT.LSQB, TT.EMPTY}), "after ambient name 'a'", 1),
    ErrCase("bare-name-in-serial", "a.b", TT.DOT, frozenset({TT.LSQB, TT.EMPTY}), "Expected '[' or '[]'", 1),
    ErrCase("unterminated-ambient", "a[in b", TT.EOF, CLOSE_RSQB, "Unterminated ambient 'a'", 6),
    ErrCase(
        "unterminated-ambient-after-wildcard",
        "a[in_",
        TT.EOF,
        CLOSE_RSQB | {TT.NAME},
        "Unterminated ambient 'a'",
        5,
    ),
    ErrCase("unterminated-group", "(open a", TT.EOF, CLOSE_RPAR, "Unterminated group", 7),
    ErrCase("wrong-closer-group", "(open a]", TT.RSQB, CLOSE_RPAR, "Expected ')' to close group", 7),
    ErrCase("wrong-closer-ambient", "a[open b)", TT.RPAR, CLOSE_RSQB, "Expected ']' to close ambient", 8),
    ErrCase("stray-closer", "a[] ]", TT.RSQB, AFTER_TOP, "Unexpected ']' after expression", 4),
    ErrCase("stray-closer-after-wildcard", "open_ )", TT.RPAR, AFTER_TOP | {TT.NAME}, "after expression", 6),
    ErrCase("juxtaposed-terms", "a[] b[]", TT.NAME, AFTER_TOP, "Unexpected identifier", 4),
    ErrCase("empty-body-spaced", "a[ ]", TT.RSQB, TERM_START, "Unexpected ']'", 3),
    ErrCase("empty-group", "()", TT.RPAR, TERM_START, "Unexpected ')'", 1),
    ErrCase("open-without-name", "open", TT.EOF, frozenset({TT.NAME}), "Expected identifier after 'open'", 4),
    ErrCase("in-with-keyword", "in out", TT.OUT, frozenset({TT.NAME}), "Expected identifier after 'in'", 3),
    ErrCase("out-then-dot", "out .", TT.DOT, frozenset({TT.NAME}), "Expected identifier after 'out'"),
    ErrCase("trailing-pipe", "a[] |", TT.EOF, TERM_START, "Unexpected end of input"),
    ErrCase("trailing-dot", "open a.", TT.EOF, TERM_START, "Unexpected end of input"),
    ErrCase("double-pipe", "a[] || b[]", TT.PIPE, TERM_START, "Unexpected '|'"),
    ErrCase("leading-dot", ".in a", TT.DOT, TERM_START, "Unexpected '.'"),
    ErrCase("keyword-as-ambient-name", "in[]", TT.EMPTY, frozenset({TT.NAME}), "Expected identifier after 'in'"),
    ErrCase("create-unreachable", "create x", TT.CREATE, TERM_START, "Unexpected 'create'", 0),
    ErrCase("deploy-unreachable", "a[deploy x]", TT.DEPLOY, TERM_START, "Unexpected 'deploy'", 2),
]


@pytest.mark.parametrize("case", PARSE_ERROR_CASES, ids=lambda case: case.name)
def test_parse_errors(case: ErrCase) -> None:
    err = expect_parse_error(case.source)

    assert isinstance(err, AmbientsSyntaxError)
    assert err.token.type == case.token
    assert err.expected == case.expected
    assert case.msg in str(err)
    assert err.at_eof == (case.token == TT.EOF)
    if case.pos is not None:
        assert err.token.pos == case.pos


def test_parse_error_reports_line_and_column() -> None:
    err = expect_parse_error("a[\n  in b\n  | create\n]")
    assert err.token.type == TT.CREATE
    assert err.token.value == "create"
    assert (err.token.line, err.token.column) == (3, 5)
    assert "at line 3, col 5" in str(err)


def test_parse_source_raises_before_lowering() -> None:
    with pytest.raises(ParseError):
        parse_source("a[in b")


def test_lex_error_surfaces_through_parse() -> None:
    with pytest.raises(LexError) as exc_info:
        parse("a[in b2]")
    assert exc_info.value.pos == 6


def test_errors_share_base_class() -> None:
    for source in ("a[in b", "a[in b9]"):
        with pytest.raises(AmbientsSyntaxError):
            parse(source)


def test_each_call_fails_independently() -> None:
    sources = ["a[in b", "a[in b]", "open", "open_"]
    outcomes = []
    for source in sources:
        try:
            parse(source)
        except ParseError:
            outcomes.append("error")
        else:
            outcomes.append("ok")
    assert outcomes == ["error", "ok", "error", "ok"]
