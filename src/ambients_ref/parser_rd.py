"""
Recursive Descent Parser for Ambients

Structure:
- Lexer: Token stream from source
- Parser: one method per precedence tier
- Parse tree: lark Tree/Token nodes, lowered to the Exec AST by lower.py

Grammar (loosest binding first):

    Execution    := SubExecution ('|' SubExecution)*
    SubExecution := ThirdTier ('.' ThirdTier)*
    ThirdTier    := '(' Execution ')'
                  | NAME '[' Execution ']'
                  | NAME '[]'
                  | ('open' | 'in' | 'out') NAME
                  | ('open_' | 'in_' | 'out_') NAME?

A tier with a single operand returns that operand unchanged, so 'parallel'
and 'serial' nodes always hold at least two children.
"""

import logging
from typing import FrozenSet, Iterable, List, Optional

from lark import Tree, Token

from .token_types import TT, Tok, AmbientsSyntaxError, describe
from .lexer_rd import tokenize
from .lower import lower
from .nodes import Exec
from .utils import parse_trace_enabled

log = logging.getLogger(__name__)

# Tree labels for the capability forms, keyed by their keyword token.
CAPABILITY_RULES = {
    TT.OPEN: 'open_cap',
    TT.IN: 'in_cap',
    TT.OUT: 'out_cap',
}

CO_CAPABILITY_RULES = {
    TT.CO_OPEN: 'open_cocap',
    TT.CO_IN: 'in_cocap',
    TT.CO_OUT: 'out_cocap',
}

# Tokens that may begin a ThirdTier.
TERM_START: FrozenSet[TT] = frozenset(
    [TT.LPAR, TT.NAME, *CAPABILITY_RULES, *CO_CAPABILITY_RULES]
)

# Deepest bracket nesting accepted; each level costs three parser frames.
MAX_NESTING = 200

# ============================================================================
# Parser
# ============================================================================

class ParseError(AmbientsSyntaxError):
    """Parse error with the offending token and the tokens accepted there"""

    def __init__(self, message: str, token: Tok, expected: Iterable[TT] = ()):
        self.message = message
        self.token = token
        self.expected: FrozenSet[TT] = frozenset(expected)
        super().__init__(f"{message} at line {token.line}, col {token.column}")

    @property
    def at_eof(self) -> bool:
        return self.token.type is TT.EOF


class Parser:
    """
    Recursive descent parser for ambient expressions.

    Precedence (lowest to highest):
    1. parallel (|)
    2. serial (.)
    3. terms (groups, ambients, capabilities)
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None)
        self.depth = 0
        self.trace = parse_trace_enabled()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if 0 <= idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1] if self.tokens else Tok(TT.EOF, None)

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
            self.current = self.tokens[self.pos]
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {describe(token_type)}, got {describe(self.current.type)}"
            raise ParseError(msg, self.current, {token_type})
        return self.advance()

    def _follow_set(self, closer: TT) -> FrozenSet[TT]:
        """Tokens acceptable right after a complete term inside *closer*'s scope."""
        expected = {TT.DOT, TT.PIPE, closer}
        # A bare co-capability could still have taken a name here.
        if self.pos > 0 and self.peek(-1).type in CO_CAPABILITY_RULES:
            expected.add(TT.NAME)
        return frozenset(expected)

    def _close(self, closer: TT, what: str) -> None:
        if self.check(closer):
            self.advance()
            return
        if self.check(TT.EOF):
            msg = f"Unterminated {what}, expected {describe(closer)}"
        else:
            msg = f"Expected {describe(closer)} to close {what}, got {describe(self.current.type)}"
        raise ParseError(msg, self.current, self._follow_set(closer))

    def _trace_rule(self, rule: str) -> None:
        if self.trace:
            log.debug("%s at %r", rule, self.current)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse the whole token stream as one Execution"""
        tree = self.parse_execution()

        if not self.check(TT.EOF):
            raise ParseError(
                f"Unexpected {describe(self.current.type)} after expression",
                self.current,
                self._follow_set(TT.EOF),
            )
        return tree

    # ========================================================================
    # Precedence Tiers
    # ========================================================================

    def parse_execution(self) -> Tree:
        """Parse parallel composition: sub | sub | ..."""
        self._trace_rule('Execution')
        first = self.parse_sub_execution()

        if not self.check(TT.PIPE):
            return first

        items = [first]
        while self.match(TT.PIPE):
            items.append(self.parse_sub_execution())

        return Tree('parallel', items)

    def parse_sub_execution(self) -> Tree:
        """Parse serial composition: term.term. ..."""
        self._trace_rule('SubExecution')
        first = self.parse_third_tier()

        if not self.check(TT.DOT):
            return first

        items = [first]
        while self.match(TT.DOT):
            items.append(self.parse_third_tier())

        return Tree('serial', items)

    def parse_nested(self) -> Tree:
        """Parse the Execution inside a bracket pair, bounding the depth"""
        if self.depth >= MAX_NESTING:
            raise ParseError("Nesting too deep", self.current, TERM_START)

        self.depth += 1
        try:
            return self.parse_execution()
        finally:
            self.depth -= 1

    def parse_third_tier(self) -> Tree:
        """
        Parse a term:
        - ( Execution )
        - name[ Execution ] / name[]
        - open name, in name, out name
        - open_ [name], in_ [name], out_ [name]
        """
        self._trace_rule('ThirdTier')

        if self.match(TT.LPAR):
            body = self.parse_nested()
            self._close(TT.RPAR, "group")
            return Tree('group', [body])

        if self.check(TT.NAME):
            name = self.advance()

            if self.match(TT.EMPTY):
                return Tree('noop', [_name_token(name)])

            if self.match(TT.LSQB):
                body = self.parse_nested()
                self._close(TT.RSQB, f"ambient {name.value!r}")
                return Tree('ambient', [_name_token(name), body])

            raise ParseError(
                f"Expected '[' or '[]' after ambient name {name.value!r}, "
                f"got {describe(self.current.type)}",
                self.current,
                {TT.LSQB, TT.EMPTY},
            )

        if self.current.type in CAPABILITY_RULES:
            op = self.advance()
            name = self.expect(TT.NAME, f"Expected identifier after {op.value!r}")
            return Tree(CAPABILITY_RULES[op.type], [_name_token(name)])

        if self.current.type in CO_CAPABILITY_RULES:
            op = self.advance()
            if self.check(TT.NAME):
                return Tree(CO_CAPABILITY_RULES[op.type], [_name_token(self.advance())])
            return Tree(CO_CAPABILITY_RULES[op.type], [])

        raise ParseError(
            f"Unexpected {describe(self.current.type)}",
            self.current,
            TERM_START,
        )


def _name_token(tok: Tok) -> Token:
    value = tok.value or ''
    return Token(
        'NAME', value,
        start_pos=tok.pos,
        line=tok.line,
        column=tok.column,
        end_pos=tok.pos + len(value),
    )

# ============================================================================
# Entry Points
# ============================================================================

def parse_source(source: str) -> Tree:
    """
    Parse ambient source text to a lark parse tree.

    Raises LexError or ParseError on the first problem found.
    """
    tokens = tokenize(source)
    log.debug("parsing %d tokens", len(tokens))
    parser = Parser(tokens)
    return parser.parse()


def parse(source: str) -> Exec:
    """Parse ambient source text to the Exec AST."""
    return lower(parse_source(source))
