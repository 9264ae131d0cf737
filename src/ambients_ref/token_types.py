"""
Token Types for the Ambients Parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Dict, Optional
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Identifiers
    NAME = auto()

    # Capabilities
    IN = auto()
    OUT = auto()
    OPEN = auto()

    # Co-capabilities
    CO_IN = auto()  # in_
    CO_OUT = auto()  # out_
    CO_OPEN = auto()  # open_

    # Reserved (lexed, never accepted by the grammar)
    CREATE = auto()
    DEPLOY = auto()

    # Composition
    PIPE = auto()  # |
    DOT = auto()  # .

    # Punctuation
    EMPTY = auto()  # []
    LSQB = auto()
    RSQB = auto()
    LPAR = auto()
    RPAR = auto()

    # Special
    EOF = auto()


# Surface text of every fixed token, used for diagnostics and rendering.
LITERALS: Dict[TT, str] = {
    TT.IN: 'in',
    TT.OUT: 'out',
    TT.OPEN: 'open',
    TT.CO_IN: 'in_',
    TT.CO_OUT: 'out_',
    TT.CO_OPEN: 'open_',
    TT.CREATE: 'create',
    TT.DEPLOY: 'deploy',
    TT.PIPE: '|',
    TT.DOT: '.',
    TT.EMPTY: '[]',
    TT.LSQB: '[',
    TT.RSQB: ']',
    TT.LPAR: '(',
    TT.RPAR: ')',
}


def describe(token_type: TT) -> str:
    """Human readable name of a token type"""
    if token_type is TT.NAME:
        return 'identifier'
    if token_type is TT.EOF:
        return 'end of input'
    return repr(LITERALS[token_type])


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: Optional[str]
    pos: int = 0
    line: int = 1
    column: int = 1

    def __repr__(self) -> str:
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class AmbientsSyntaxError(Exception):
    """Base class for lexical and grammatical errors"""
    pass
