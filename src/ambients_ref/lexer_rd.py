"""
Lexer for Ambients - Recursive Descent Parser

Tokenizes ambient process expressions into a stream of tokens.

Features:
- Single-pass tokenization
- Fixed tokens take priority over the identifier pattern
- Position tracking (offset, line, column)
"""

from typing import List

from .token_types import TT, Tok, AmbientsSyntaxError

# Identifier alphabet: ASCII letters, '_', '-' and the single digit '0'.
NAME_CHARS = frozenset(
    'abcdefghijklmnopqrstuvwxyz'
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
    '0_-'
)

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Ambients lexer.

    Words are scanned with maximal munch over the identifier alphabet and
    then looked up in KEYWORDS, so a run that spells a fixed token exactly
    is always that token and never a name.
    """

    # Keyword mapping
    KEYWORDS = {
        'in': TT.IN,
        'out': TT.OUT,
        'open': TT.OPEN,
        'in_': TT.CO_IN,
        'out_': TT.CO_OUT,
        'open_': TT.CO_OPEN,
        'create': TT.CREATE,
        'deploy': TT.DEPLOY,
    }

    # Punctuation mapping: longest matches first to handle prefixes correctly
    PUNCTUATION = [
        ('[]', TT.EMPTY),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('|', TT.PIPE),
        ('.', TT.DOT),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.emit(TT.EOF, None, self.pos, self.line, self.column)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        if self.skip_whitespace():
            return

        if self.peek() in NAME_CHARS:
            self.scan_word()
            return

        self.scan_punctuation()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_word(self):
        """Scan identifier or keyword"""
        start, line, column = self.pos, self.line, self.column

        while self.peek() in NAME_CHARS:
            self.advance()

        value = self.source[start:self.pos]
        token_type = self.KEYWORDS.get(value, TT.NAME)
        self.emit(token_type, value, start, line, column)

    def scan_punctuation(self):
        """Scan composition operators and brackets"""
        for text, token_type in self.PUNCTUATION:
            if self.source.startswith(text, self.pos):
                start, line, column = self.pos, self.line, self.column
                self.advance(len(text))
                self.emit(token_type, text, start, line, column)
                return

        raise LexError(
            f"Unexpected character {self.peek()!r}",
            self.pos, self.line, self.column,
        )

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = self.source[self.pos:self.pos + n]
        for ch in result:
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos += len(result)
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace (newlines included), return True if any skipped"""
        skipped = False
        while self.pos < len(self.source) and self.peek().isspace():
            self.advance()
            skipped = True
        return skipped

    def emit(self, token_type: TT, value, pos: int, line: int, column: int):
        """Emit a token"""
        self.tokens.append(Tok(
            type=token_type,
            value=value,
            pos=pos,
            line=line,
            column=column,
        ))


class LexError(AmbientsSyntaxError):
    """Lexical analysis error"""

    def __init__(self, message: str, pos: int, line: int, column: int):
        self.message = message
        self.pos = pos
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}")


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
