"""prompt_toolkit lexer for live ambient syntax highlighting."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as AmbLexer, LexError
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "capability": "bold ansicyan",
    "cocapability": "bold ansimagenta",
    "reserved": "ansiyellow",
    "identifier": "",
    "operator": "bold",
    "punctuation": "",
    "error": "bold ansired",
}

_TT_GROUP = {
    TT.IN: "capability",
    TT.OUT: "capability",
    TT.OPEN: "capability",
    TT.CO_IN: "cocapability",
    TT.CO_OUT: "cocapability",
    TT.CO_OPEN: "cocapability",
    TT.CREATE: "reserved",
    TT.DEPLOY: "reserved",
    TT.NAME: "identifier",
    TT.PIPE: "operator",
    TT.DOT: "operator",
    TT.EMPTY: "punctuation",
    TT.LSQB: "punctuation",
    TT.RSQB: "punctuation",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
}


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments.

    Tokens scanned before a lexical error keep their styles; the rest of the
    line from the bad character on is styled as an error.
    """
    if not text:
        return [("", "")]

    lexer = AmbLexer(text)
    error_at = None
    try:
        while lexer.pos < len(text):
            lexer.scan_token()
    except LexError as exc:
        error_at = exc.pos

    result: StyleAndTextTuples = []
    pos = 0

    for tok in lexer.tokens:
        tok_text = tok.value or ""
        if tok.pos > pos:
            result.append(("", text[pos:tok.pos]))

        style = GROUP_STYLE.get(_TT_GROUP.get(tok.type, ""), "")
        result.append((style, tok_text))
        pos = tok.pos + len(tok_text)

    if error_at is not None:
        if error_at > pos:
            result.append(("", text[pos:error_at]))
        result.append((GROUP_STYLE["error"], text[error_at:]))
    elif pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class AmbientsLexer(Lexer):
    """prompt_toolkit Lexer that highlights ambient source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
