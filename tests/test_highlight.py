from __future__ import annotations

from prompt_toolkit.document import Document

from ambients_ref.highlight import GROUP_STYLE, AmbientsLexer, highlight_line


def _text(fragments) -> str:
    return "".join(text for _, text in fragments)


def test_fragments_cover_the_line() -> None:
    line = "  a[in b.open_] | c[]  "
    fragments = highlight_line(line)
    assert _text(fragments) == line


def test_capability_styles() -> None:
    fragments = dict((text, style) for style, text in highlight_line("a[in b] | b[in_ a]"))
    assert fragments["in"] == GROUP_STYLE["capability"]
    assert fragments["in_"] == GROUP_STYLE["cocapability"]
    assert fragments["|"] == GROUP_STYLE["operator"]
    assert fragments["a"] == GROUP_STYLE["identifier"]


def test_reserved_words_styled() -> None:
    styles = [style for style, text in highlight_line("create x") if text == "create"]
    assert styles == [GROUP_STYLE["reserved"]]


def test_lex_error_marks_remainder() -> None:
    line = "a[in b7]"
    fragments = highlight_line(line)
    assert _text(fragments) == line
    assert fragments[-1] == (GROUP_STYLE["error"], "7]")
    assert (GROUP_STYLE["capability"], "in") in fragments


def test_empty_line() -> None:
    assert highlight_line("") == [("", "")]
    assert highlight_line("   ") == [("", "   ")]


def test_document_lexer() -> None:
    doc = Document("a[\n  open_ x\n]")
    get_line = AmbientsLexer().lex_document(doc)

    assert _text(get_line(0)) == "a["
    assert (GROUP_STYLE["cocapability"], "open_") in get_line(1)
    assert _text(get_line(2)) == "]"
    assert get_line(5) == [("", "")]
