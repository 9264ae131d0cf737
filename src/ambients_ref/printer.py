"""Render Exec trees back to ambient surface syntax.

For any tree the parser produced, parse(render(tree)) == tree. Hand-built
trees that nest composites in ways the grammar cannot write directly (a
Parallel straight inside a Serial, say) get parentheses, which read back as
an explicit Group.
"""
from __future__ import annotations

from typing import Union

from .lexer_rd import Lexer, NAME_CHARS
from .nodes import (
    Ambient, Create, Deploy, Exec, Expr, Group, In, In_, Noop, Open, Open_,
    Out, Out_, Parallel, Serial, WILDCARD,
)

_KEYWORD = {
    Open: "open",
    In: "in",
    Out: "out",
    Open_: "open_",
    In_: "in_",
    Out_: "out_",
    Create: "create",
    Deploy: "deploy",
}


def render(node: Union[Exec, Expr]) -> str:
    if isinstance(node, Parallel):
        return " | ".join(_operand(item, (Parallel,)) for item in node.items)

    if isinstance(node, Serial):
        return ".".join(_operand(item, (Parallel, Serial)) for item in node.items)

    if isinstance(node, Group):
        return f"({render(node.body)})"

    if isinstance(node, Ambient):
        return f"{_name(node.name)}[{render(node.body)}]"

    if isinstance(node, Noop):
        return f"{_name(node.name)}[]"

    if isinstance(node, (Open_, In_, Out_)):
        keyword = _KEYWORD[type(node)]
        if node.name == WILDCARD:
            return keyword
        return f"{keyword} {_name(node.name)}"

    if isinstance(node, (Open, In, Out, Create, Deploy)):
        return f"{_KEYWORD[type(node)]} {_name(node.name)}"

    raise TypeError(f"Cannot render {type(node).__name__}")


def _operand(node: Exec, needs_parens: tuple) -> str:
    text = render(node)
    if isinstance(node, needs_parens):
        return f"({text})"
    return text


def _name(name: str) -> str:
    """Reject names the lexer would not read back as a single identifier."""
    if not name or any(ch not in NAME_CHARS for ch in name):
        raise ValueError(f"Not a valid ambient name: {name!r}")
    if name in Lexer.KEYWORDS:
        raise ValueError(f"Reserved word used as ambient name: {name!r}")
    return name
