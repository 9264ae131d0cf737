"""Lowering from parser_rd parse trees to the Exec AST."""
from __future__ import annotations

from typing import List

from lark import Token, Transformer_NonRecursive, Tree
from lark.visitors import v_args

from .nodes import (
    Ambient, Exec, Group, In, In_, Noop, Open, Open_, Out, Out_,
    Parallel, Serial, WILDCARD,
)


def lower(tree: Tree) -> Exec:
    """Turn a parse tree from parser_rd into the Exec AST."""
    return ToExec().transform(tree)


class ToExec(Transformer_NonRecursive):
    """Bottom-up rewrite of parse tree labels into Exec nodes, without recursion."""

    def __default__(self, data, children, meta):
        raise TypeError(f"Unknown parse tree label: {data!r}")

    def NAME(self, tok: Token) -> str:
        return str(tok)

    # ---- composition ----
    def parallel(self, c: List[Exec]) -> Parallel:
        return Parallel(tuple(c))

    def serial(self, c: List[Exec]) -> Serial:
        return Serial(tuple(c))

    @v_args(inline=True)
    def group(self, body):
        return Group(body)

    # ---- ambients ----
    @v_args(inline=True)
    def ambient(self, name, body):
        return Ambient(name, body)

    @v_args(inline=True)
    def noop(self, name):
        return Noop(name)

    # ---- capabilities ----
    @v_args(inline=True)
    def open_cap(self, name):
        return Open(name)

    @v_args(inline=True)
    def in_cap(self, name):
        return In(name)

    @v_args(inline=True)
    def out_cap(self, name):
        return Out(name)

    # ---- co-capabilities: no name means any ambient ----
    @v_args(inline=True)
    def open_cocap(self, name=WILDCARD):
        return Open_(name)

    @v_args(inline=True)
    def in_cocap(self, name=WILDCARD):
        return In_(name)

    @v_args(inline=True)
    def out_cocap(self, name=WILDCARD):
        return Out_(name)
