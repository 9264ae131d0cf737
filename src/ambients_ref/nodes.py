"""Process tree for ambient expressions.

Every node is a frozen dataclass; composite payloads are tuples, so a tree
cannot be changed once the parser hands it over.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union
from typing_extensions import TypeAlias, TypeGuard

# Target of a co-capability written without a name (`open_`, `in_`, `out_`).
WILDCARD = "*"

# ---------- Composition ----------

@dataclass(frozen=True)
class Parallel:
    items: Tuple['Exec', ...]

    def __post_init__(self) -> None:
        _require_operands("Parallel", self.items)

@dataclass(frozen=True)
class Serial:
    items: Tuple['Exec', ...]

    def __post_init__(self) -> None:
        _require_operands("Serial", self.items)

@dataclass(frozen=True)
class Group:
    body: 'Exec'

# ---------- Ambients ----------

@dataclass(frozen=True)
class Ambient:
    name: str
    body: 'Exec'

@dataclass(frozen=True)
class Noop:
    name: str

# ---------- Capabilities ----------

@dataclass(frozen=True)
class Open:
    name: str

@dataclass(frozen=True)
class In:
    name: str

@dataclass(frozen=True)
class Out:
    name: str

# ---------- Co-capabilities ----------

@dataclass(frozen=True)
class Open_:
    name: str = WILDCARD

@dataclass(frozen=True)
class In_:
    name: str = WILDCARD

@dataclass(frozen=True)
class Out_:
    name: str = WILDCARD

# ---------- Reserved expressions ----------
# Declared for completeness; no grammar rule produces them yet.

@dataclass(frozen=True)
class Create:
    name: str

@dataclass(frozen=True)
class Deploy:
    name: str


Exec: TypeAlias = Union[
    Parallel, Serial, Group, Ambient, Noop,
    Open, Open_, In, In_, Out, Out_,
]
Expr: TypeAlias = Union[Create, Deploy]

CAPABILITIES = (Open, In, Out)
CO_CAPABILITIES = (Open_, In_, Out_)


def _require_operands(kind: str, items: Tuple[Exec, ...]) -> None:
    if not isinstance(items, tuple):
        raise TypeError(f"{kind} items must be a tuple, got {type(items).__name__}")
    if len(items) < 2:
        raise ValueError(f"{kind} needs at least 2 operands, got {len(items)}")


def is_capability(node: Exec) -> TypeGuard[Union[Open, In, Out, Open_, In_, Out_]]:
    return isinstance(node, CAPABILITIES + CO_CAPABILITIES)


def children(node: Exec) -> Tuple[Exec, ...]:
    if isinstance(node, (Parallel, Serial)):
        return node.items
    if isinstance(node, (Group, Ambient)):
        return (node.body,)
    return ()


def walk(node: Exec) -> Iterator[Exec]:
    """Yield *node* and every node below it, pre-order."""
    stack: List[Exec] = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def ambient_names(node: Exec) -> List[str]:
    return [n.name for n in walk(node) if isinstance(n, (Ambient, Noop))]
