"""
Expansion Output Model

The shadowing chain produced by expanding a capture list:

    Scope(Binding x) -> Scope(Binding y) -> ... -> BodyExpression

These are pure data classes. They:
    - Know nothing about Rust/Python/target syntax
    - Are immutable
    - Represent structure, not behavior
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .clauses import CaptureMode


@dataclass(frozen=True)
class Binding:
    """
    One `let`-style rebinding.

    Properties:
        name: Identifier being rebound (and read)
        mode: How the new value is derived from the previous binding
        method: Method name, only for CaptureMode.METHOD
    """

    name: str
    mode: CaptureMode
    method: Optional[str] = None


@dataclass(frozen=True)
class BodyExpression:
    """The innermost node: the body text, verbatim."""

    text: str


@dataclass(frozen=True)
class Scope:
    """
    A single nested lexical scope.

    The binding is established first, then `inner` is evaluated
    with the binding visible. `inner` is the scope's only content.
    """

    binding: Binding
    inner: "Node"


Node = Union[Scope, BodyExpression]


def iter_bindings(node: Node) -> Iterator[Binding]:
    """Yield bindings from the outermost scope inwards."""
    while isinstance(node, Scope):
        yield node.binding
        node = node.inner


def innermost(node: Node) -> BodyExpression:
    """Walk down the chain to the body."""
    while isinstance(node, Scope):
        node = node.inner
    return node


def depth(node: Node) -> int:
    """Number of nested scopes wrapping the body."""
    return sum(1 for _ in iter_bindings(node))
