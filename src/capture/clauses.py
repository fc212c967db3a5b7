"""
Capture Clause Model

Every capture list is represented as an ordered tuple of Clause objects
followed by an opaque Body, never as raw strings.

This ensures:
    - Grammar recognition happens exactly once (in the parser)
    - Validation and emission work on structure, not text
    - Capture lists can be serialized and inspected

ARCHITECTURAL RULE:
    Clauses know nothing about the host language.
    Rendering to Rust, Python or anything else belongs in backends.
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class CaptureMode(Enum):
    """
    How a captured name is rebound before the body evaluates.

    Keep this minimal. Every mode here must map to exactly one
    clause form in the grammar.
    """

    MOVE = "move"
    REF = "ref"
    REF_MUT = "ref mut"
    METHOD = "method"


class Clause(ABC):
    """
    Base class for all capture clauses.

    A clause rebinds exactly one identifier, reading its previous
    binding and shadowing it in a new scope.

    DO NOT:
        - Add rendering logic here (belongs in backends)
        - Add aliasing checks here (belongs in analyzer)

    Subclasses provide `identifier` and a `mode` property.

    This class is structure only.
    """
    pass


@dataclass(frozen=True)
class MoveClause(Clause):
    """
    `move x`: rebind x to itself.

    Effectively a no-op rebinding, but it forces the value
    into the new scope by value.
    """

    identifier: str
    offset: Optional[int] = field(default=None, compare=False)

    @property
    def mode(self) -> CaptureMode:
        return CaptureMode.MOVE


@dataclass(frozen=True)
class RefClause(Clause):
    """`ref x`: rebind x to a shared reference to its current value."""

    identifier: str
    offset: Optional[int] = field(default=None, compare=False)

    @property
    def mode(self) -> CaptureMode:
        return CaptureMode.REF


@dataclass(frozen=True)
class RefMutClause(Clause):
    """`ref mut x`: rebind x to an exclusive mutable reference."""

    identifier: str
    offset: Optional[int] = field(default=None, compare=False)

    @property
    def mode(self) -> CaptureMode:
        return CaptureMode.REF_MUT


@dataclass(frozen=True)
class MethodClause(Clause):
    """
    `m x`: rebind x to the result of calling `x.m()`.

    Example:
        clone z

    Becomes:
        MethodClause(method_name="clone", identifier="z")

    IMPORTANT:
        The method name is not checked against anything.
        Whether `z` actually has such a method is the host's problem.
    """

    method_name: str
    identifier: str
    offset: Optional[int] = field(default=None, compare=False)

    @property
    def mode(self) -> CaptureMode:
        return CaptureMode.METHOD


@dataclass(frozen=True)
class Body:
    """
    The terminal expression of a capture list.

    Opaque: the text is kept exactly as written (minus surrounding
    whitespace) and is never parsed or validated here.
    """

    text: str
    offset: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class CaptureList:
    """
    Root container: the clauses of one invocation site plus its body.

    INVARIANTS:
        - Clause order is the order of evaluation
        - Later clauses see only the rebindings of earlier clauses
        - Body is mandatory
    """

    clauses: Tuple[Clause, ...]
    body: Body

    def identifiers(self) -> Tuple[str, ...]:
        """Captured identifiers in clause order (duplicates kept)."""
        return tuple(clause.identifier for clause in self.clauses)

    def clauses_for(self, identifier: str) -> Tuple[Clause, ...]:
        """All clauses that rebind `identifier`, in order."""
        return tuple(c for c in self.clauses if c.identifier == identifier)


__all__ = [
    "CaptureMode",
    "Clause",
    "MoveClause",
    "RefClause",
    "RefMutClause",
    "MethodClause",
    "Body",
    "CaptureList",
]
