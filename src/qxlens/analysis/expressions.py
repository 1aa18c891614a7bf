"""Expression AST consumed by the resolver.

The resolver only understands a closed set of expression shapes:

    Identifier     foo
    ThisKeyword    this
    SuperKeyword   super
    MemberAccess   obj.prop / obj?.prop
    Call           callee(args) / callee?.(args)
    New            new a.b.C(args)

Every node keeps the text it was parsed from, so rules can look names up
verbatim. Parsing is delegated to an ``ExpressionParser``; anything outside
the set above is a parse failure (``None``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Identifier:
    text: str

    @property
    def name(self) -> str:
        return self.text


@dataclass(frozen=True)
class ThisKeyword:
    text: str = "this"


@dataclass(frozen=True)
class SuperKeyword:
    text: str = "super"


@dataclass(frozen=True)
class MemberAccess:
    """``object.property``; *optional* for ``object?.property``."""

    text: str
    object: ExpressionNode
    property: str
    optional: bool = False


@dataclass(frozen=True)
class Call:
    text: str
    callee: ExpressionNode
    arguments: tuple[str, ...] = ()
    optional: bool = False


@dataclass(frozen=True)
class New:
    """``new Callee(args)``; *class_name* is the callee text."""

    text: str
    class_name: str
    arguments: tuple[str, ...] = ()


ExpressionNode = Identifier | ThisKeyword | SuperKeyword | MemberAccess | Call | New


def dotted_name(node: ExpressionNode) -> str | None:
    """``a.b.c`` for a plain (non-optional) identifier chain, else None."""
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, MemberAccess) and not node.optional:
        prefix = dotted_name(node.object)
        if prefix is not None:
            return f"{prefix}.{node.property}"
    return None


class ExpressionParser(Protocol):
    """Parses a short expression snippet.

    Implementations must be tolerant: invalid or partial input yields None,
    never an exception.
    """

    def parse(self, text: str) -> ExpressionNode | None: ...
