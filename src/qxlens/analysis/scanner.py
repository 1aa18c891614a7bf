"""Backward expression scanner.

Recovers the text of the addressable expression that ends exactly at a
source offset, without parsing the file. Recognised, right to left:

- identifiers chained by ``.`` or ``?.``
- call suffixes ``(...)`` and subscript suffixes ``[...]``, optionally
  introduced by ``?.``
- a leading ``new`` keyword followed by whitespace

Examples (cursor at the end)::

    "let x = 3; identifier_123?.getArray()[4]"  -> "identifier_123?.getArray()[4]"
    "foo(bar.baz()"                             -> "bar.baz()"
    "...spread"                                 -> "spread"

The scanner is a pure function of ``(source, pos)``.
"""

from __future__ import annotations

from dataclasses import dataclass

from qxlens.analysis.rfind import (
    alt,
    bracketed,
    except_after,
    identifier,
    literal,
    maybe,
    seq,
    whitespace,
    word,
)

# `.` of a member access; the last dot of a `...` spread token is not one
MEMBER_DOT = alt(literal("?."), except_after(literal("."), "."))
# `?.` between a callee/object and the bracket of an optional call/subscript
OPTIONAL_CHAIN = maybe(literal("?."))
NEW_PREFIX = seq(word("new"), whitespace(required=True))
IDENTIFIER = identifier()
BRACKETED = bracketed()


@dataclass(frozen=True)
class ExpressionSpan:
    """Text of an expression and where it sits in the source."""

    start: int
    end: int
    text: str


def scan(source: str, pos: int) -> ExpressionSpan | None:
    """Return the maximal expression ending exactly at *pos*.

    Returns:
        The span, or None when no identifier ends there or a bracket is
        unmatched or mismatched.
    """
    if not (0 < pos <= len(source)):
        return None
    start = _expression_start(source, pos)
    if start is None:
        return None
    return ExpressionSpan(start=start, end=pos, text=source[start:pos])


def _expression_start(source: str, pos: int) -> int | None:
    cursor = pos
    while True:
        opening = BRACKETED(source, cursor)
        if opening is not None:
            # suffix: (...) or [...], possibly optional-chained
            cursor = OPTIONAL_CHAIN(source, opening)
            continue
        if cursor > 0 and source[cursor - 1] in ")]}":
            # closing bracket without a partner
            return None

        ident_start = IDENTIFIER(source, cursor)
        if ident_start is None:
            return None
        cursor = ident_start

        dot_start = MEMBER_DOT(source, cursor)
        if dot_start is not None:
            cursor = dot_start
            continue

        new_start = NEW_PREFIX(source, cursor)
        return new_start if new_start is not None else cursor
