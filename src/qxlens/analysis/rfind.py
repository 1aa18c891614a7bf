"""Backward matching over source text.

A *matcher* is a function ``(source, pos) -> start | None`` that matches a
pattern ending exactly at ``pos`` and returns where the match starts. Small
primitive matchers are combined with ``seq``, ``alt`` and ``maybe`` into the
grammars used by the scanner and the feature modules, so those grammars read
declaratively and every piece can be tested on its own.

``rfind`` is the forward-regex counterpart: the last match of a pattern that
lies entirely before a position.

Usage::

    member_dot = alt(literal("?."), literal("."))
    call_site = seq(identifier(), member_dot, identifier())
    start = call_site("foo.bar", 7)  # -> 0
"""

from __future__ import annotations

import re
from collections.abc import Callable

from qxlens.analysis.text import CLOSING_BRACKETS, find_matching_bracket, is_identifier_char

Matcher = Callable[[str, int], int | None]

DEFAULT_PATTERN_WINDOW = 512


def rfind(source: str, pos: int, pattern: str | re.Pattern[str]) -> re.Match[str] | None:
    """Return the last match of *pattern* that ends at or before *pos*.

    Matching runs forward over ``source[:pos]``; later matches win, so the
    result is the closest preceding occurrence.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    last: re.Match[str] | None = None
    for match in pattern.finditer(source, 0, max(0, min(pos, len(source)))):
        last = match
    return last


def literal(text: str) -> Matcher:
    """Match *text* verbatim."""

    def match(source: str, pos: int) -> int | None:
        start = pos - len(text)
        if start < 0 or not source.startswith(text, start):
            return None
        return start

    return match


def word(text: str) -> Matcher:
    """Match *text* as a whole word (not the tail of a longer identifier)."""
    inner = literal(text)

    def match(source: str, pos: int) -> int | None:
        start = inner(source, pos)
        if start is None or (start > 0 and is_identifier_char(source[start - 1])):
            return None
        return start

    return match


def identifier() -> Matcher:
    """Match the maximal identifier (``[A-Za-z_][A-Za-z0-9_]*``) ending at pos.

    Leading digits of the run are not part of it: ``1abc`` matches ``abc``.
    """

    def match(source: str, pos: int) -> int | None:
        start = pos
        while start > 0 and is_identifier_char(source[start - 1]):
            start -= 1
        while start < pos and source[start].isdigit():
            start += 1
        if start == pos:
            return None
        return start

    return match


def whitespace(required: bool = True) -> Matcher:
    """Match a run of whitespace; an empty run only if not *required*."""

    def match(source: str, pos: int) -> int | None:
        start = pos
        while start > 0 and source[start - 1].isspace():
            start -= 1
        if required and start == pos:
            return None
        return start

    return match


def bracketed() -> Matcher:
    """Match a balanced ``(...)``, ``[...]`` or ``{...}`` group ending at pos."""

    def match(source: str, pos: int) -> int | None:
        if pos <= 0 or source[pos - 1] not in CLOSING_BRACKETS:
            return None
        start = find_matching_bracket(source, pos - 1)
        return start if start >= 0 else None

    return match


def pattern(regex: str | re.Pattern[str], window: int = DEFAULT_PATTERN_WINDOW) -> Matcher:
    """Match a regular expression anchored to end at pos.

    Only the last *window* characters before pos are inspected; of the
    matches ending at pos, the one starting leftmost wins.
    """
    source_pattern = regex.pattern if isinstance(regex, re.Pattern) else regex
    anchored = re.compile(rf"(?:{source_pattern})\Z")

    def match(source: str, pos: int) -> int | None:
        found = anchored.search(source, max(0, pos - window), pos)
        return found.start() if found else None

    return match


def except_after(matcher: Matcher, chars: str) -> Matcher:
    """Match *matcher* unless the character before the match is one of *chars*."""

    def match(source: str, pos: int) -> int | None:
        start = matcher(source, pos)
        if start is None or (start > 0 and source[start - 1] in chars):
            return None
        return start

    return match


def seq(*matchers: Matcher) -> Matcher:
    """Match *matchers* in order; the last one ends at pos, each earlier one
    must end where the next one starts."""
    if not matchers:
        raise ValueError("seq() needs at least one matcher")

    def match(source: str, pos: int) -> int | None:
        start: int | None = pos
        for matcher in reversed(matchers):
            start = matcher(source, start)
            if start is None:
                return None
        return start

    return match


def alt(*matchers: Matcher) -> Matcher:
    """Try *matchers* left to right; the first that matches wins."""
    if not matchers:
        raise ValueError("alt() needs at least one matcher")

    def match(source: str, pos: int) -> int | None:
        for matcher in matchers:
            start = matcher(source, pos)
            if start is not None:
                return start
        return None

    return match


def maybe(matcher: Matcher) -> Matcher:
    """Match *matcher* if possible, otherwise match the empty string."""

    def match(source: str, pos: int) -> int | None:
        start = matcher(source, pos)
        return pos if start is None else start

    return match
