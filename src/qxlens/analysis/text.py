"""Small text utilities shared by the scanner and the resolver.

- Bracket matching over raw source (no string/comment awareness)
- Identifier character classes
- Class-definition idiom detection (``qx.Class.define("a.b.C", {extend: x.Y})``)
- Type-name normalisation for documented types
"""

from __future__ import annotations

import re
from dataclasses import dataclass

IDENTIFIER = r"[A-Za-z_][A-Za-z_0-9]*"
MEMBER_CHAIN = rf"{IDENTIFIER}(?:\.{IDENTIFIER})*"

_IDENTIFIER_RE = re.compile(rf"{IDENTIFIER}\Z")

OPENING_BRACKETS = "([{"
CLOSING_BRACKETS = ")]}"
_PAIRS = {")": "(", "]": "[", "}": "{", "(": ")", "[": "]", "{": "}"}

# qx.Class.define("name", {...}) and its siblings for mixins, interfaces, themes
_CLASS_DEFINE_RE = re.compile(
    r"qx\.(?:Class|Mixin|Interface|Theme|Bootstrap)\.define\(\s*([\"'])(?P<name>"
    + MEMBER_CHAIN
    + r")\1\s*,\s*\{"
)
_EXTEND_RE = re.compile(rf"\bextend\s*:\s*(?P<super>{MEMBER_CHAIN})")

_TEMPLATE_ARGS_RE = re.compile(r"<.*>")
_BRACED_TYPE_RE = re.compile(r"\{(.*)\}")


def is_bracket(char: str) -> bool:
    return len(char) == 1 and char in _PAIRS


def is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def is_identifier(text: str) -> bool:
    """True if *text* is exactly one identifier."""
    return _IDENTIFIER_RE.match(text) is not None


def find_matching_bracket(source: str, pos: int) -> int:
    """Find the bracket matching the one at ``source[pos]``.

    Opening brackets are matched scanning forward, closing brackets scanning
    backward. Every bracket met on the way is pushed/popped on a stack; a
    pair of the wrong kind aborts the search.

    Returns:
        Index of the matching bracket, or -1 if it is unmatched or mismatched.

    Raises:
        ValueError: If ``source[pos]`` is not a bracket.
    """
    if not (0 <= pos < len(source)) or not is_bracket(source[pos]):
        raise ValueError(f"No bracket at position {pos}")

    stack = [source[pos]]
    if source[pos] in OPENING_BRACKETS:
        step, pushes = 1, OPENING_BRACKETS
    else:
        step, pushes = -1, CLOSING_BRACKETS

    i = pos + step
    while 0 <= i < len(source):
        char = source[i]
        if char in pushes:
            stack.append(char)
        elif is_bracket(char):
            if stack.pop() != _PAIRS[char]:
                return -1
            if not stack:
                return i
        i += step
    return -1


@dataclass(frozen=True)
class ClassDefinition:
    """The first class definition found in a source file."""

    name: str
    start: int
    super_class: str | None = None


def find_class_definition(source: str) -> ClassDefinition | None:
    """Find the class defined by *source* using the ``qx.*.define`` idiom.

    Only the first definition in the file is honoured; files that define
    several classes resolve everything against the first one. The
    superclass is the first ``extend:`` key after that definition.
    """
    match = _CLASS_DEFINE_RE.search(source)
    if match is None:
        return None
    extend = _EXTEND_RE.search(source, match.end())
    return ClassDefinition(
        name=match.group("name"),
        start=match.start(),
        super_class=extend.group("super") if extend else None,
    )


def strip_template_args(type_name: str) -> str:
    """Drop generic decoration: ``qx.data.Array<String>`` -> ``qx.data.Array``."""
    return _TEMPLATE_ARGS_RE.sub("", type_name).strip()


def braced_type(body: str) -> str | None:
    """Extract ``Type`` from a ``{Type} description`` documentation body."""
    match = _BRACED_TYPE_RE.search(body)
    if match is None:
        return None
    return match.group(1).strip() or None


def first_up(text: str) -> str:
    return text[:1].upper() + text[1:]


def first_down(text: str) -> str:
    return text[:1].lower() + text[1:]
