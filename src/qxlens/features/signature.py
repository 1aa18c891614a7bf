"""Signature help for method and constructor calls."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from qxlens.analysis.expressions import MemberAccess
from qxlens.analysis.scanner import scan
from qxlens.analysis.text import CLOSING_BRACKETS, MEMBER_CHAIN
from qxlens.context import ProjectContext
from qxlens.core.logging import with_request_id
from qxlens.namespace.database import NamespaceDatabase
from qxlens.namespace.models import MemberRecord

_NEW_CALL_RE = re.compile(rf"new\s+(?P<class_name>{MEMBER_CHAIN})\Z")


@dataclass(frozen=True)
class ParameterInfo:
    label: str
    documentation: str | None = None


@dataclass(frozen=True)
class SignatureInfo:
    label: str
    documentation: str | None = None
    parameters: list[ParameterInfo] = field(default_factory=list)


@dataclass(frozen=True)
class SignatureHelp:
    signatures: list[SignatureInfo]
    active_signature: int = 0
    active_parameter: int = 0


def find_open_call(source: str, offset: int) -> tuple[int, int] | None:
    """Locate the unclosed ``(`` enclosing *offset*.

    Walks backward skipping balanced groups. Commas at the call's own
    nesting level give the active argument; commas inside an unclosed
    array or object literal argument are not counted.

    Returns:
        ``(position of "(", active argument index)``, or None outside a call.
    """
    depth = 0
    commas = 0
    for i in range(min(offset, len(source)) - 1, -1, -1):
        char = source[i]
        if char in CLOSING_BRACKETS:
            depth += 1
        elif char in "([{":
            if depth > 0:
                depth -= 1
            elif char == "(":
                return i, commas
            else:
                commas = 0
        elif depth == 0:
            if char == ",":
                commas += 1
            elif char == ";":
                return None
    return None


@with_request_id
def signature_help(source: str, offset: int, ctx: ProjectContext) -> SignatureHelp | None:
    """Parameters of the call the cursor is in."""
    found = find_open_call(source, offset)
    if found is None:
        return None
    open_paren, active_parameter = found

    call_site = scan(source, open_paren)
    if call_site is None:
        return None

    constructor = _NEW_CALL_RE.match(call_site.text)
    if constructor is not None:
        class_name = constructor.group("class_name")
        record = ctx.database.record(class_name)
        if record is None or record.constructor is None:
            return None
        name, method = class_name, record.constructor
    else:
        node = ctx.parser.parse(call_site.text)
        if not isinstance(node, MemberAccess):
            return None
        owner = ctx.resolver.resolve_node(source, offset, node.object)
        if owner is None or not owner.is_class_like:
            return None
        found_method = find_method(ctx.database, owner.type_name, node.property)
        if found_method is None or not found_method.is_function:
            return None
        name, method = node.property, found_method

    if method.jsdoc is None or not method.jsdoc.params:
        return None
    parameters = [
        ParameterInfo(
            label=f"{param.param_name}: {param.type or 'any'}",
            documentation=param.description,
        )
        for param in method.jsdoc.params
    ]
    signature = SignatureInfo(
        label=f"{name}({', '.join(p.label for p in parameters)})",
        documentation=method.jsdoc.description,
        parameters=parameters,
    )
    return SignatureHelp(signatures=[signature], active_parameter=active_parameter)


def find_method(database: NamespaceDatabase, class_name: str, name: str) -> MemberRecord | None:
    """Method *name* as seen from *class_name*, with documented parameters if any.

    Inherited methods come from the superclass chain of the full class view;
    an override without ``@param`` documentation falls back to the method it
    overrides.
    """
    view = database.full_class_view(class_name)
    if view is None:
        return None
    method = view.members.get(name) or view.statics.get(name)

    visited: set[str] = set()
    while method is not None and not (method.jsdoc and method.jsdoc.params):
        ancestor = method.overridden_from
        if ancestor is None or ancestor in visited:
            break
        visited.add(ancestor)
        ancestor_view = database.full_class_view(ancestor)
        overridden = ancestor_view.member(name) if ancestor_view is not None else None
        if overridden is None:
            break
        method = overridden
    return method
