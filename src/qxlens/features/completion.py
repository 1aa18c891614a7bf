"""Member and namespace completion.

Triggered after ``expr.`` or ``expr?.``, optionally followed by the part
of a name already typed. The receiver expression is scanned backward from
the dot and resolved:

- a package offers its sub-packages and classes
- a class or instance offers its merged members and statics, plus the
  ``change<Name>`` event of every property

Without a receiver every known class name is offered. Items are not
filtered by the typed prefix; editors do that themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from qxlens.analysis.rfind import Matcher, pattern
from qxlens.analysis.scanner import scan
from qxlens.analysis.text import IDENTIFIER, first_up
from qxlens.analysis.types import TypeCategory
from qxlens.context import ProjectContext
from qxlens.core.logging import with_request_id
from qxlens.namespace.database import PackageInfo
from qxlens.namespace.models import MemberRecord
from qxlens.namespace.trie import NodeKind


class CompletionKind(str, Enum):
    PACKAGE = "package"
    CLASS = "class"
    METHOD = "method"
    FIELD = "field"
    EVENT = "event"


@dataclass(frozen=True)
class CompletionItem:
    label: str
    kind: CompletionKind
    detail: str | None = None
    documentation: str | None = None


def receiver_tail(window: int) -> Matcher:
    """``.`` / ``?.`` plus an optional partial name, ending at the cursor."""
    return pattern(rf"(?:\?\.|(?<!\.)\.)\s*(?:{IDENTIFIER})?", window)


@with_request_id
def complete(source: str, offset: int, ctx: ProjectContext) -> list[CompletionItem] | None:
    """Completion items at *offset*, or None when the receiver is unknown."""
    tail_start = receiver_tail(ctx.config.analysis.pattern_window)(source, offset)
    if tail_start is None:
        return [
            CompletionItem(label=name, kind=CompletionKind.CLASS)
            for name in ctx.database.class_names
        ]

    receiver = scan(source, tail_start)
    if receiver is None:
        return None
    type_info = ctx.resolver.resolve(source, tail_start, receiver.text)
    if type_info is None:
        return None

    if type_info.category is TypeCategory.PACKAGE:
        info = ctx.database.lookup(type_info.type_name)
        if not isinstance(info, PackageInfo):
            return None
        return [
            CompletionItem(
                label=child.name,
                kind=(
                    CompletionKind.CLASS if child.kind is NodeKind.CLASS else CompletionKind.PACKAGE
                ),
                detail=f"{type_info.type_name}.{child.name}",
            )
            for child in info.children
        ]

    if not type_info.is_class_like:
        return None
    view = ctx.database.full_class_view(type_info.type_name)
    if view is None:
        return None

    items: dict[str, CompletionItem] = {}
    for name, member in {**view.members, **view.statics}.items():
        items[name] = CompletionItem(
            label=name,
            kind=CompletionKind.METHOD if member.is_function else CompletionKind.FIELD,
            detail=_member_detail(view.class_name, member),
            documentation=member.jsdoc.description if member.jsdoc else None,
        )
    for name, prop in view.properties.items():
        event = prop.event or f"change{first_up(name)}"
        items.setdefault(
            event,
            CompletionItem(
                label=event,
                kind=CompletionKind.EVENT,
                detail=f"{prop.inherited_from or view.class_name}.{name}",
                documentation=prop.jsdoc.description if prop.jsdoc else None,
            ),
        )
    return sorted(items.values(), key=lambda item: item.label)


def _member_detail(class_name: str, member: MemberRecord) -> str:
    owner = member.mixin or member.inherited_from or class_name
    if member.jsdoc is None:
        return owner
    type_name = member.jsdoc.return_type if member.is_function else member.jsdoc.variable_type
    return f"{owner}: {type_name}" if type_name else owner
